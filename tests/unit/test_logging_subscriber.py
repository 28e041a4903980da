import io
import re
from datetime import datetime, timezone
from pathlib import Path

from docpipe.cache import InMemoryFileCache
from docpipe.events import (
    FILE_ANALYZED,
    FILE_IS_CACHED,
    SYSTEM_LOG,
    EventBus,
    FileAnalyzedEvent,
    FileCachedEvent,
    LogEvent,
)
from docpipe.logging_subscriber import (
    LoggingSubscriber,
    build_console,
    format_log_line,
)
from docpipe.model import ErrorRecord, FileRecord
from docpipe.pipeline import AnalysisPipeline
from docpipe.severity import Severity


def _strip_ansi(text: str) -> str:
    return re.sub(r"\x1b\[[0-9;]*m", "", text)


def _record(errors: tuple[ErrorRecord, ...]) -> FileRecord:
    return FileRecord(
        path="A.src",
        fingerprint="h1",
        last_analyzed=datetime(2026, 1, 1, tzinfo=timezone.utc),
        errors=errors,
    )


def _connected(threshold: Severity) -> tuple[EventBus, io.StringIO]:
    stdout = io.StringIO()
    bus = EventBus()
    LoggingSubscriber(console=build_console(stdout), threshold=threshold).connect(bus)
    return bus, stdout


def _lines(stdout: io.StringIO) -> list[str]:
    return _strip_ansi(stdout.getvalue()).splitlines()


class _OneWarningAnalyzer:
    def analyze(self, path: str, source: str) -> list[ErrorRecord]:
        return [ErrorRecord(Severity.WARNING, "W1")]


def test_log_001_format_wraps_by_priority() -> None:
    assert format_log_line(Severity.DEBUG, "d") == "  d"
    assert format_log_line(Severity.NOTICE, "n") == "  n"
    assert format_log_line(Severity.INFO, "i") == "  i"
    assert format_log_line(Severity.WARNING, "W1") == "  [comment]W1[/comment]"
    for severity in (
        Severity.ERROR,
        Severity.ALERT,
        Severity.CRITICAL,
        Severity.EMERGENCY,
    ):
        assert format_log_line(severity, "E") == "  [error]E[/error]"


def test_log_002_format_escapes_markup_in_messages() -> None:
    assert format_log_line(Severity.INFO, "list[int]") == "  list\\[int]"


def test_log_003_analyzed_file_prints_path_then_warning_at_debug_threshold(
    tmp_path: Path,
) -> None:
    (tmp_path / "A.src").write_text("source", encoding="utf-8")
    bus, stdout = _connected(Severity.DEBUG)
    pipeline = AnalysisPipeline(
        root_path=tmp_path,
        analyzer=_OneWarningAnalyzer(),
        cache=InMemoryFileCache(),
        bus=bus,
    )

    pipeline.process_file("A.src")

    assert _lines(stdout) == ["Parsed modified file A.src", "  W1"]


def test_log_004_warning_is_suppressed_at_default_threshold(tmp_path: Path) -> None:
    (tmp_path / "A.src").write_text("source", encoding="utf-8")
    bus, stdout = _connected(Severity.ERROR)
    pipeline = AnalysisPipeline(
        root_path=tmp_path,
        analyzer=_OneWarningAnalyzer(),
        cache=InMemoryFileCache(),
        bus=bus,
    )

    pipeline.process_file("A.src")

    assert _lines(stdout) == ["Parsed modified file A.src"]


def test_log_005_second_run_reports_cached_file_with_stored_errors(
    tmp_path: Path,
) -> None:
    (tmp_path / "A.src").write_text("source", encoding="utf-8")
    cache = InMemoryFileCache()
    bus, stdout = _connected(Severity.DEBUG)
    pipeline = AnalysisPipeline(
        root_path=tmp_path, analyzer=_OneWarningAnalyzer(), cache=cache, bus=bus
    )

    pipeline.process_file("A.src")
    pipeline.process_file("A.src")

    assert _lines(stdout) == [
        "Parsed modified file A.src",
        "  W1",
        "Found cached file A.src",
        "  W1",
    ]


def test_log_006_each_error_is_republished_as_log_event_in_order() -> None:
    bus, _ = _connected(Severity.DEBUG)
    received: list[LogEvent] = []
    bus.subscribe(SYSTEM_LOG, received.append)
    errors = (
        ErrorRecord(Severity.ERROR, "No summary for class %s", ("Foo",)),
        ErrorRecord(Severity.NOTICE, "No summary for function %s", ("_bar",)),
        ErrorRecord(Severity.WARNING, "Argument %s is missing", ("x",)),
    )

    bus.publish(FILE_IS_CACHED, FileCachedEvent(record=_record(errors)))

    assert [(event.priority, event.message, event.context) for event in received] == [
        (error.severity, error.code, error.context) for error in errors
    ]


def test_log_007_rendered_lines_substitute_context(tmp_path: Path) -> None:
    bus, stdout = _connected(Severity.DEBUG)
    errors = (
        ErrorRecord(Severity.ERROR, "No summary for class %s", ("Foo",)),
        ErrorRecord(Severity.DEBUG, "Checked %s symbols", (3,)),
    )

    bus.publish(FILE_ANALYZED, FileAnalyzedEvent(record=_record(errors)))

    assert _lines(stdout) == [
        "Parsed modified file A.src",
        "  No summary for class Foo",
        "  Checked 3 symbols",
    ]


def test_log_008_connect_twice_registers_listeners_once() -> None:
    stdout = io.StringIO()
    bus = EventBus()
    subscriber = LoggingSubscriber(console=build_console(stdout))

    subscriber.connect(bus)
    subscriber.connect(bus)
    bus.publish(
        FILE_ANALYZED,
        FileAnalyzedEvent(record=_record((ErrorRecord(Severity.ERROR, "E1"),))),
    )

    assert bus.listener_count(FILE_ANALYZED) == 1
    assert bus.listener_count(FILE_IS_CACHED) == 1
    assert bus.listener_count(SYSTEM_LOG) == 1
    assert _lines(stdout) == ["Parsed modified file A.src", "  E1"]


def test_log_009_log_channel_accepts_events_from_other_sources() -> None:
    bus, stdout = _connected(Severity.ERROR)

    bus.publish(
        SYSTEM_LOG,
        LogEvent(
            source=object(),
            priority=Severity.CRITICAL,
            message="Unable to analyze file %s: %s",
            context=("a.py", "invalid syntax"),
        ),
    )
    bus.publish(
        SYSTEM_LOG, LogEvent(source=object(), priority=Severity.INFO, message="hidden")
    )

    assert _lines(stdout) == ["  Unable to analyze file a.py: invalid syntax"]
