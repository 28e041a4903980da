import pytest

from docpipe.model import ErrorRecord, render_message
from docpipe.severity import (
    DEFAULT_THRESHOLD,
    Severity,
    Verbosity,
    should_emit,
    threshold_for,
)


def test_sev_001_should_emit_compares_against_threshold() -> None:
    assert should_emit(Severity.WARNING, Severity.ERROR) is False
    assert should_emit(Severity.ERROR, Severity.ERROR) is True
    assert should_emit(Severity.DEBUG, Severity.DEBUG) is True
    assert should_emit(Severity.NOTICE, Severity.DEBUG) is True
    assert should_emit(Severity.EMERGENCY, Severity.ERROR) is True


def test_sev_002_severities_are_totally_ordered() -> None:
    ordered = [
        Severity.DEBUG,
        Severity.NOTICE,
        Severity.INFO,
        Severity.WARNING,
        Severity.ERROR,
        Severity.ALERT,
        Severity.CRITICAL,
        Severity.EMERGENCY,
    ]

    assert sorted(Severity) == ordered


def test_sev_003_threshold_depends_on_verbosity() -> None:
    assert DEFAULT_THRESHOLD is Severity.ERROR
    assert threshold_for(Verbosity.NORMAL) is Severity.ERROR
    assert threshold_for(Verbosity.DEBUG) is Severity.DEBUG


def test_sev_004_render_message_substitutes_context_positionally() -> None:
    assert (
        render_message("Argument %s is missing from %s", ("x", "f"))
        == "Argument x is missing from f"
    )
    assert render_message("100% documented", ()) == "100% documented"
    assert (
        ErrorRecord(Severity.ERROR, "No summary for class %s", ("Foo",)).render()
        == "No summary for class Foo"
    )


def test_sev_005_render_message_rejects_mismatched_context() -> None:
    with pytest.raises(ValueError):
        render_message("%s and %s", ("only-one",))


def test_sev_006_error_record_context_accepts_only_json_scalars() -> None:
    record = ErrorRecord(Severity.INFO, "%s %s", ["a", 1])  # type: ignore[arg-type]
    assert record.context == ("a", 1)

    with pytest.raises(TypeError):
        ErrorRecord(Severity.INFO, "%s", (("nested", "tuple"),))  # type: ignore[arg-type]
    with pytest.raises(TypeError):
        ErrorRecord(Severity.INFO, "%s", (object(),))  # type: ignore[arg-type]
