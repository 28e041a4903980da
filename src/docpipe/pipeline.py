# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Incremental analysis pipeline."""

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Literal

from docpipe.analyzer import AnalysisFailure, Analyzer
from docpipe.cache import FileCache, fingerprint
from docpipe.events import (
    FILE_ANALYZED,
    FILE_IS_CACHED,
    SYSTEM_LOG,
    EventBus,
    FileAnalyzedEvent,
    FileCachedEvent,
    LogEvent,
)
from docpipe.model import FileRecord
from docpipe.severity import Severity

logger = logging.getLogger(__name__)

BuildStatus = Literal["completed", "completed_with_errors"]


def _utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


@dataclass
class BuildReport:
    """Summarize one sequential pipeline run.

    Attributes:
        records: Records of every successfully processed file, in order.
        failures: Files that could not be analyzed.
        cached_count: Number of cache hits.
        analyzed_count: Number of files (re)analyzed.
    """

    records: list[FileRecord] = field(default_factory=list)
    failures: list[AnalysisFailure] = field(default_factory=list)
    cached_count: int = 0
    analyzed_count: int = 0

    @property
    def status(self) -> BuildStatus:
        """Return ``completed_with_errors`` on failures or ERROR-level records."""
        if self.failures:
            return "completed_with_errors"
        for record in self.records:
            highest = record.max_severity()
            if highest is not None and highest >= Severity.ERROR:
                return "completed_with_errors"
        return "completed"


class AnalysisPipeline:
    """Decide cache hit or re-analysis per file and announce the outcome."""

    def __init__(
        self,
        root_path: Path,
        analyzer: Analyzer,
        cache: FileCache,
        bus: EventBus,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        """Initialize the pipeline.

        Args:
            root_path: Project root that relative paths are resolved against.
            analyzer: Analyzer run on cache misses.
            cache: Store of previously analyzed files.
            bus: Event bus receiving lifecycle and log events.
            clock: Source of analysis timestamps.
        """
        self._root_path = root_path
        self._analyzer = analyzer
        self._cache = cache
        self._bus = bus
        self._clock = clock

    def process_file(self, path: str) -> FileRecord:
        """Process one file and publish exactly one lifecycle event.

        Args:
            path: Project-relative file path.

        Returns:
            The cached record on a hit, otherwise the freshly stored record.

        Raises:
            AnalysisFailure: If the file cannot be read, decoded or analyzed.
                Nothing is stored and no lifecycle event is published.
        """
        record, _ = self._process(path)
        return record

    def _process(self, path: str) -> tuple[FileRecord, bool]:
        """Process one file and report whether the cache was hit."""
        try:
            content = (self._root_path / path).read_bytes()
        except OSError as exc:
            logger.warning(f"Failed to read file (file_path={path} error={exc})")
            raise AnalysisFailure(path=path, message=str(exc)) from exc
        current_fingerprint = fingerprint(content)

        cached = self._cache.lookup(path)
        if cached is not None and cached.fingerprint == current_fingerprint:
            logger.debug(f"Cache hit (file_path={path} fingerprint={current_fingerprint})")
            self._bus.publish(FILE_IS_CACHED, FileCachedEvent(record=cached))
            return cached, True

        try:
            source = content.decode("utf-8")
        except UnicodeDecodeError as exc:
            logger.warning(f"Failed to decode file (file_path={path} error={exc})")
            raise AnalysisFailure(path=path, message=str(exc)) from exc
        errors = self._analyzer.analyze(path, source)
        record = FileRecord(
            path=path,
            fingerprint=current_fingerprint,
            last_analyzed=self._clock(),
            errors=tuple(errors),
        )
        self._cache.store(path, record)
        logger.debug(
            f"Cache miss; file analyzed (file_path={path} fingerprint={current_fingerprint} errors={len(errors)})"
        )
        self._bus.publish(FILE_ANALYZED, FileAnalyzedEvent(record=record))
        return record, False

    def run(
        self, paths: Iterable[str], continue_on_error: bool = False
    ) -> BuildReport:
        """Process files sequentially in the given order.

        Args:
            paths: Project-relative file paths.
            continue_on_error: Record analysis failures and keep going
                instead of re-raising the first one.

        Returns:
            Run summary.

        Raises:
            AnalysisFailure: On the first failure unless ``continue_on_error``.
        """
        report = BuildReport()
        for path in paths:
            try:
                record, cache_hit = self._process(path)
            except AnalysisFailure as exc:
                if not continue_on_error:
                    raise
                report.failures.append(exc)
                self._bus.publish(
                    SYSTEM_LOG,
                    LogEvent(
                        source=self,
                        priority=Severity.CRITICAL,
                        message="Unable to analyze file %s: %s",
                        context=(exc.path, exc.message),
                    ),
                )
                continue
            if cache_hit:
                report.cached_count += 1
            else:
                report.analyzed_count += 1
            report.records.append(record)
        logger.info(
            f"Build completed (files={len(report.records)} cached={report.cached_count} analyzed={report.analyzed_count} failed={len(report.failures)})"
        )
        return report
