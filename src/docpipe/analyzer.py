"""Analyzer interfaces for per-file documentation checks."""

from typing import Protocol

from docpipe.model import ErrorRecord


class AnalysisFailure(RuntimeError):
    """Represent a fatal analysis failure for one file."""

    def __init__(self, path: str, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = path
        self.message = message


class Analyzer(Protocol):
    """Language-agnostic single-file analyzer contract."""

    def analyze(self, path: str, source: str) -> list[ErrorRecord]:
        """Analyze one file and return its recorded errors in source order.

        Raises:
            AnalysisFailure: If the file cannot be analyzed at all.
        """
