# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Domain models for analyzed files."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from docpipe.severity import Severity

ContextValue = str | int | float | bool | None

_CONTEXT_TYPES = (str, int, float, bool)


@dataclass(frozen=True)
class ErrorRecord:
    """Represent one problem recorded while analyzing a file.

    Attributes:
        severity: Severity of the problem.
        code: Message template with printf-style ``%s`` placeholders.
        context: Values substituted positionally into ``code``. Only JSON
            scalars (``str``, ``int``, ``float``, ``bool``, ``None``) are
            accepted so a cached record renders like a fresh one.
        line: Source line the problem refers to, when known.

    Raises:
        TypeError: If a context value is not a JSON scalar.
    """

    severity: Severity
    code: str
    context: tuple[ContextValue, ...] = ()
    line: int | None = None

    def __post_init__(self) -> None:
        invalid = [
            value
            for value in self.context
            if value is not None and not isinstance(value, _CONTEXT_TYPES)
        ]
        if invalid:
            raise TypeError(
                f"Error context values must be JSON scalars (code={self.code!r} invalid={invalid!r})"
            )
        # Normalize lists and other sequences to a tuple.
        object.__setattr__(self, "context", tuple(self.context))

    def render(self) -> str:
        """Return the message with its context substituted."""
        return render_message(self.code, self.context)


@dataclass(frozen=True)
class FileRecord:
    """Represent the cached analysis outcome of one file.

    Attributes:
        path: Project-relative source file path.
        fingerprint: MD5 hex digest of the file content at analysis time.
        last_analyzed: UTC timestamp of the analysis.
        errors: Recorded errors in source order.
    """

    path: str
    fingerprint: str
    last_analyzed: datetime
    errors: tuple[ErrorRecord, ...] = field(default_factory=tuple)

    def max_severity(self) -> Severity | None:
        """Return the highest recorded severity, or ``None`` without errors."""
        if not self.errors:
            return None
        return max(error.severity for error in self.errors)


def render_message(template: str, context: tuple[Any, ...]) -> str:
    """Substitute context values positionally into a message template.

    Args:
        template: Message template with ``%s`` style placeholders.
        context: Values for the placeholders.

    Returns:
        Rendered message. A template without context is returned verbatim.

    Raises:
        ValueError: If the placeholders do not match the context.
    """
    if not context:
        return template
    try:
        return template % tuple(context)
    except (TypeError, ValueError) as exc:
        raise ValueError(
            f"Message template does not match context (template={template!r} context={context!r})"
        ) from exc
