# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Render file lifecycle events and recorded errors to the console."""

import logging
import threading
from typing import TextIO

from rich.console import Console
from rich.markup import escape
from rich.theme import Theme

from docpipe.events import (
    FILE_ANALYZED,
    FILE_IS_CACHED,
    SYSTEM_LOG,
    EventBus,
    FileAnalyzedEvent,
    FileCachedEvent,
    LogEvent,
)
from docpipe.model import FileRecord, render_message
from docpipe.severity import DEFAULT_THRESHOLD, Severity, should_emit

logger = logging.getLogger(__name__)

OUTPUT_THEME = Theme(
    {
        "info": "green",
        "comment": "yellow",
        "error": "bold white on red",
    }
)

CACHED_FILE_MESSAGE = "Found cached file [info]{path}[/info]"
ANALYZED_FILE_MESSAGE = "Parsed modified file [info]{path}[/info]"

_ERROR_SEVERITIES = frozenset(
    {Severity.ERROR, Severity.ALERT, Severity.CRITICAL, Severity.EMERGENCY}
)


def build_console(stream: TextIO) -> Console:
    """Create the output console for a text stream.

    Args:
        stream: Target stream, usually standard output.

    Returns:
        Console using the output theme; markup is stripped on non-terminals.
    """
    return Console(
        file=stream,
        theme=OUTPUT_THEME,
        force_terminal=False,
        color_system="truecolor",
        highlight=False,
        soft_wrap=True,
    )


def format_log_line(priority: Severity, message: str) -> str:
    """Wrap a rendered message in the markup style of its priority.

    Args:
        priority: Event severity.
        message: Rendered message text.

    Returns:
        Two-space indented console markup.
    """
    text = escape(message)
    if priority is Severity.WARNING:
        text = f"[comment]{text}[/comment]"
    elif priority in _ERROR_SEVERITIES:
        text = f"[error]{text}[/error]"
    return f"  {text}"


class LoggingSubscriber:
    """Connect file lifecycle and log events to console output."""

    def __init__(self, console: Console, threshold: Severity = DEFAULT_THRESHOLD) -> None:
        """Initialize the subscriber.

        Args:
            console: Console receiving the rendered lines.
            threshold: Minimum severity of log events that are printed.
        """
        self._console = console
        self._threshold = threshold
        self._connected = False
        self._connect_lock = threading.Lock()

    def connect(self, bus: EventBus) -> None:
        """Register the lifecycle and log listeners once.

        Any second or later call is ignored.

        Args:
            bus: Event bus to listen on and re-dispatch log events to.
        """
        with self._connect_lock:
            if self._connected:
                logger.debug("Logging subscriber already connected; ignoring")
                return
            bus.subscribe(
                FILE_IS_CACHED,
                lambda event: self._on_file_cached(event, bus),
            )
            bus.subscribe(
                FILE_ANALYZED,
                lambda event: self._on_file_analyzed(event, bus),
            )
            bus.subscribe(SYSTEM_LOG, self.log_event)
            self._connected = True

    def _on_file_cached(self, event: FileCachedEvent, bus: EventBus) -> None:
        self._log_file_with_errors(event.record, bus, CACHED_FILE_MESSAGE)

    def _on_file_analyzed(self, event: FileAnalyzedEvent, bus: EventBus) -> None:
        self._log_file_with_errors(event.record, bus, ANALYZED_FILE_MESSAGE)

    def _log_file_with_errors(
        self, record: FileRecord, bus: EventBus, message: str
    ) -> None:
        """Print the file line, then publish one log event per recorded error.

        Args:
            record: Cached or freshly analyzed file record.
            bus: Bus the log events are published on.
            message: File line template with a ``{path}`` field.
        """
        self._console.print(message.format(path=escape(record.path)))
        for error in record.errors:
            bus.publish(
                SYSTEM_LOG,
                LogEvent(
                    source=self,
                    priority=error.severity,
                    message=error.code,
                    context=error.context,
                ),
            )

    def log_event(self, event: LogEvent) -> None:
        """Print a log event if its priority passes the threshold.

        Args:
            event: Event to filter and render.
        """
        if not should_emit(event.priority, self._threshold):
            return
        message = render_message(event.message, event.context)
        self._console.print(format_log_line(event.priority, message))
