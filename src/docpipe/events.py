# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Event names, typed event payloads and the synchronous event bus."""

import logging
from collections import defaultdict
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, ClassVar

from docpipe.model import FileRecord
from docpipe.severity import Severity

logger = logging.getLogger(__name__)

FILE_IS_CACHED = "file.is_cached"
FILE_ANALYZED = "file.analyzed"
SYSTEM_LOG = "system.log"


@dataclass(frozen=True)
class FileCachedEvent:
    """Published when a file's stored analysis is still valid."""

    name: ClassVar[str] = FILE_IS_CACHED

    record: FileRecord


@dataclass(frozen=True)
class FileAnalyzedEvent:
    """Published after a file has been (re)analyzed and stored."""

    name: ClassVar[str] = FILE_ANALYZED

    record: FileRecord


@dataclass(frozen=True)
class LogEvent:
    """Represent one message routed through the ``system.log`` channel.

    Attributes:
        source: Component that created the event.
        priority: Severity used for threshold filtering and styling.
        message: Message template with ``%s`` style placeholders.
        context: Values substituted positionally into ``message``.
    """

    name: ClassVar[str] = SYSTEM_LOG

    source: object
    priority: Severity
    message: str
    context: tuple[Any, ...] = ()


Event = FileCachedEvent | FileAnalyzedEvent | LogEvent
Listener = Callable[[Any], None]


class EventBus:
    """Synchronous publish/subscribe dispatcher.

    Listeners run on the publisher's call stack in registration order. A
    listener exception propagates to the publisher.
    """

    def __init__(self) -> None:
        self._listeners: defaultdict[str, list[Listener]] = defaultdict(list)

    def subscribe(self, event_name: str, listener: Listener) -> None:
        """Register a listener for an event name.

        Args:
            event_name: Event identifier, e.g. ``"file.analyzed"``.
            listener: Callable invoked with the published event.

        Raises:
            ValueError: If ``event_name`` is empty.
        """
        if not event_name.strip():
            raise ValueError("event_name must be a non-empty string.")
        self._listeners[event_name].append(listener)
        logger.debug(f"Listener subscribed (event_name={event_name})")

    def publish(self, event_name: str, event: Event) -> None:
        """Invoke every listener registered for ``event_name``.

        Args:
            event_name: Event identifier.
            event: Payload passed to each listener.
        """
        # Snapshot; unsubscribing during dispatch is not supported.
        for listener in list(self._listeners.get(event_name, ())):
            listener(event)

    def listener_count(self, event_name: str) -> int:
        """Return how many listeners are registered for ``event_name``."""
        return len(self._listeners.get(event_name, ()))
