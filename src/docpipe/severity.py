# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Severity ordering and verbosity thresholds."""

from enum import Enum, IntEnum


class Severity(IntEnum):
    """Ordered severity of a recorded error or log event."""

    DEBUG = 0
    NOTICE = 1
    INFO = 2
    WARNING = 3
    ERROR = 4
    ALERT = 5
    CRITICAL = 6
    EMERGENCY = 7


class Verbosity(str, Enum):
    """Output verbosity selected on the command line."""

    NORMAL = "normal"
    DEBUG = "debug"


DEFAULT_THRESHOLD = Severity.ERROR


def threshold_for(verbosity: Verbosity) -> Severity:
    """Return the minimum severity rendered for a verbosity."""
    if verbosity is Verbosity.DEBUG:
        return Severity.DEBUG
    return DEFAULT_THRESHOLD


def should_emit(priority: Severity, threshold: Severity) -> bool:
    """Return whether an event of ``priority`` passes ``threshold``."""
    return priority >= threshold
