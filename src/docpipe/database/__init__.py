# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Persistent cache backends."""

from docpipe.database.sqlite import SQLiteFileCache

__all__ = ["SQLiteFileCache"]
