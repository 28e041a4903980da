# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""File cache contracts and the in-memory backend."""

import hashlib
import logging
from typing import Protocol

from docpipe.model import FileRecord

logger = logging.getLogger(__name__)


class CacheError(RuntimeError):
    """Represent a fatal cache storage failure."""


class FileCache(Protocol):
    """Define point lookup and point write of analyzed files by path."""

    def lookup(self, path: str) -> FileRecord | None:
        """Return the stored record for ``path`` or ``None``."""

    def store(self, path: str, record: FileRecord) -> None:
        """Replace the stored record for ``path``.

        Raises:
            CacheError: If the backend cannot persist the record.
        """


def fingerprint(data: bytes) -> str:
    """Return the content fingerprint of raw file bytes.

    Args:
        data: File content.

    Returns:
        MD5 hex digest of ``data``.
    """
    return hashlib.md5(data).hexdigest()  # noqa: S324


class InMemoryFileCache:
    """Keep file records for the lifetime of the process."""

    def __init__(self) -> None:
        self._records: dict[str, FileRecord] = {}

    def lookup(self, path: str) -> FileRecord | None:
        return self._records.get(path)

    def store(self, path: str, record: FileRecord) -> None:
        self._records[path] = record
