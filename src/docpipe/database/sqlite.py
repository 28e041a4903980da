# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""SQLite file cache persisting analyzed files across runs."""

import json
import logging
import sqlite3

from datetime import datetime
from pathlib import Path

from docpipe.cache import CacheError
from docpipe.model import ErrorRecord, FileRecord
from docpipe.severity import Severity

logger = logging.getLogger(__name__)


class SQLiteFileCache:
    """Persist file records to a SQLite database."""

    def __init__(self, db_path: Path) -> None:
        """Initialize cache backend.

        Args:
            db_path: SQLite database file path.
        """
        self._db_path = db_path

    def lookup(self, path: str) -> FileRecord | None:
        """Load the stored record for one path.

        Args:
            path: Project-relative file path.

        Returns:
            Stored record, or ``None`` if the path was never stored.

        Raises:
            CacheError: If the database cannot be read.
        """
        connection = self._connect()
        try:
            self._ensure_schema(connection=connection)
            row = connection.execute(
                "SELECT fingerprint, last_analyzed FROM files WHERE path = ?",
                (path,),
            ).fetchone()
            if row is None:
                return None
            error_rows = connection.execute(
                "SELECT severity, code, context, line FROM file_errors "
                "WHERE path = ? ORDER BY position",
                (path,),
            ).fetchall()
        except sqlite3.DatabaseError as exc:
            logger.warning(
                f"SQLite cache lookup failed (db_path={self._db_path} path={path} error={exc})"
            )
            raise CacheError(str(exc)) from exc
        finally:
            connection.close()

        fingerprint, last_analyzed = row
        return FileRecord(
            path=path,
            fingerprint=fingerprint,
            last_analyzed=datetime.fromisoformat(last_analyzed),
            errors=tuple(
                ErrorRecord(
                    severity=Severity(severity),
                    code=code,
                    context=tuple(json.loads(context)),
                    line=line,
                )
                for severity, code, context, line in error_rows
            ),
        )

    def store(self, path: str, record: FileRecord) -> None:
        """Replace the record and all of its errors atomically.

        Args:
            path: Project-relative file path.
            record: Record to persist.

        Raises:
            CacheError: If schema setup or write operations fail.
        """
        connection = self._connect()
        try:
            self._ensure_schema(connection=connection)
            connection.execute("BEGIN")
            connection.execute("DELETE FROM file_errors WHERE path = ?", (path,))
            connection.execute(
                "INSERT OR REPLACE INTO files (path, fingerprint, last_analyzed) "
                "VALUES (?, ?, ?)",
                (path, record.fingerprint, record.last_analyzed.isoformat()),
            )
            connection.executemany(
                "INSERT INTO file_errors ("
                "path, position, severity, code, context, line"
                ") VALUES (?, ?, ?, ?, ?, ?)",
                [
                    (
                        path,
                        position,
                        int(error.severity),
                        error.code,
                        json.dumps(list(error.context)),
                        error.line,
                    )
                    for position, error in enumerate(record.errors)
                ],
            )
            connection.commit()
        except sqlite3.DatabaseError as exc:
            connection.rollback()
            logger.warning(
                f"SQLite cache store failed (db_path={self._db_path} path={path} error={exc})"
            )
            raise CacheError(str(exc)) from exc
        finally:
            connection.close()

    def clear(self) -> None:
        """Remove every cached record.

        Raises:
            CacheError: If the database cannot be written.
        """
        connection = self._connect()
        try:
            self._ensure_schema(connection=connection)
            connection.execute("BEGIN")
            connection.execute("DELETE FROM file_errors")
            connection.execute("DELETE FROM files")
            connection.commit()
        except sqlite3.DatabaseError as exc:
            connection.rollback()
            logger.warning(
                f"SQLite cache clear failed (db_path={self._db_path} error={exc})"
            )
            raise CacheError(str(exc)) from exc
        finally:
            connection.close()

    def _connect(self) -> sqlite3.Connection:
        try:
            # Autocommit mode; transactions are opened explicitly with BEGIN.
            return sqlite3.connect(self._db_path, isolation_level=None)
        except sqlite3.Error as exc:
            logger.warning(
                f"SQLite cache unavailable (db_path={self._db_path} error={exc})"
            )
            raise CacheError(str(exc)) from exc

    def _ensure_schema(self, connection: sqlite3.Connection) -> None:
        """Create required tables and indexes when missing.

        Args:
            connection: Open SQLite connection.
        """
        connection.execute(
            "CREATE TABLE IF NOT EXISTS files ("
            "path TEXT PRIMARY KEY, "
            "fingerprint TEXT NOT NULL, "
            "last_analyzed TEXT NOT NULL"
            ")"
        )
        connection.execute(
            "CREATE TABLE IF NOT EXISTS file_errors ("
            "id INTEGER PRIMARY KEY, "
            "path TEXT NOT NULL REFERENCES files(path), "
            "position INTEGER NOT NULL, "
            "severity INTEGER NOT NULL, "
            "code TEXT NOT NULL, "
            "context TEXT NOT NULL, "
            "line INTEGER"
            ")"
        )
        connection.execute(
            "CREATE INDEX IF NOT EXISTS idx_file_errors_path ON file_errors(path)"
        )
