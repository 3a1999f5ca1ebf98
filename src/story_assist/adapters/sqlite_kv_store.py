"""SQLite-backed key/value persistence gateway."""

from __future__ import annotations

import logging
import sqlite3
from datetime import UTC, datetime
from pathlib import Path

logger = logging.getLogger(__name__)


class SQLiteKeyValueStore:
    """Persist string values by key; reads and writes never raise on storage errors."""

    def __init__(self, db_path: Path) -> None:
        self._db_path = db_path
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._initialize_schema()

    def _connect(self) -> sqlite3.Connection:
        connection = sqlite3.connect(str(self._db_path))
        connection.row_factory = sqlite3.Row
        return connection

    def _initialize_schema(self) -> None:
        """Create the table; an unusable database leaves every later call degraded."""
        try:
            with self._connect() as connection:
                connection.execute(
                    """
                    CREATE TABLE IF NOT EXISTS kv_entries (
                        entry_key TEXT PRIMARY KEY,
                        entry_value TEXT NOT NULL,
                        updated_at_utc TEXT NOT NULL
                    )
                    """
                )
        except sqlite3.Error as exc:
            logger.warning("kv.init_failed db_path=%s error=%s", self._db_path, exc)

    def get(self, key: str) -> str | None:
        """Load one value; missing keys and unreadable storage both return None."""
        try:
            with self._connect() as connection:
                row = connection.execute(
                    "SELECT entry_value FROM kv_entries WHERE entry_key = ?",
                    (key,),
                ).fetchone()
        except sqlite3.Error as exc:
            logger.warning("kv.read_failed key=%s error=%s", key, exc)
            return None
        if row is None:
            return None
        return str(row["entry_value"])

    def set(self, key: str, value: str) -> None:
        """Write one value; failures are logged and the write is dropped."""
        now = datetime.now(UTC).isoformat()
        try:
            with self._connect() as connection:
                connection.execute(
                    """
                    INSERT INTO kv_entries (entry_key, entry_value, updated_at_utc)
                    VALUES (?, ?, ?)
                    ON CONFLICT(entry_key) DO UPDATE SET
                        entry_value = excluded.entry_value,
                        updated_at_utc = excluded.updated_at_utc
                    """,
                    (key, value, now),
                )
        except sqlite3.Error as exc:
            logger.warning("kv.write_failed key=%s error=%s", key, exc)

    def remove(self, key: str) -> None:
        try:
            with self._connect() as connection:
                connection.execute("DELETE FROM kv_entries WHERE entry_key = ?", (key,))
        except sqlite3.Error as exc:
            logger.warning("kv.remove_failed key=%s error=%s", key, exc)
