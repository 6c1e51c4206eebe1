"""SQLite-backed persistent key-value store."""

from __future__ import annotations

import logging
import sqlite3
import threading
from pathlib import Path

from streamflow_stations.domain.ports.key_value_store import KeyValueStore

logger = logging.getLogger(__name__)

_SCHEMA = "CREATE TABLE IF NOT EXISTS kv (key TEXT PRIMARY KEY, value BLOB NOT NULL)"


class SqliteKeyValueStore(KeyValueStore):
    """Single-table SQLite store.

    Each write is one ``INSERT OR REPLACE`` statement in its own transaction,
    so readers see either the old or the new value for a key. A lock
    serializes access to the shared connection for callers on other threads.
    """

    def __init__(self, path: str | Path) -> None:
        """Open (and create if needed) the database file.

        Args:
            path: Database file path, or ":memory:".
        """
        self._path = str(path)
        if self._path != ":memory:":
            Path(self._path).parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()
        self._conn = sqlite3.connect(self._path, check_same_thread=False)
        with self._conn:
            self._conn.execute(_SCHEMA)
        logger.debug(f"Opened station cache database at {self._path}")

    def get(self, key: str) -> bytes | None:
        with self._lock:
            row = self._conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
        return bytes(row[0]) if row else None

    def set(self, key: str, value: bytes) -> bool:
        try:
            with self._lock, self._conn:
                self._conn.execute(
                    "INSERT OR REPLACE INTO kv (key, value) VALUES (?, ?)", (key, value)
                )
        except sqlite3.Error as e:
            logger.warning(f"Could not write cache key {key} to {self._path}: {e}")
            return False
        return True

    def delete(self, key: str) -> None:
        with self._lock, self._conn:
            self._conn.execute("DELETE FROM kv WHERE key = ?", (key,))

    def close(self) -> None:
        """Close the underlying connection."""
        with self._lock:
            self._conn.close()

    def __enter__(self) -> SqliteKeyValueStore:
        return self

    def __exit__(self, _exc_type: type | None, _exc_val: Exception | None, _exc_tb: object) -> None:
        self.close()
