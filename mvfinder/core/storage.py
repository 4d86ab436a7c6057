"""
Durable key-value storage for mvfinder.

The collection is persisted as a handful of JSON strings under fixed keys
(see mvfinder.core.store). This module provides the storage port those
strings live in, with two implementations:

    SQLiteStorage:  a single SQLite file, used by the CLI
    MemoryStorage:  a dict, used by tests and throwaway sessions

Schema (SQLiteStorage):
    schema_version: single row with the schema version
    kv_store:       key TEXT PRIMARY KEY, value TEXT, updated_at TEXT

Usage:
    storage = SQLiteStorage(Path("~/.mvfinder/collection.db").expanduser())
    storage.set_many({"ARTIST_DATA_JSON": "...", "VIDEO_DATA_JSON": "..."})
    raw = storage.get("ARTIST_DATA_JSON")
"""

import sqlite3
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Generator, Mapping

from mvfinder.core.exceptions import StorageError


STORAGE_VERSION = 1


_SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS schema_version (
    version INTEGER PRIMARY KEY
);

CREATE TABLE IF NOT EXISTS kv_store (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT
);
"""


class KeyValueStorage(ABC):
    """
    Abstract string-to-string storage.

    set_many() must be atomic: either every key is written or none is.
    """

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the value stored under key, or None if absent."""

    @abstractmethod
    def set_many(self, items: Mapping[str, str]) -> None:
        """Write all items in one atomic step."""

    @abstractmethod
    def delete(self, *keys: str) -> None:
        """Remove keys. Absent keys are ignored."""

    @abstractmethod
    def keys(self) -> list[str]:
        """Return all stored keys."""

    def set(self, key: str, value: str) -> None:
        self.set_many({key: value})

    def close(self) -> None:
        pass


class MemoryStorage(KeyValueStorage):
    """In-memory storage backed by a plain dict."""

    def __init__(self, initial: Mapping[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set_many(self, items: Mapping[str, str]) -> None:
        self._data.update(items)

    def delete(self, *keys: str) -> None:
        for key in keys:
            self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)


class SQLiteStorage(KeyValueStorage):
    """
    Thread-safe SQLite key-value storage.

    One connection, opened lazily and kept for the lifetime of the object.
    Every public method holds self._lock, so one instance can be shared
    between threads.
    """

    def __init__(self, db_path: Path) -> None:
        self.db_path = db_path
        self._lock = threading.Lock()
        self._conn: sqlite3.Connection | None = None

        if not db_path.parent.exists():
            raise StorageError(
                f"Parent directory does not exist: {db_path.parent}",
                details={"path": str(db_path.parent)}
            )

        try:
            self._init_database()
        except sqlite3.Error as e:
            raise StorageError(
                f"Failed to initialize storage: {e}",
                details={"path": str(db_path)}
            ) from e

    @contextmanager
    def _get_connection(self) -> Generator[sqlite3.Connection, None, None]:
        if self._conn is None:
            self._conn = sqlite3.connect(
                str(self.db_path),
                timeout=30.0,
                check_same_thread=False  # guarded by _lock
            )
            self._conn.execute("PRAGMA journal_mode = WAL")
        yield self._conn

    def _init_database(self) -> None:
        with self._get_connection() as conn:
            conn.executescript(_SCHEMA_SQL)

            row = conn.execute("SELECT version FROM schema_version LIMIT 1").fetchone()

            if row is None:
                conn.execute("INSERT INTO schema_version (version) VALUES (?)", (STORAGE_VERSION,))
            elif row[0] != STORAGE_VERSION:
                raise StorageError(
                    f"Storage version mismatch: expected {STORAGE_VERSION}, got {row[0]}",
                    details={"expected": STORAGE_VERSION, "actual": row[0]}
                )
            conn.commit()

    def close(self) -> None:
        """Close the connection; a later call reopens it."""
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None

    # =========================================================================
    # Key-value operations
    # =========================================================================

    def get(self, key: str) -> str | None:
        with self._lock:
            try:
                with self._get_connection() as conn:
                    row = conn.execute("SELECT value FROM kv_store WHERE key = ?", (key,)).fetchone()
            except sqlite3.Error as e:
                raise StorageError(
                    f"Failed to read '{key}': {e}",
                    details={"path": str(self.db_path), "key": key}
                ) from e
        return row[0] if row else None

    def set_many(self, items: Mapping[str, str]) -> None:
        now = datetime.now(timezone.utc).isoformat()
        with self._lock:
            with self._get_connection() as conn:
                try:
                    with conn:
                        conn.executemany("""
                            INSERT INTO kv_store (key, value, updated_at)
                            VALUES (?, ?, ?)
                            ON CONFLICT(key) DO UPDATE SET
                                value = excluded.value,
                                updated_at = excluded.updated_at
                        """, [(key, value, now) for key, value in items.items()])
                except sqlite3.Error as e:
                    raise StorageError(
                        f"Failed to write {', '.join(items)}: {e}",
                        details={"path": str(self.db_path), "keys": list(items)}
                    ) from e

    def delete(self, *keys: str) -> None:
        if not keys:
            return
        with self._lock:
            with self._get_connection() as conn:
                try:
                    with conn:
                        conn.executemany("DELETE FROM kv_store WHERE key = ?", [(key,) for key in keys])
                except sqlite3.Error as e:
                    raise StorageError(
                        f"Failed to delete {', '.join(keys)}: {e}",
                        details={"path": str(self.db_path), "keys": list(keys)}
                    ) from e

    def keys(self) -> list[str]:
        with self._lock:
            try:
                with self._get_connection() as conn:
                    return [row[0] for row in conn.execute("SELECT key FROM kv_store ORDER BY key")]
            except sqlite3.Error as e:
                raise StorageError(
                    f"Failed to list keys: {e}",
                    details={"path": str(self.db_path)}
                ) from e
