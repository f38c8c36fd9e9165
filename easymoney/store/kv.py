"""Key-value persistence adapters.

The ledger needs four operations over string keys and string values.
SqliteKeyValueStore is the durable implementation; MemoryKeyValueStore backs
tests and throwaway sessions.
"""

import asyncio
import sqlite3
from abc import ABC, abstractmethod
from pathlib import Path

from easymoney.logging_setup import get_logger
from easymoney.store.schema import get_db_path

logger = get_logger(__name__)

TRUE_VALUE = "true"
FALSE_VALUE = "false"


class StorageError(Exception):
    """Base exception for storage operations."""


class PersistWriteError(StorageError):
    """A durable write or removal failed."""


class KeyValueStore(ABC):
    """Async string key-value storage."""

    @abstractmethod
    async def get_all_keys(self) -> set[str]:
        """Return every stored key."""

    @abstractmethod
    async def get_string(self, key: str) -> str | None:
        """Return the value for key, or None if absent."""

    @abstractmethod
    async def set_string(self, key: str, value: str) -> bool:
        """Store value under key.

        Returns:
            True once the write is durable.

        Raises:
            PersistWriteError: If the write fails.
        """

    @abstractmethod
    async def remove_key(self, key: str) -> bool:
        """Remove key.

        Returns:
            True if a value was removed, False if the key was absent.

        Raises:
            PersistWriteError: If the removal fails.
        """

    async def get_bool(self, key: str) -> bool | None:
        """Return a boolean flag, or None if absent or not a boolean."""
        value = await self.get_string(key)
        if value == TRUE_VALUE:
            return True
        if value == FALSE_VALUE:
            return False
        return None

    async def set_bool(self, key: str, value: bool) -> bool:
        """Store a boolean flag."""
        return await self.set_string(key, TRUE_VALUE if value else FALSE_VALUE)


class MemoryKeyValueStore(KeyValueStore):
    """In-process dictionary storage."""

    def __init__(self, initial: dict[str, str] | None = None):
        self.data: dict[str, str] = dict(initial or {})

    async def get_all_keys(self) -> set[str]:
        return set(self.data)

    async def get_string(self, key: str) -> str | None:
        return self.data.get(key)

    async def set_string(self, key: str, value: str) -> bool:
        self.data[key] = value
        return True

    async def remove_key(self, key: str) -> bool:
        return self.data.pop(key, None) is not None


class SqliteKeyValueStore(KeyValueStore):
    """Key-value storage in the kv table of a SQLite database.

    Each call opens its own connection in a worker thread.
    """

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path if db_path is not None else get_db_path()

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(self.db_path)

    def _read_keys(self) -> set[str]:
        conn = self._connect()
        try:
            rows = conn.execute("SELECT key FROM kv").fetchall()
            return {row[0] for row in rows}
        finally:
            conn.close()

    def _read(self, key: str) -> str | None:
        conn = self._connect()
        try:
            row = conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
            return row[0] if row else None
        finally:
            conn.close()

    def _write(self, key: str, value: str) -> bool:
        conn = self._connect()
        try:
            conn.execute(
                "INSERT INTO kv (key, value) VALUES (?, ?) ON CONFLICT(key) DO UPDATE SET value = excluded.value",
                (key, value),
            )
            conn.commit()
            return True
        except sqlite3.Error:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _delete(self, key: str) -> bool:
        conn = self._connect()
        try:
            cursor = conn.execute("DELETE FROM kv WHERE key = ?", (key,))
            conn.commit()
            return cursor.rowcount > 0
        except sqlite3.Error:
            conn.rollback()
            raise
        finally:
            conn.close()

    async def get_all_keys(self) -> set[str]:
        try:
            return await asyncio.to_thread(self._read_keys)
        except sqlite3.Error as e:
            raise StorageError(f"Could not list keys in {self.db_path}: {e}") from e

    async def get_string(self, key: str) -> str | None:
        try:
            return await asyncio.to_thread(self._read, key)
        except sqlite3.Error as e:
            raise StorageError(f"Could not read {key!r}: {e}") from e

    async def set_string(self, key: str, value: str) -> bool:
        try:
            result = await asyncio.to_thread(self._write, key, value)
        except sqlite3.Error as e:
            logger.error("Write of %s failed: %s", key, e)
            raise PersistWriteError(f"Could not write {key!r}: {e}") from e
        logger.debug("Wrote %s (%d bytes)", key, len(value))
        return result

    async def remove_key(self, key: str) -> bool:
        try:
            return await asyncio.to_thread(self._delete, key)
        except sqlite3.Error as e:
            logger.error("Removal of %s failed: %s", key, e)
            raise PersistWriteError(f"Could not remove {key!r}: {e}") from e
