"""Tests for easymoney.store.kv adapters and schema."""

import asyncio
import sqlite3
from pathlib import Path

import pytest

from easymoney.store.kv import MemoryKeyValueStore, PersistWriteError, SqliteKeyValueStore, StorageError
from easymoney.store.schema import database_exists, get_db_path, init_database


@pytest.fixture
def sqlite_store(tmp_path: Path) -> SqliteKeyValueStore:
    db_path = tmp_path / "easymoney.db"
    init_database(db_path)
    return SqliteKeyValueStore(db_path)


class TestSchema:
    """Tests for database path and initialization."""

    def test_init_creates_file(self, tmp_path: Path) -> None:
        """Should create the database and parent directories."""
        db_path = tmp_path / "nested" / "easymoney.db"

        init_database(db_path)

        assert database_exists(db_path)

    def test_init_is_idempotent(self, tmp_path: Path) -> None:
        """Should allow running twice."""
        db_path = tmp_path / "easymoney.db"

        init_database(db_path)
        init_database(db_path)

        with sqlite3.connect(db_path) as conn:
            tables = {row[0] for row in conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")}
        assert "kv" in tables

    def test_db_path_uses_xdg(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Should place the database under XDG_DATA_HOME."""
        monkeypatch.delenv("EASYMONEY_DB", raising=False)
        monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path))

        assert get_db_path() == tmp_path / "easymoney" / "easymoney.db"

    def test_db_path_env_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Should honour EASYMONEY_DB."""
        monkeypatch.setenv("EASYMONEY_DB", str(tmp_path / "other.db"))

        assert get_db_path() == tmp_path / "other.db"


class TestSqliteKeyValueStore:
    """Tests for SqliteKeyValueStore."""

    def test_set_and_get(self, sqlite_store: SqliteKeyValueStore) -> None:
        """Should read back what was written."""
        assert asyncio.run(sqlite_store.set_string("transactions_2024-03", "[]")) is True
        assert asyncio.run(sqlite_store.get_string("transactions_2024-03")) == "[]"

    def test_overwrite(self, sqlite_store: SqliteKeyValueStore) -> None:
        """Should replace an existing value."""

        async def run() -> str | None:
            await sqlite_store.set_string("k", "first")
            await sqlite_store.set_string("k", "second")
            return await sqlite_store.get_string("k")

        assert asyncio.run(run()) == "second"

    def test_missing_key(self, sqlite_store: SqliteKeyValueStore) -> None:
        """Should return None for an absent key."""
        assert asyncio.run(sqlite_store.get_string("nope")) is None

    def test_keys_and_remove(self, sqlite_store: SqliteKeyValueStore) -> None:
        """Should list keys and remove one."""

        async def run() -> tuple[bool, bool, set[str]]:
            await sqlite_store.set_string("a", "1")
            await sqlite_store.set_string("b", "2")
            removed = await sqlite_store.remove_key("a")
            removed_again = await sqlite_store.remove_key("a")
            return removed, removed_again, await sqlite_store.get_all_keys()

        removed, removed_again, keys = asyncio.run(run())

        assert removed is True
        assert removed_again is False
        assert keys == {"b"}

    def test_write_without_schema_raises(self, tmp_path: Path) -> None:
        """Should raise PersistWriteError when the table is missing."""
        store = SqliteKeyValueStore(tmp_path / "empty.db")

        with pytest.raises(PersistWriteError):
            asyncio.run(store.set_string("k", "v"))

    def test_read_without_schema_raises(self, tmp_path: Path) -> None:
        """Should raise StorageError when reading fails."""
        store = SqliteKeyValueStore(tmp_path / "empty.db")

        with pytest.raises(StorageError):
            asyncio.run(store.get_all_keys())


class TestBooleanFlags:
    """Tests for get_bool/set_bool."""

    def test_round_trip(self) -> None:
        """Should store booleans as true/false strings."""
        store = MemoryKeyValueStore()

        asyncio.run(store.set_bool("flag", False))

        assert store.data["flag"] == "false"
        assert asyncio.run(store.get_bool("flag")) is False

    def test_absent(self) -> None:
        """Should return None for an absent flag."""
        assert asyncio.run(MemoryKeyValueStore().get_bool("flag")) is None

    def test_non_boolean_value(self) -> None:
        """Should return None for a value that is not a boolean."""
        store = MemoryKeyValueStore({"flag": "maybe"})

        assert asyncio.run(store.get_bool("flag")) is None
