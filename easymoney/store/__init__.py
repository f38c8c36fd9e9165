"""Store layer - provides persistence for the application.

This module re-exports the public storage API for easy importing.
"""

from easymoney.store.kv import (
    KeyValueStore,
    MemoryKeyValueStore,
    PersistWriteError,
    SqliteKeyValueStore,
    StorageError,
)
from easymoney.store.ledger import (
    TRANSACTIONS_PREFIX,
    LedgerChange,
    LedgerState,
    LedgerStore,
    LoadFailure,
    storage_key,
)
from easymoney.store.schema import database_exists, get_db_path, init_database

__all__ = [
    # Schema
    "database_exists",
    "get_db_path",
    "init_database",
    # Key-value adapters
    "KeyValueStore",
    "MemoryKeyValueStore",
    "SqliteKeyValueStore",
    "StorageError",
    "PersistWriteError",
    # Ledger
    "TRANSACTIONS_PREFIX",
    "LedgerChange",
    "LedgerState",
    "LedgerStore",
    "LoadFailure",
    "storage_key",
]
