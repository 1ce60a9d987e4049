"""Services package."""

from expense_tracker.services.ledger import BUDGET_KEY, EXPENSES_KEY, LedgerStore
from expense_tracker.services.storage import (
    CorruptDataError,
    DuplicateError,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStore,
    PersistenceError,
    StorageError,
)

__all__ = [
    # Ledger
    "BUDGET_KEY",
    "EXPENSES_KEY",
    "LedgerStore",
    # Storage
    "CorruptDataError",
    "DuplicateError",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "KeyValueStore",
    "PersistenceError",
    "StorageError",
]
