"""
Storage Services Package

Provides the abstract key-value interface and concrete implementations.
Currently implements a JSON file backend, but designed to be swappable.
"""

from expense_tracker.services.storage.interface import (
    CorruptDataError,
    DuplicateError,
    KeyValueStore,
    PersistenceError,
    StorageError,
)
from expense_tracker.services.storage.json_file import JsonFileKeyValueStore
from expense_tracker.services.storage.memory import InMemoryKeyValueStore

__all__ = [
    # Interface
    "KeyValueStore",
    # Exceptions
    "CorruptDataError",
    "DuplicateError",
    "PersistenceError",
    "StorageError",
    # Implementations
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
]
