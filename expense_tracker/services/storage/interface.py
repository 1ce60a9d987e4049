"""
Abstract Storage Interface

DESIGN DECISION: The durable store is an opaque map from string key to
string value. This allows us to:
1. Keep the ledger's encoding independent of where it lives
2. Use in-memory storage for testing
3. Swap the JSON file for another backend later

The interface is intentionally tiny. The ledger writes a full snapshot
under one key on every mutation; it never needs partial updates.
"""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStore(ABC):
    """
    Abstract interface for the durable key-value store.

    Any storage implementation must implement these methods.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """
        Read the value stored under a key.

        Args:
            key: The key to read

        Returns:
            The stored string, or None if the key is absent

        Raises:
            StorageError: If the backend cannot be read
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """
        Overwrite the value stored under a key.

        The write is durable when this returns.

        Raises:
            PersistenceError: If the write fails
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        """
        Remove a key.

        Returns:
            True if the key existed
        """
        pass

    @abstractmethod
    def keys(self) -> list[str]:
        """List all stored keys."""
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class DuplicateError(StorageError):
    """Attempted to insert a duplicate entity."""
    pass


class PersistenceError(StorageError):
    """A write to the durable store failed."""
    pass


class CorruptDataError(StorageError):
    """Stored content could not be decoded."""
    pass
