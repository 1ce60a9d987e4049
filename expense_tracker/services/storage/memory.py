"""In-memory key-value store, for tests and throwaway sessions."""

from typing import Optional

from expense_tracker.services.storage.interface import KeyValueStore, PersistenceError


class InMemoryKeyValueStore(KeyValueStore):
    """
    Dict-backed store.

    `fail_writes` makes every set()/delete() raise PersistenceError,
    which lets callers exercise the save-failure path.
    """

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})
        self.fail_writes = False
        self.write_count = 0

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise PersistenceError(f"Write to '{key}' rejected")
        self._data[key] = value
        self.write_count += 1

    def delete(self, key: str) -> bool:
        if self.fail_writes:
            raise PersistenceError(f"Delete of '{key}' rejected")
        return self._data.pop(key, None) is not None

    def keys(self) -> list[str]:
        return list(self._data)
