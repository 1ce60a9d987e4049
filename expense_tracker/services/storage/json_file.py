"""
JSON File Storage Implementation

DESIGN DECISION: The whole key-value map lives in one JSON object on disk:
1. Users can open and back up their data with any text editor
2. No database setup required
3. The file is small (personal use), so rewriting it is cheap

Writes go to a temporary file in the same directory which then replaces
the target, so a crash mid-write never leaves a half-written store.
An unreadable file is copied to "<name>.corrupt" before the first write
replaces it.
"""

import json
import os
import shutil
import tempfile
from pathlib import Path
from typing import Optional

import structlog

from expense_tracker.services.storage.interface import (
    CorruptDataError,
    KeyValueStore,
    PersistenceError,
    StorageError,
)


logger = structlog.get_logger(__name__)


class JsonFileKeyValueStore(KeyValueStore):
    """
    File-backed key-value store.

    The file is read once, lazily, and cached; every set() rewrites it.
    A missing file is an empty store.
    """

    def __init__(self, path: Path | str):
        self._path = Path(path)
        self._data: Optional[dict[str, str]] = None

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, str]:
        if self._data is not None:
            return self._data

        if not self._path.exists():
            self._data = {}
            return self._data

        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Failed to read {self._path}: {e}") from e

        if not raw.strip():
            self._data = {}
            return self._data

        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as e:
            raise CorruptDataError(f"{self._path} is not valid JSON: {e}") from e

        if not isinstance(payload, dict):
            raise CorruptDataError(f"{self._path} does not contain a JSON object")

        # Values must be strings; anything else was not written by us
        self._data = {
            str(key): value if isinstance(value, str) else json.dumps(value)
            for key, value in payload.items()
        }
        return self._data

    def _flush(self, data: dict[str, str]) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._path.parent,
                prefix=f".{self._path.name}.",
                suffix=".tmp",
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    json.dump(data, handle, ensure_ascii=False, indent=2)
                    handle.flush()
                    os.fsync(handle.fileno())
                os.replace(tmp_name, self._path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise PersistenceError(f"Failed to write {self._path}: {e}") from e

    def _load_for_write(self) -> dict[str, str]:
        try:
            return self._load()
        except CorruptDataError as e:
            backup = self._path.with_name(self._path.name + ".corrupt")
            logger.warning("store_file_replaced", path=str(self._path), backup=str(backup), error=str(e))
            try:
                shutil.copyfile(self._path, backup)
            except OSError as copy_error:
                raise PersistenceError(f"Failed to back up {self._path}: {copy_error}") from copy_error
            self._data = {}
            return self._data

    def get(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        current = self._load_for_write()
        updated = {**current, key: value}
        self._flush(updated)
        self._data = updated

    def delete(self, key: str) -> bool:
        current = self._load_for_write()
        if key not in current:
            return False
        updated = {k: v for k, v in current.items() if k != key}
        self._flush(updated)
        self._data = updated
        return True

    def keys(self) -> list[str]:
        return list(self._load())
