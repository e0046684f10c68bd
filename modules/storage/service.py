"""
Key-value storage implementations.

Provides both in-memory (for testing) and file-backed (for production)
implementations of IKeyValueStore.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

from shared.config import get_settings

from .interfaces import IKeyValueStore
from .exceptions import (
    StorageError,
    StorageQuotaExceededError,
    InvalidStorageValueError,
)

logger = logging.getLogger(__name__)


def _check_value(key: str, value: object) -> None:
    if not isinstance(value, str):
        raise InvalidStorageValueError(key, type(value).__name__)


class MemoryKeyValueStore:
    """
    Key-value store held in process memory.

    For testing and for sessions that must not outlive the process.
    """

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        _check_value(key, value)
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)


class FileKeyValueStore:
    """
    Key-value store persisted as a JSON object in a single file.

    The file is re-read on every access so that a new instance (a "reload")
    observes everything written by a previous one. Writes go to a temporary
    file in the same directory and are moved into place with os.replace.
    """

    def __init__(self, path: Path, quota_bytes: Optional[int] = None):
        """
        Initialize the file store.

        Args:
            path: Location of the JSON file. Created on first write.
            quota_bytes: Optional maximum size of the serialized store.
        """
        self._path = Path(path).expanduser()
        self._quota_bytes = quota_bytes

    @property
    def path(self) -> Path:
        return self._path

    def get(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        _check_value(key, value)
        data = self._load()
        data[key] = value
        self._save(data)

    def remove(self, key: str) -> None:
        data = self._load()
        if key not in data:
            return
        del data[key]
        self._save(data)

    def keys(self) -> list[str]:
        return list(self._load())

    def _load(self) -> dict[str, str]:
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as e:
            raise StorageError(f"Cannot read storage file: {e}", self._path) from e

        try:
            data = json.loads(raw) if raw.strip() else {}
        except json.JSONDecodeError as e:
            raise StorageError(f"Storage file is not valid JSON: {e}", self._path) from e

        if not isinstance(data, dict):
            raise StorageError("Storage file does not contain a JSON object", self._path)

        # Entries that break the string-to-string contract are unreadable
        return {k: v for k, v in data.items() if isinstance(v, str)}

    def _save(self, data: dict[str, str]) -> None:
        payload = json.dumps(data, ensure_ascii=False, indent=2)
        size = len(payload.encode("utf-8"))
        if self._quota_bytes is not None and size > self._quota_bytes:
            raise StorageQuotaExceededError(size, self._quota_bytes)

        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(payload)
                os.replace(tmp_name, self._path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageError(f"Cannot write storage file: {e}", self._path) from e

        logger.debug(f"Wrote {len(data)} keys ({size} bytes) to {self._path}")


# Verify the implementations satisfy the interface
def _verify_interface():
    """Type check that both stores implement IKeyValueStore."""
    memory: IKeyValueStore = MemoryKeyValueStore()
    file: IKeyValueStore = FileKeyValueStore(Path("storage.json"))
    return memory, file


# Module-level instance getter
_store_instance: Optional[FileKeyValueStore] = None


def get_key_value_store() -> FileKeyValueStore:
    """Get the file-backed store configured by settings."""
    global _store_instance
    if _store_instance is None:
        settings = get_settings()
        _store_instance = FileKeyValueStore(
            settings.storage_path,
            quota_bytes=settings.storage_quota_bytes,
        )
    return _store_instance


def reset_key_value_store() -> None:
    """Reset the store singleton (for testing or when configuration changes)."""
    global _store_instance
    _store_instance = None
