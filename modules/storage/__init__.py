"""
Storage module.

Durable string key-value storage shared by the session and theme stores.

Public API:
- IKeyValueStore: Interface for key-value storage
- MemoryKeyValueStore: In-process store
- FileKeyValueStore: JSON file store
- Storage exceptions: StorageError, StorageQuotaExceededError, etc.
"""

from .interfaces import IKeyValueStore
from .exceptions import (
    StorageError,
    StorageQuotaExceededError,
    InvalidStorageValueError,
)
from .service import (
    MemoryKeyValueStore,
    FileKeyValueStore,
    get_key_value_store,
    reset_key_value_store,
)

__all__ = [
    # Interface
    "IKeyValueStore",
    # Exceptions
    "StorageError",
    "StorageQuotaExceededError",
    "InvalidStorageValueError",
    # Implementations
    "MemoryKeyValueStore",
    "FileKeyValueStore",
    "get_key_value_store",
    "reset_key_value_store",
]
