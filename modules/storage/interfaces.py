"""
Key-value storage interface.

The session and theme stores depend on IKeyValueStore, not on a concrete
backend, so tests can inject an in-memory store or a failing one.
"""

from typing import Protocol, Optional, runtime_checkable


@runtime_checkable
class IKeyValueStore(Protocol):
    """
    Durable string-to-string storage.

    Mirrors the browser's local storage contract: values are strings,
    a missing key reads as None, and removing a missing key is a no-op.
    """

    def get(self, key: str) -> Optional[str]:
        """
        Read a value.

        Returns:
            The stored string, or None if the key is absent

        Raises:
            StorageError: If the backing storage cannot be read
        """
        ...

    def set(self, key: str, value: str) -> None:
        """
        Write a value, replacing any previous one.

        Raises:
            InvalidStorageValueError: If value is not a string
            StorageQuotaExceededError: If the write would exceed the quota
            StorageError: If the backing storage cannot be written
        """
        ...

    def remove(self, key: str) -> None:
        """
        Delete a key if present.

        Raises:
            StorageError: If the backing storage cannot be written
        """
        ...

    def keys(self) -> list[str]:
        """List stored keys."""
        ...
