"""
Storage module exceptions.
"""

from pathlib import Path
from typing import Optional

from shared.exceptions import StorageUnavailableError, ValidationError


class StorageError(StorageUnavailableError):
    """Raised when the durable store cannot be read or written."""

    def __init__(self, message: str, path: Optional[Path] = None):
        details = {"path": str(path)} if path is not None else {}
        super().__init__(message, code="STORAGE_ERROR", details=details)


class StorageQuotaExceededError(StorageError):
    """Raised when a write would grow the store past its quota."""

    def __init__(self, size: int, quota: int):
        super().__init__(f"Storage quota exceeded: {size} > {quota} bytes")
        self.code = "STORAGE_QUOTA_EXCEEDED"
        self.details.update({"size": size, "quota": quota})


class InvalidStorageValueError(ValidationError):
    """Raised when a non-string value is written."""

    def __init__(self, key: str, value_type: str):
        super().__init__(
            f"Storage values must be strings, got {value_type} for key {key!r}",
            code="INVALID_STORAGE_VALUE",
            details={"key": key, "type": value_type},
        )
