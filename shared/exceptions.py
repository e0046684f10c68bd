"""
Base exception classes for the marketplace client core.

Each module should define its own exceptions that inherit from these bases.
This enables consistent error handling across the application.
"""

from typing import Optional, Any


class ClientError(Exception):
    """
    Base exception for all client core errors.

    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for display or logging."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(ClientError):
    """A caller broke an input contract (programming error)."""

    pass


class StorageUnavailableError(ClientError):
    """Durable storage could not be read or written."""

    pass
