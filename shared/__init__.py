"""
Shared infrastructure for the marketplace client core.

This package contains cross-cutting concerns that are used by multiple modules:
- config: Centralized settings management
- exceptions: Base exception classes
- logging_config: Logging setup for entry points

Note: Session and theme logic should NOT go here. This is for infrastructure only.
"""

from .config import Settings, get_settings
from .exceptions import (
    ClientError,
    ValidationError,
    StorageUnavailableError,
)
from .logging_config import configure_logging

__all__ = [
    "Settings",
    "get_settings",
    "ClientError",
    "ValidationError",
    "StorageUnavailableError",
    "configure_logging",
]
