"""
Session module.

Establishes, persists, restores and tears down the signed-in identity.

Public API:
- ISessionService: Interface for session operations
- SessionService: Key-value backed implementation
- SessionState, RestoreStatus, RestoreResult, SessionSnapshot, LoginResponse
- InvalidSessionTokenError
"""

from .interfaces import ISessionService
from .models import (
    SessionState,
    RestoreStatus,
    RestoreResult,
    SessionSnapshot,
    LoginResponse,
)
from .exceptions import InvalidSessionTokenError
from .service import (
    USER_KEY,
    TOKEN_KEY,
    SessionService,
    get_session_service,
    reset_session_service,
)

__all__ = [
    # Interface
    "ISessionService",
    # Models
    "SessionState",
    "RestoreStatus",
    "RestoreResult",
    "SessionSnapshot",
    "LoginResponse",
    # Exceptions
    "InvalidSessionTokenError",
    # Service
    "USER_KEY",
    "TOKEN_KEY",
    "SessionService",
    "get_session_service",
    "reset_session_service",
]
