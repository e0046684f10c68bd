"""
Session module exceptions.

Storage and parsing failures never surface from the session store; only
contract violations by the caller do.
"""

from shared.exceptions import ValidationError


class InvalidSessionTokenError(ValidationError):
    """Raised when login is called without a usable token."""

    def __init__(self, message: str = "A non-empty bearer token is required to log in"):
        super().__init__(message, code="INVALID_SESSION_TOKEN")
