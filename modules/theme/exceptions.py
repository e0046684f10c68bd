"""
Theme module exceptions.
"""

from typing import Any

from shared.exceptions import ValidationError


class InvalidThemeError(ValidationError):
    """Raised when set() is given something other than light or dark."""

    def __init__(self, value: Any):
        super().__init__(
            f"Invalid theme: {value!r} (expected 'light' or 'dark')",
            code="INVALID_THEME",
            details={"value": repr(value)},
        )
