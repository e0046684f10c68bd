"""
Theme module data models.
"""

from enum import Enum


class Theme(str, Enum):
    """Display mode applied to the UI root."""

    LIGHT = "light"
    DARK = "dark"

    @property
    def opposite(self) -> "Theme":
        return Theme.DARK if self is Theme.LIGHT else Theme.LIGHT

    @classmethod
    def values(cls) -> frozenset[str]:
        return frozenset(member.value for member in cls)
