"""
Theme module interfaces.

The theme store talks to two collaborators it does not own: the host's
color scheme preference and the UI root that shows the mode.
"""

from typing import Protocol, Optional, Union, runtime_checkable

from .models import Theme


@runtime_checkable
class ISystemThemePreference(Protocol):
    """Source of the operating system's preferred color scheme."""

    def preferred_theme(self) -> Optional[Theme]:
        """
        Get the reported preference.

        Returns:
            Theme.DARK or Theme.LIGHT, or None if the host reports nothing
        """
        ...


@runtime_checkable
class IThemeTarget(Protocol):
    """UI root that reflects the active theme (e.g., as a CSS class)."""

    def apply_theme(self, theme: Theme) -> None:
        ...


@runtime_checkable
class IThemeService(Protocol):
    """
    Interface for the theme store.

    The persisted ``theme`` key survives logout.
    """

    @property
    def current(self) -> Theme:
        ...

    def get(self) -> Theme:
        """Persisted theme, else system preference, else light."""
        ...

    def set(self, theme: Union[Theme, str]) -> Theme:
        """
        Persist and apply a theme.

        Raises:
            InvalidThemeError: If theme is not light or dark
        """
        ...

    def toggle(self) -> Theme:
        """Switch to the opposite of the current theme."""
        ...
