"""
Theme store implementation.
"""

import logging
from typing import Iterable, Optional, Union

from shared.config import Settings, get_settings
from modules.storage.interfaces import IKeyValueStore
from modules.storage.exceptions import StorageError
from modules.storage.service import get_key_value_store

from .interfaces import ISystemThemePreference, IThemeService, IThemeTarget
from .models import Theme
from .exceptions import InvalidThemeError

logger = logging.getLogger(__name__)

THEME_KEY = "theme"


class SettingsThemePreference:
    """System preference taken from the ``SYSTEM_THEME`` setting."""

    def __init__(self, settings: Optional[Settings] = None):
        self._settings = settings or get_settings()

    def preferred_theme(self) -> Optional[Theme]:
        if self._settings.system_theme is None:
            return None
        return Theme(self._settings.system_theme)


class DocumentRoot:
    """
    In-process stand-in for the document's root element.

    Holds the root's CSS classes; applying a theme swaps ``light`` for
    ``dark`` (or back) and leaves other classes alone.
    """

    def __init__(self, classes: Iterable[str] = ()):
        self.classes: set[str] = set(classes)

    @property
    def mode(self) -> Optional[Theme]:
        for theme in Theme:
            if theme.value in self.classes:
                return theme
        return None

    def apply_theme(self, theme: Theme) -> None:
        self.classes.difference_update(Theme.values())
        self.classes.add(theme.value)


class ThemeService:
    """
    Theme store backed by an IKeyValueStore.

    Every set() writes the ``theme`` key before touching the UI root, so a
    restart right after a toggle shows the new theme.
    """

    def __init__(
        self,
        store: Optional[IKeyValueStore] = None,
        preference: Optional[ISystemThemePreference] = None,
        target: Optional[IThemeTarget] = None,
    ):
        """
        Initialize the theme store.

        Args:
            store: Key-value store. Defaults to the configured file store.
            preference: System preference source. Defaults to settings.
            target: UI root to apply themes to. Defaults to a DocumentRoot.
        """
        self._store = store if store is not None else get_key_value_store()
        self._preference = preference or SettingsThemePreference()
        self._target = target if target is not None else DocumentRoot()
        self._current: Optional[Theme] = None

    @property
    def target(self) -> IThemeTarget:
        return self._target

    @property
    def current(self) -> Theme:
        if self._current is None:
            self._current = self.get()
        return self._current

    def get(self) -> Theme:
        try:
            saved = self._store.get(THEME_KEY)
        except StorageError as e:
            logger.warning(f"Could not read stored theme, using system preference: {e}")
            saved = None

        if saved in Theme.values():
            return Theme(saved)
        if saved is not None:
            logger.debug(f"Ignoring invalid stored theme {saved!r}")

        return self._system_preference() or Theme.LIGHT

    def set(self, theme: Union[Theme, str]) -> Theme:
        theme = self._coerce(theme)
        try:
            self._store.set(THEME_KEY, theme.value)
        except StorageError as e:
            logger.warning(f"Could not persist theme {theme.value!r}: {e}")

        self._current = theme
        self._target.apply_theme(theme)
        logger.debug(f"Applied {theme.value} theme")
        return theme

    def toggle(self) -> Theme:
        return self.set(self.current.opposite)

    def initialize(self) -> Theme:
        """Resolve the startup theme, then persist and apply it."""
        return self.set(self.get())

    def _system_preference(self) -> Optional[Theme]:
        try:
            return self._preference.preferred_theme()
        except Exception as e:
            logger.warning(f"System theme preference unavailable: {e}")
            return None

    @staticmethod
    def _coerce(theme: Union[Theme, str]) -> Theme:
        if isinstance(theme, Theme):
            return theme
        if isinstance(theme, str) and theme in Theme.values():
            return Theme(theme)
        raise InvalidThemeError(theme)


# Verify the implementation satisfies the interface
def _verify_interface():
    """Type check that ThemeService implements IThemeService."""
    service: IThemeService = ThemeService()
    return service


# Module-level instance getter
_service_instance: Optional[ThemeService] = None


def get_theme_service() -> ThemeService:
    """Get the theme service singleton."""
    global _service_instance
    if _service_instance is None:
        _service_instance = ThemeService()
    return _service_instance


def reset_theme_service() -> None:
    """Reset the theme service singleton (for testing)."""
    global _service_instance
    _service_instance = None
