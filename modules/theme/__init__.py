"""
Theme module.

Persisted light/dark display preference with a system-preference fallback.

Public API:
- IThemeService, ISystemThemePreference, IThemeTarget: Interfaces
- Theme: light | dark
- ThemeService: Key-value backed implementation
- DocumentRoot, SettingsThemePreference: Default collaborators
- InvalidThemeError
"""

from .interfaces import IThemeService, ISystemThemePreference, IThemeTarget
from .models import Theme
from .exceptions import InvalidThemeError
from .service import (
    THEME_KEY,
    ThemeService,
    DocumentRoot,
    SettingsThemePreference,
    get_theme_service,
    reset_theme_service,
)

__all__ = [
    # Interfaces
    "IThemeService",
    "ISystemThemePreference",
    "IThemeTarget",
    # Models
    "Theme",
    # Exceptions
    "InvalidThemeError",
    # Service
    "THEME_KEY",
    "ThemeService",
    "DocumentRoot",
    "SettingsThemePreference",
    "get_theme_service",
    "reset_theme_service",
]
