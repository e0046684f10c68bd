"""
Centralized configuration for the marketplace client core.

All settings are loaded from environment variables with sensible defaults.
Component-specific settings are namespaced (e.g., STORAGE_*, SESSION_*).
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional
from urllib.parse import urlparse

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Marketplace Client"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"

    # Backend
    api_base_url: str = "https://nftbackend-qz6p.onrender.com/api"
    asset_base_url: str = "https://nftbackend-qz6p.onrender.com/"

    # Durable key-value storage
    storage_path: Path = Path.home() / ".marketplace_client" / "storage.json"
    storage_quota_bytes: int = 5 * 1024 * 1024

    # Session restore: which field must be present for a stored identity to be usable
    session_identity_field: Literal["id", "username"] = "username"

    # Operating system color scheme preference, if the host reports one
    system_theme: Optional[Literal["light", "dark"]] = None

    @field_validator("asset_base_url")
    @classmethod
    def require_absolute_url(cls, value: str) -> str:
        parsed = urlparse(value)
        if not parsed.scheme or not parsed.netloc:
            raise ValueError(f"asset_base_url must be an absolute URL, got {value!r}")
        return value


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
