"""
Shared test fixtures and utilities.

This module provides common test infrastructure used across all test modules.
"""

import pytest
from datetime import datetime, timezone, timedelta
import jwt  # PyJWT

from shared.config import get_settings
from modules.storage.service import MemoryKeyValueStore, reset_key_value_store
from modules.session.service import reset_session_service
from modules.theme.service import reset_theme_service


TEST_BASE_URL = "https://api.example/"


def create_test_token(
    user_id: str = "test-user-123",
    expired: bool = False,
) -> str:
    """
    Create a JWT like the one the auth endpoint issues.

    Args:
        user_id: User ID to put in the ``sub`` claim
        expired: If True, creates an expired token

    Returns:
        JWT token string
    """
    now = datetime.now(timezone.utc)
    exp = now - timedelta(hours=1) if expired else now + timedelta(hours=1)
    payload = {
        "sub": user_id,
        "exp": int(exp.timestamp()),
        "iat": int(now.timestamp()),
    }
    return jwt.encode(payload, "test-secret-key-for-testing-only", algorithm="HS256")


@pytest.fixture(autouse=True)
def reset_singletons(tmp_path, monkeypatch):
    """Point storage at a temp file and reset cached singletons around each test."""
    monkeypatch.setenv("STORAGE_PATH", str(tmp_path / "storage.json"))
    get_settings.cache_clear()
    reset_key_value_store()
    reset_session_service()
    reset_theme_service()
    yield
    get_settings.cache_clear()
    reset_key_value_store()
    reset_session_service()
    reset_theme_service()


@pytest.fixture
def base_url() -> str:
    """Asset base URL used for resolving relative picture paths."""
    return TEST_BASE_URL


@pytest.fixture
def memory_store() -> MemoryKeyValueStore:
    """Empty in-memory key-value store."""
    return MemoryKeyValueStore()


@pytest.fixture
def raw_user() -> dict:
    """User record in the older backend shape (name/profilePic, relative path)."""
    return {
        "_id": "64f1c0ffee",
        "id": "user-123",
        "name": "ana",
        "email": "ana@example.com",
        "profilePic": "uploads/ana.png",
        "createdAt": "2024-01-01T00:00:00.000Z",
    }
