"""
Identity module.

Canonical identity record and the normalizer that produces it from
whatever user shape the backend returns.

Public API:
- IdentityRecord: Canonical identity
- normalize_identity: Raw user record -> IdentityRecord
- merge_identity: Apply a profile-edit response to an identity
- fallback_user_record: Minimal user record when profile lookup fails
- token_subject: Unverified user id claim of a JWT
"""

from .models import IdentityRecord
from .normalizer import (
    FALLBACK_USERNAME,
    FALLBACK_USER_ID,
    is_absolute_url,
    resolve_picture_url,
    normalize_identity,
    merge_identity,
    fallback_user_record,
    token_subject,
)

__all__ = [
    # Models
    "IdentityRecord",
    # Normalization
    "FALLBACK_USERNAME",
    "FALLBACK_USER_ID",
    "is_absolute_url",
    "resolve_picture_url",
    "normalize_identity",
    "merge_identity",
    "fallback_user_record",
    "token_subject",
]
