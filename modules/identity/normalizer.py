"""
Identity normalization.

The backend has shipped several field-naming conventions for the same user
record over time (``name`` vs ``username``, ``profilePic`` vs
``profilePicture`` vs ``avatar``, relative vs absolute picture paths).
Everything that receives a user record from the backend passes it through
``normalize_identity`` so the rest of the client sees one stable shape.

All functions here are pure. ``normalize_identity`` is total: unrecognized
input degrades to the fallback username and an empty picture.
"""

import logging
import re
from collections.abc import Mapping
from typing import Any, Optional

import jwt

from .models import IdentityRecord

logger = logging.getLogger(__name__)

FALLBACK_USERNAME = "User"
FALLBACK_USER_ID = "temp"

# Checked in order; the first usable value wins
USERNAME_FIELDS = ("username", "name")
PICTURE_FIELDS = ("profilePicture", "profilePic", "avatar")

_ABSOLUTE_URL_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*://")


def is_absolute_url(value: Any) -> bool:
    """Return True if value is a string starting with a URL scheme (``scheme://``)."""
    return isinstance(value, str) and bool(_ABSOLUTE_URL_RE.match(value))


def resolve_picture_url(value: Any, base_url: str) -> str:
    """
    Turn a picture reference into an absolute URL or an empty string.

    Args:
        value: Picture reference as sent by the backend
        base_url: Absolute URL that relative paths are resolved against

    Returns:
        ``value`` unchanged if it is already absolute, ``base_url`` joined
        with the path (leading slashes stripped) if it is relative, or ``""``
        if there is no usable reference.
    """
    if not isinstance(value, str) or not value:
        return ""
    if is_absolute_url(value):
        return value
    path = value.lstrip("/")
    if not path:
        return ""
    return f"{base_url.rstrip('/')}/{path}"


def _as_fields(raw: Any) -> dict[str, Any]:
    if isinstance(raw, IdentityRecord):
        return raw.model_dump(by_alias=True)
    if isinstance(raw, Mapping):
        return {key: value for key, value in raw.items() if isinstance(key, str)}
    return {}


def _display_name(fields: Mapping[str, Any]) -> str:
    for key in USERNAME_FIELDS:
        value = fields.get(key)
        if isinstance(value, str) and value:
            return value
    return FALLBACK_USERNAME


def _picture_source(fields: Mapping[str, Any]) -> Any:
    for key in PICTURE_FIELDS:
        value = fields.get(key)
        if value is not None:
            return value
    return None


def normalize_identity(raw: Any, base_url: str) -> IdentityRecord:
    """
    Map a loosely shaped user record onto an IdentityRecord.

    Rules, in order:
        1. ``username`` is the first non-empty string of ``username``,
           ``name``, else ``"User"``.
        2. The picture source is the first of ``profilePicture``,
           ``profilePic``, ``avatar`` that is not None.
        3. The source is resolved with ``resolve_picture_url``.
    Every other field is copied through unchanged.

    Args:
        raw: User record from the backend (or a previously normalized one)
        base_url: Absolute URL for resolving relative picture paths

    Returns:
        The normalized identity. Normalizing it again yields an equal record.
    """
    fields = _as_fields(raw)
    fields["username"] = _display_name(fields)
    fields["profilePicture"] = resolve_picture_url(_picture_source(fields), base_url)
    fields.setdefault("id", None)
    fields.setdefault("email", None)
    return IdentityRecord.model_validate(fields)


def merge_identity(
    current: IdentityRecord,
    changes: Any,
    base_url: str,
) -> IdentityRecord:
    """
    Apply a profile-edit response on top of the current identity.

    Fields in ``changes`` win. When ``changes`` carries no usable picture the
    current picture is kept, since the profile endpoint only echoes the
    picture when a new one was uploaded.
    """
    updates = _as_fields(changes)
    picture = resolve_picture_url(_picture_source(updates), base_url)

    merged = current.model_dump(by_alias=True)
    merged.update(updates)
    merged["profilePicture"] = picture or current.profile_picture
    return normalize_identity(merged, base_url)


def token_subject(token: str) -> Optional[Any]:
    """Read the user id claim from a JWT without verifying it."""
    try:
        claims = jwt.decode(token, options={"verify_signature": False})
    except jwt.PyJWTError:
        return None
    for claim in ("sub", "id", "userId"):
        value = claims.get(claim)
        if value not in (None, ""):
            return value
    return None


def fallback_user_record(email: str, token: str) -> dict[str, Any]:
    """
    Build a minimal raw user record from login inputs.

    Used when the login call returned a token but the profile lookup failed.
    The id comes from the token's ``sub`` (or ``id``) claim when the token is
    a JWT; the claims are only read, never trusted for authorization.
    """
    subject = token_subject(token) if token else None
    if subject is None:
        logger.debug("Token carries no readable subject, using placeholder user id")
    local_part = email.split("@", 1)[0] if email else ""
    return {
        "id": subject if subject is not None else FALLBACK_USER_ID,
        "username": local_part or FALLBACK_USERNAME,
        "email": email or None,
    }
