"""
Session module data models.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field

from modules.identity.models import IdentityRecord


class SessionState(str, Enum):
    """Lifecycle state of the session store."""

    INITIALIZING = "initializing"
    AUTHENTICATED = "authenticated"
    ANONYMOUS = "anonymous"


class RestoreStatus(str, Enum):
    """Closed set of outcomes of restoring a persisted session."""

    OK = "ok"
    CORRUPT = "corrupt"
    ABSENT = "absent"


class RestoreResult(BaseModel):
    """Outcome of SessionService.restore()."""

    status: RestoreStatus = Field(..., description="How the restore resolved")
    identity: Optional[IdentityRecord] = Field(None, description="Restored identity when status is ok")
    token: Optional[str] = Field(None, description="Restored token when status is ok")

    model_config = {"frozen": True}

    @property
    def ok(self) -> bool:
        return self.status == RestoreStatus.OK


class SessionSnapshot(BaseModel):
    """
    Read-only view of the session for navigation decisions.

    Route guards block while ``is_initializing`` and otherwise branch on
    ``is_authenticated``; they never write session state.
    """

    identity: Optional[IdentityRecord] = None
    is_initializing: bool = True
    is_authenticated: bool = False

    model_config = {"frozen": True}


class LoginResponse(BaseModel):
    """
    Result of the external login or signup call.

    ``raw_user`` is the user record as the backend sent it (not yet
    normalized); it is None when only a token could be obtained.
    """

    token: str = Field(..., description="Bearer token issued by the auth endpoint")
    raw_user: Optional[dict[str, Any]] = Field(None, description="Backend user record")
    email: Optional[str] = Field(None, description="Email the user signed in with")

    @classmethod
    def from_payload(
        cls,
        payload: dict[str, Any],
        email: Optional[str] = None,
    ) -> "LoginResponse":
        """
        Build from a raw login response body.

        The token may arrive as ``token`` or ``accessToken``, the user as
        ``user`` or ``rawUser``.
        """
        token = payload.get("token") or payload.get("accessToken") or ""
        raw_user = payload.get("user") or payload.get("rawUser")
        return cls(
            token=token,
            raw_user=raw_user if isinstance(raw_user, dict) else None,
            email=email,
        )
