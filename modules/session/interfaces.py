"""
Session module interface.

View code and route guards should depend on ISessionService, not the
concrete implementation.
"""

from typing import Protocol, Any, Optional, runtime_checkable

from modules.identity.models import IdentityRecord

from .models import LoginResponse, RestoreResult, SessionSnapshot, SessionState


@runtime_checkable
class ISessionService(Protocol):
    """
    Interface for the session store.

    None of these methods raise on storage failure: a broken or missing
    session always degrades to the anonymous state.
    """

    @property
    def state(self) -> SessionState:
        ...

    async def restore(self) -> RestoreResult:
        """
        Restore the persisted session once at startup.

        Returns:
            RestoreResult with status ok, corrupt or absent
        """
        ...

    def login(self, raw_user: Any, token: str) -> Optional[IdentityRecord]:
        """
        Normalize and persist a freshly authenticated user.

        Args:
            raw_user: User record as returned by the backend
            token: Bearer token from the login call

        Returns:
            The stored identity, or None if it could not be persisted

        Raises:
            InvalidSessionTokenError: If token is empty
        """
        ...

    def login_with_response(self, response: LoginResponse) -> Optional[IdentityRecord]:
        """Log in from a login/signup result, falling back to a minimal user."""
        ...

    def update(self, identity: IdentityRecord) -> Optional[IdentityRecord]:
        """
        Replace the identity after a profile edit, keeping the token.

        Returns:
            The stored identity, or None if there is no session or the
            write failed
        """
        ...

    def logout(self) -> None:
        """Clear identity and token. No-op when already anonymous."""
        ...

    def snapshot(self) -> SessionSnapshot:
        """Current view for route guards."""
        ...

    def authorization_header(self) -> dict[str, str]:
        """Bearer header for backend requests, or an empty dict."""
        ...
