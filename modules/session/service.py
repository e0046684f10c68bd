"""
Session store implementation.

Owns the current identity and bearer token and keeps them in step with
the ``user`` and ``token`` keys of the durable key-value store.
"""

import asyncio
import json
import logging
from typing import Any, Optional

from shared.config import get_settings
from shared.exceptions import ValidationError
from modules.identity.models import IdentityRecord
from modules.identity.normalizer import (
    FALLBACK_USER_ID,
    USERNAME_FIELDS,
    fallback_user_record,
    normalize_identity,
    token_subject,
)
from modules.storage.interfaces import IKeyValueStore
from modules.storage.exceptions import StorageError
from modules.storage.service import get_key_value_store

from .interfaces import ISessionService
from .models import (
    LoginResponse,
    RestoreResult,
    RestoreStatus,
    SessionSnapshot,
    SessionState,
)
from .exceptions import InvalidSessionTokenError

logger = logging.getLogger(__name__)

USER_KEY = "user"
TOKEN_KEY = "token"

# What older clients wrote under ``user`` when they stringified a missing value
MISSING_USER_SENTINELS = frozenset({"undefined", "null"})

IDENTITY_FIELDS = ("id", "username")


def _is_missing_user(saved_user: Optional[str]) -> bool:
    if not saved_user:
        return True
    return saved_user.strip().strip('"') in MISSING_USER_SENTINELS


def _has_display_name(fields: dict[str, Any]) -> bool:
    return any(
        isinstance(fields.get(key), str) and fields[key] != ""
        for key in USERNAME_FIELDS
    )


class SessionService:
    """
    Session store backed by an IKeyValueStore.

    States: initializing -> authenticated | anonymous. After restore the
    store only moves between authenticated and anonymous through login and
    logout. Storage failures are logged and treated as "no session".
    """

    def __init__(
        self,
        store: Optional[IKeyValueStore] = None,
        base_url: Optional[str] = None,
        identity_field: Optional[str] = None,
    ):
        """
        Initialize the session store.

        Args:
            store: Key-value store. Defaults to the configured file store.
            base_url: Base URL for relative picture paths. Defaults to
                      settings.asset_base_url.
            identity_field: Field a restored identity must carry ("id" or
                            "username"). Defaults to
                            settings.session_identity_field.
        """
        settings = get_settings()
        self._store = store if store is not None else get_key_value_store()
        self._base_url = base_url or settings.asset_base_url
        self._identity_field = identity_field or settings.session_identity_field
        if self._identity_field not in IDENTITY_FIELDS:
            raise ValidationError(
                f"identity_field must be one of {IDENTITY_FIELDS}, got {self._identity_field!r}",
                code="INVALID_IDENTITY_FIELD",
            )

        self._state = SessionState.INITIALIZING
        self._identity: Optional[IdentityRecord] = None
        self._token: Optional[str] = None

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def identity(self) -> Optional[IdentityRecord]:
        return self._identity

    @property
    def token(self) -> Optional[str]:
        return self._token

    @property
    def is_initializing(self) -> bool:
        return self._state == SessionState.INITIALIZING

    @property
    def is_authenticated(self) -> bool:
        return self._state == SessionState.AUTHENTICATED

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            identity=self._identity,
            is_initializing=self.is_initializing,
            is_authenticated=self.is_authenticated,
        )

    def authorization_header(self) -> dict[str, str]:
        if not self._token:
            return {}
        return {"Authorization": f"Bearer {self._token}"}

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def restore(self) -> RestoreResult:
        """
        Restore the persisted session. Never raises.

        Only the first call reads storage; later calls report the current
        state.
        """
        if self._state != SessionState.INITIALIZING:
            logger.debug("Session already restored, reporting current state")
            return self._current_result()

        try:
            result = await asyncio.to_thread(self._restore_from_store)
        except Exception:
            logger.exception("Unexpected error while restoring session")
            result = RestoreResult(status=RestoreStatus.ABSENT)

        if result.ok:
            self._identity = result.identity
            self._token = result.token
            self._state = SessionState.AUTHENTICATED
        else:
            self._set_anonymous()
        return result

    def login(self, raw_user: Any, token: str) -> Optional[IdentityRecord]:
        """
        Normalize raw_user and persist it together with token.

        The stored identity always passes the restore integrity check: when
        the configured identity field is ``id`` and the record has none, the
        id is taken from the token's subject claim (or the placeholder id).
        """
        if not isinstance(token, str) or not token.strip():
            raise InvalidSessionTokenError()

        identity = normalize_identity(raw_user, self._base_url)
        if not self._has_identity_hint(identity.to_storage()):
            identity = self._with_token_id(identity, token)
        try:
            self._store.set(USER_KEY, identity.to_json())
            self._store.set(TOKEN_KEY, token)
        except (StorageError, ValueError) as e:
            logger.error(f"Failed to persist session, staying logged out: {e}")
            self._remove_keys(USER_KEY, TOKEN_KEY)
            self._set_anonymous()
            return None

        self._identity = identity
        self._token = token
        self._state = SessionState.AUTHENTICATED
        logger.info(f"Logged in as {identity.username} (id={identity.id})")
        return identity

    def login_with_response(self, response: LoginResponse) -> Optional[IdentityRecord]:
        """
        Log in from a login/signup result.

        A response whose user record is missing or has no display name is
        replaced by a minimal record built from the email and token.
        """
        raw_user = response.raw_user
        if raw_user is None or not _has_display_name(raw_user):
            email = response.email or (raw_user or {}).get("email") or ""
            logger.warning("Login response has no usable user record, using fallback identity")
            raw_user = fallback_user_record(email, response.token)
        return self.login(raw_user, response.token)

    def update(self, identity: IdentityRecord) -> Optional[IdentityRecord]:
        """Replace the identity after a profile edit. The token is unchanged."""
        if self._state != SessionState.AUTHENTICATED:
            logger.warning("Ignoring identity update without an active session")
            return None

        try:
            self._store.set(USER_KEY, identity.to_json())
        except (StorageError, ValueError) as e:
            logger.error(f"Failed to persist updated identity, keeping previous one: {e}")
            return None

        self._identity = identity
        logger.info(f"Updated identity for {identity.username} (id={identity.id})")
        return identity

    def logout(self) -> None:
        """Clear identity, token and their persisted keys."""
        if self._state == SessionState.ANONYMOUS:
            logger.debug("Logout without a session, nothing to do")
            return

        self._set_anonymous()
        self._remove_keys(USER_KEY, TOKEN_KEY)
        logger.info("Logged out")

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _restore_from_store(self) -> RestoreResult:
        try:
            saved_user = self._store.get(USER_KEY)
            token = self._store.get(TOKEN_KEY)
        except StorageError as e:
            logger.warning(f"Session storage unavailable, starting logged out: {e}")
            return RestoreResult(status=RestoreStatus.ABSENT)

        if _is_missing_user(saved_user) or not token:
            # A stored token without a user is left alone
            if saved_user is not None and _is_missing_user(saved_user):
                self._remove_keys(USER_KEY)
            if not token:
                self._remove_keys(TOKEN_KEY)
            logger.debug("No stored session")
            return RestoreResult(status=RestoreStatus.ABSENT)

        identity = self._parse_stored_identity(saved_user)
        if identity is None:
            self._remove_keys(USER_KEY, TOKEN_KEY)
            return RestoreResult(status=RestoreStatus.CORRUPT)

        # Rewrite so records stored before normalization get absolute pictures
        try:
            self._store.set(USER_KEY, identity.to_json())
        except (StorageError, ValueError) as e:
            logger.warning(f"Could not persist normalized identity, starting logged out: {e}")
            return RestoreResult(status=RestoreStatus.ABSENT)

        logger.info(f"Restored session for {identity.username} (id={identity.id})")
        return RestoreResult(status=RestoreStatus.OK, identity=identity, token=token)

    def _parse_stored_identity(self, saved_user: str) -> Optional[IdentityRecord]:
        try:
            parsed = json.loads(saved_user)
        except ValueError as e:
            logger.warning(f"Stored user is not valid JSON, clearing session: {e}")
            return None

        if not isinstance(parsed, dict):
            logger.warning(
                f"Stored user is a {type(parsed).__name__}, not an object; clearing session"
            )
            return None

        if not self._has_identity_hint(parsed):
            logger.warning(
                f"Stored user has no usable {self._identity_field!r}, clearing session"
            )
            return None

        return normalize_identity(parsed, self._base_url)

    def _has_identity_hint(self, fields: dict[str, Any]) -> bool:
        if self._identity_field == "id":
            return fields.get("id") not in (None, "")
        return _has_display_name(fields)

    def _with_token_id(self, identity: IdentityRecord, token: str) -> IdentityRecord:
        fields = identity.to_storage()
        subject = token_subject(token)
        fields["id"] = subject if subject is not None else FALLBACK_USER_ID
        logger.warning(f"User record has no id, using {fields['id']!r} from the token")
        return normalize_identity(fields, self._base_url)

    def _remove_keys(self, *keys: str) -> None:
        for key in keys:
            try:
                self._store.remove(key)
            except (StorageError, ValueError) as e:
                logger.error(f"Failed to remove {key!r} from storage: {e}")

    def _set_anonymous(self) -> None:
        self._identity = None
        self._token = None
        self._state = SessionState.ANONYMOUS

    def _current_result(self) -> RestoreResult:
        if self._state == SessionState.AUTHENTICATED:
            return RestoreResult(
                status=RestoreStatus.OK,
                identity=self._identity,
                token=self._token,
            )
        return RestoreResult(status=RestoreStatus.ABSENT)


# Verify the implementation satisfies the interface
def _verify_interface():
    """Type check that SessionService implements ISessionService."""
    service: ISessionService = SessionService()
    return service


# Module-level instance getter
_service_instance: Optional[SessionService] = None


def get_session_service() -> SessionService:
    """Get the session service singleton."""
    global _service_instance
    if _service_instance is None:
        _service_instance = SessionService()
    return _service_instance


def reset_session_service() -> None:
    """Reset the session service singleton (for testing)."""
    global _service_instance
    _service_instance = None
