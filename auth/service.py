"""Authentication service - login, session checks and user CRUD.

AuthService is the only writer of the user collection, the session slots
and the credential map. Validation failures, malformed input included,
come back as result objects with a human-readable ``error``.
"""

import asyncio
import logging
import secrets
import string
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable

from pydantic import ValidationError

from auth.config import AuthConfig
from auth.credentials import CredentialStore
from auth.exceptions import (
    AuthError,
    EmailInUseError,
    NotAuthenticatedError,
    PasswordPolicyError,
    SelfDeleteError,
    StorageCorruptedError,
    UsernameTakenError,
    UserNotFoundError,
)
from auth.security_logger import SecurityEvent, SecurityLogger, compute_changes
from auth.session import SessionStore
from auth.token_codec import TokenCodec
from auth.types import User, UserCreate, UserLevel, UserUpdate
from auth.user_store import UserStore
from utils.timezone import now_utc

logger = logging.getLogger(__name__)

_ID_ALPHABET = string.digits + string.ascii_lowercase
_ID_SUFFIX_LENGTH = 9

# Assigned at creation; silently dropped from dict patches
_IMMUTABLE_FIELDS = frozenset({"id", "created_at", "createdAt"})


def _describe(error: ValidationError) -> str:
    fields = sorted(
        {".".join(str(p) for p in err["loc"]) or "data" for err in error.errors()}
    )
    return f"Invalid user data: {', '.join(fields)}"


@dataclass
class LoginResult:
    """Result of a login attempt. Failures carry no reason."""

    success: bool
    token: str | None = None
    user: User | None = None


@dataclass
class UserResult:
    """Result of a create/update that returns the user."""

    success: bool
    user: User | None = None
    error: str | None = None


@dataclass
class OperationResult:
    """Result of an operation with no payload."""

    success: bool
    error: str | None = None


@dataclass
class SystemStats:
    """User counts by level."""

    total_users: int
    admin_users: int
    manager_users: int
    regular_users: int


class AuthService:
    """Orchestrates credentials, tokens, session slots and the user store.

    Handles:
    - Login / logout with unsigned session tokens
    - Current-user lookup with self-healing on invalid sessions
    - User CRUD with username/email uniqueness
    - Password changes against the in-memory credential map
    """

    def __init__(
        self,
        config: AuthConfig,
        user_store: UserStore,
        session_store: SessionStore,
        credentials: CredentialStore,
        token_codec: TokenCodec,
        security_logger: SecurityLogger,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._config = config
        self._user_store = user_store
        self._session_store = session_store
        self._credentials = credentials
        self._token_codec = token_codec
        self._security_logger = security_logger
        self._clock = clock

        self._user_store.initialize()

    # -------------------------------------------------------------------------
    # Session
    # -------------------------------------------------------------------------

    async def login(
        self,
        username: str,
        password: str,
        level: UserLevel | str,
    ) -> LoginResult:
        """Check credentials and open a session.

        Flow:
        1. Await simulated network latency (every attempt)
        2. Find user with exact username and matching level
        3. Check password against the credential map
        4. Mint token, save token and user snapshot

        Returns:
            LoginResult with success=False and nothing else on any mismatch.
        """
        await asyncio.sleep(self._config.login_delay_seconds)

        try:
            requested_level = UserLevel(level)
        except ValueError:
            requested_level = None

        user = self._user_store.get_user_by_username(username)

        if (
            user is None
            or requested_level is None
            or user.level != requested_level
            or not self._credentials.check(username, password)
        ):
            self._security_logger.log(
                SecurityEvent.LOGIN_FAILED,
                username=username,
                details={"reason": "invalid_credentials"},
            )
            return LoginResult(success=False)

        token = self._token_codec.encode(user, self._clock())
        self._session_store.save(token, user)

        self._security_logger.log(
            SecurityEvent.LOGIN_SUCCEEDED,
            username=user.username,
            user_id=user.id,
            details={"level": user.level.value},
        )

        return LoginResult(success=True, token=token, user=user)

    def logout(self) -> None:
        """Clear both session slots. Safe to call with no session."""
        snapshot = self._snapshot()
        self._session_store.clear()

        self._security_logger.log(
            SecurityEvent.LOGOUT,
            username=snapshot.username if snapshot else None,
            user_id=snapshot.id if snapshot else None,
        )

    def get_current_user(self) -> User | None:
        """Return the session snapshot if the session is valid.

        The snapshot is returned as stored, not re-read from the user store.
        Half-written sessions, invalid or expired tokens, corrupted
        snapshots and token/snapshot id mismatches end the session.
        """
        token = self._session_store.load_token()
        try:
            snapshot = self._session_store.load_user()
        except StorageCorruptedError as e:
            logger.warning(str(e))
            self._expire_session(reason="corrupted_snapshot")
            return None

        if token is None and snapshot is None:
            return None

        if token is None or snapshot is None:
            self._expire_session(reason="incomplete_session")
            return None

        payload = self._token_codec.decode(token, self._clock())
        if payload is None:
            self._expire_session(reason="invalid_token", user=snapshot)
            return None

        if payload.user_id != snapshot.id:
            self._expire_session(reason="user_mismatch", user=snapshot)
            return None

        return snapshot

    def is_authenticated(self) -> bool:
        """True if a valid, unexpired token is stored. Self-heals otherwise."""
        token = self._session_store.load_token()
        if token is None:
            return False

        if self._token_codec.decode(token, self._clock()) is None:
            self._expire_session(reason="invalid_token")
            return False

        return True

    def _expire_session(self, reason: str, user: User | None = None) -> None:
        self._session_store.clear()
        self._security_logger.log(
            SecurityEvent.SESSION_EXPIRED,
            username=user.username if user else None,
            user_id=user.id if user else None,
            details={"reason": reason},
        )

    def _snapshot(self) -> User | None:
        """Session snapshot without validating the token."""
        try:
            return self._session_store.load_user()
        except StorageCorruptedError as e:
            logger.warning(str(e))
            return None

    def _refresh_snapshot(self, user: User) -> None:
        """Rewrite the session snapshot if user is the logged-in user."""
        snapshot = self._snapshot()
        if snapshot is not None and snapshot.id == user.id:
            self._session_store.save_user(user)

    # -------------------------------------------------------------------------
    # User reads
    # -------------------------------------------------------------------------

    def get_all_users(self) -> list[User]:
        return self._user_store.list_users()

    def get_user_by_id(self, user_id: str) -> User | None:
        return self._user_store.get_user_by_id(user_id)

    def search_users(
        self,
        term: str | None = None,
        level: UserLevel | str | None = None,
    ) -> list[User]:
        """Filter users by case-insensitive text and/or level.

        term matches as a substring of name, username or email.
        An unknown level matches nothing.
        """
        users = self._user_store.list_users()

        if term:
            needle = term.lower()
            users = [
                u for u in users
                if any(
                    needle in value.lower()
                    for value in (u.name, u.username, u.email)
                    if value
                )
            ]

        if level is not None:
            try:
                wanted = UserLevel(level)
            except ValueError:
                return []
            users = [u for u in users if u.level == wanted]

        return users

    def get_system_stats(self) -> SystemStats:
        users = self._user_store.list_users()
        return SystemStats(
            total_users=len(users),
            admin_users=sum(1 for u in users if u.level == UserLevel.ADMIN),
            manager_users=sum(1 for u in users if u.level == UserLevel.MANAGER),
            regular_users=sum(1 for u in users if u.level == UserLevel.REGULAR),
        )

    # -------------------------------------------------------------------------
    # User writes
    # -------------------------------------------------------------------------

    def _generate_id(self, now: datetime) -> str:
        """Epoch millis + random base36 suffix. Unique with high probability only."""
        suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(_ID_SUFFIX_LENGTH))
        return f"{int(now.timestamp() * 1000)}{suffix}"

    def _ensure_username_free(self, username: str, exclude_id: str | None = None) -> None:
        existing = self._user_store.get_user_by_username(username)
        if existing is not None and existing.id != exclude_id:
            raise UsernameTakenError(username)

    def _ensure_email_free(self, email: str, exclude_id: str | None = None) -> None:
        existing = self._user_store.get_user_by_email(email)
        if existing is not None and existing.id != exclude_id:
            raise EmailInUseError(email)

    @staticmethod
    def _merge(user: User, patch: UserUpdate) -> User:
        return User.model_validate({**user.model_dump(), **patch.changes()})

    @staticmethod
    def _as_update(patch: UserUpdate | dict[str, Any]) -> UserUpdate:
        """Validate a patch. id and createdAt in a dict patch are ignored."""
        if isinstance(patch, dict):
            patch = {k: v for k, v in patch.items() if k not in _IMMUTABLE_FIELDS}
        return UserUpdate.model_validate(patch)

    def _save_update(self, existing: User, patch: UserUpdate) -> User:
        """Merge and persist.

        Raises:
            StorageCorruptedError: If the user collection cannot be read back.
        """
        updated = self._merge(existing, patch)
        self._user_store.replace_user(existing.id, updated)
        self._refresh_snapshot(updated)

        self._security_logger.log(
            SecurityEvent.USER_UPDATED,
            username=updated.username,
            user_id=updated.id,
            details={
                "changes": compute_changes(
                    existing.model_dump(mode="json"),
                    updated.model_dump(mode="json"),
                )
            },
        )
        return updated

    def update_user(
        self,
        user_id: str,
        patch: UserUpdate | dict[str, Any],
    ) -> User | None:
        """Profile self-edit: merge patch into the user.

        Does not re-check username/email uniqueness (update_user_by_id does).

        Returns:
            The updated user, or None if user_id is unknown, the patch is
            invalid, or the user collection is corrupted.
        """
        try:
            patch = self._as_update(patch)
        except ValidationError as e:
            logger.info(f"Rejected profile patch for {user_id}: {_describe(e)}")
            return None

        existing = self._user_store.get_user_by_id(user_id)
        if existing is None:
            return None

        try:
            return self._save_update(existing, patch)
        except StorageCorruptedError as e:
            logger.warning(str(e))
            return None

    def create_user(
        self,
        data: UserCreate | dict[str, Any],
        password: str,
    ) -> UserResult:
        """Create a user and set its password.

        Fails with "Username already exists", "Email already in use", an
        invalid-data message, or a corrupted-storage message without
        touching any state.
        """
        try:
            data = UserCreate.model_validate(data)
        except ValidationError as e:
            return UserResult(success=False, error=_describe(e))

        try:
            self._ensure_username_free(data.username)
            if data.email:
                self._ensure_email_free(data.email)

            now = self._clock()
            user = User(id=self._generate_id(now), created_at=now, **data.model_dump())
            self._user_store.insert_user(user)
        except StorageCorruptedError as e:
            logger.warning(str(e))
            return UserResult(success=False, error=str(e))
        except AuthError as e:
            return UserResult(success=False, error=str(e))

        self._credentials.set(user.username, password)

        self._security_logger.log(
            SecurityEvent.USER_CREATED,
            username=user.username,
            user_id=user.id,
            details={"level": user.level.value},
        )

        return UserResult(success=True, user=user)

    def update_user_by_id(
        self,
        user_id: str,
        patch: UserUpdate | dict[str, Any],
    ) -> UserResult:
        """Admin edit: merge patch with uniqueness checks on changed fields."""
        try:
            patch = self._as_update(patch)
        except ValidationError as e:
            return UserResult(success=False, error=_describe(e))

        changes = patch.changes()
        existing = self._user_store.get_user_by_id(user_id)

        try:
            if existing is None:
                raise UserNotFoundError()

            new_username = changes.get("username")
            if new_username is not None and new_username != existing.username:
                self._ensure_username_free(new_username, exclude_id=user_id)

            new_email = changes.get("email")
            if new_email and new_email != existing.email:
                self._ensure_email_free(new_email, exclude_id=user_id)

            updated = self._save_update(existing, patch)
        except StorageCorruptedError as e:
            logger.warning(str(e))
            return UserResult(success=False, error=str(e))
        except AuthError as e:
            return UserResult(success=False, error=str(e))

        return UserResult(success=True, user=updated)

    def delete_user(self, user_id: str) -> OperationResult:
        """Delete a user and its credential. The logged-in user cannot delete itself."""
        user = self._user_store.get_user_by_id(user_id)

        try:
            if user is None:
                raise UserNotFoundError()

            current = self.get_current_user()
            if current is not None and current.id == user_id:
                raise SelfDeleteError()
        except AuthError as e:
            return OperationResult(success=False, error=str(e))

        try:
            self._user_store.remove_user(user_id)
        except StorageCorruptedError as e:
            logger.warning(str(e))
            return OperationResult(success=False, error=str(e))

        self._credentials.remove(user.username)

        self._security_logger.log(
            SecurityEvent.USER_DELETED,
            username=user.username,
            user_id=user.id,
        )

        return OperationResult(success=True)

    # -------------------------------------------------------------------------
    # Passwords
    # -------------------------------------------------------------------------

    def update_user_password(self, username: str, new_password: str) -> OperationResult:
        """Admin password reset: create or replace the credential."""
        user = self._user_store.get_user_by_username(username)
        if user is None:
            return OperationResult(success=False, error=str(UserNotFoundError()))

        self._credentials.set(username, new_password)

        self._security_logger.log(
            SecurityEvent.PASSWORD_CHANGED,
            username=username,
            user_id=user.id,
            details={"by": "admin"},
        )

        return OperationResult(success=True)

    def change_password(
        self,
        current_password: str,
        new_password: str,
        confirm_password: str,
    ) -> OperationResult:
        """Settings flow: the logged-in user changes their own password."""
        user = self.get_current_user()

        try:
            if user is None:
                raise NotAuthenticatedError()

            if new_password != confirm_password:
                raise PasswordPolicyError("New passwords do not match")

            if len(new_password) < self._config.min_password_length:
                raise PasswordPolicyError(
                    f"Password must be at least {self._config.min_password_length} characters"
                )

            if not self._credentials.check(user.username, current_password):
                raise PasswordPolicyError("Current password is incorrect")
        except AuthError as e:
            return OperationResult(success=False, error=str(e))

        self._credentials.set(user.username, new_password)

        self._security_logger.log(
            SecurityEvent.PASSWORD_CHANGED,
            username=user.username,
            user_id=user.id,
            details={"by": "self"},
        )

        return OperationResult(success=True)
