"""Session slot storage.

A session is two slots: the encoded token and a denormalized snapshot of
the logged-in user. Both are written together and cleared together.
Token validity is the codec's concern, not this module's.
"""

import logging

from pydantic import ValidationError

from clients.storage import KeyValueStorage
from auth.config import AuthConfig
from auth.exceptions import StorageCorruptedError
from auth.types import User

logger = logging.getLogger(__name__)


class SessionStore:
    """Token slot + user-snapshot slot."""

    def __init__(self, storage: KeyValueStorage, config: AuthConfig):
        self._storage = storage
        self._token_key = config.token_key
        self._session_key = config.session_key

    def save(self, token: str, user: User) -> None:
        """Persist both slots (login)."""
        self._storage.set(self._token_key, token)
        self.save_user(user)

    def save_user(self, user: User) -> None:
        """Refresh the snapshot only (profile edits)."""
        self._storage.set(self._session_key, user.model_dump_json(by_alias=True))

    def load_token(self) -> str | None:
        return self._storage.get(self._token_key)

    def load_user(self) -> User | None:
        """
        Read the user snapshot.

        Raises:
            StorageCorruptedError: If the slot does not hold a valid User.
        """
        raw = self._storage.get(self._session_key)
        if raw is None:
            return None
        try:
            return User.model_validate_json(raw)
        except ValidationError as e:
            raise StorageCorruptedError(self._session_key, f"{e.error_count()} validation error(s)")

    def clear(self) -> None:
        """Remove both slots. Safe to call with no session."""
        self._storage.delete(self._token_key)
        self._storage.delete(self._session_key)
        logger.debug("Session slots cleared")
