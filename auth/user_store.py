"""Persisted user collection.

The whole collection lives in one storage slot as a JSON array. Every
write is read-modify-write of the full array (last write wins; there is
no locking). Reads are schema-validated against list[User]; writes
refuse to touch a slot that fails validation.
"""

import logging
from datetime import datetime
from typing import Callable

from pydantic import TypeAdapter, ValidationError

from clients.storage import KeyValueStorage
from auth.exceptions import StorageCorruptedError
from auth.seed import seed_users
from auth.types import User
from utils.timezone import now_utc

logger = logging.getLogger(__name__)

_USER_LIST = TypeAdapter(list[User])


class UserStore:
    """Ordered User records in a single durable slot."""

    def __init__(
        self,
        storage: KeyValueStorage,
        key: str = "app_users",
        clock: Callable[[], datetime] = now_utc,
    ):
        self._storage = storage
        self._key = key
        self._clock = clock

    def initialize(self) -> bool:
        """
        Write the seed users if the slot is absent.

        Existing data is left untouched (no migration of stored shape).

        Returns:
            True if seeds were written.
        """
        if self._storage.get(self._key) is not None:
            return False
        self._save(seed_users(self._clock()))
        logger.info(f"Seeded user store '{self._key}'")
        return True

    def _load(self) -> list[User]:
        """
        Read and validate the collection.

        Raises:
            StorageCorruptedError: If the slot is not a JSON array of users.
        """
        raw = self._storage.get(self._key)
        if raw is None:
            return []
        try:
            return _USER_LIST.validate_json(raw)
        except ValidationError as e:
            raise StorageCorruptedError(self._key, f"{e.error_count()} validation error(s)")

    def _save(self, users: list[User]) -> None:
        self._storage.set(
            self._key,
            _USER_LIST.dump_json(users, by_alias=True).decode("utf-8"),
        )

    def list_users(self) -> list[User]:
        """All users in insertion order. A corrupted slot reads as empty."""
        try:
            return self._load()
        except StorageCorruptedError as e:
            logger.warning(f"{e}; treating as empty")
            return []

    def get_user_by_id(self, user_id: str) -> User | None:
        return next((u for u in self.list_users() if u.id == user_id), None)

    def get_user_by_username(self, username: str) -> User | None:
        """First user with exactly this username (case-sensitive)."""
        return next((u for u in self.list_users() if u.username == username), None)

    def get_user_by_email(self, email: str) -> User | None:
        return next((u for u in self.list_users() if u.email == email), None)

    def insert_user(self, user: User) -> None:
        """
        Append user and persist.

        Raises:
            StorageCorruptedError: If the existing slot is unreadable.
        """
        users = self._load()
        users.append(user)
        self._save(users)

    def replace_user(self, user_id: str, user: User) -> bool:
        """
        Replace the record with user_id in place.

        Returns:
            True if found and replaced, False if not found.
        """
        users = self._load()
        for index, existing in enumerate(users):
            if existing.id == user_id:
                users[index] = user
                self._save(users)
                return True
        return False

    def remove_user(self, user_id: str) -> bool:
        """
        Remove the record with user_id.

        Returns:
            True if found and removed, False if not found.
        """
        users = self._load()
        remaining = [u for u in users if u.id != user_id]
        if len(remaining) == len(users):
            return False
        self._save(remaining)
        return True
