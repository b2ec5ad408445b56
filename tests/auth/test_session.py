"""Tests for SessionStore - token and snapshot slots."""

from datetime import datetime, timezone

import pytest

from auth.exceptions import StorageCorruptedError
from auth.session import SessionStore
from auth.types import User, UserLevel


@pytest.fixture
def session_store(storage, config):
    return SessionStore(storage, config)


@pytest.fixture
def user():
    return User(
        id="1",
        username="admin",
        level=UserLevel.ADMIN,
        created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )


class TestSave:
    """Test writing session slots."""

    def test_save_writes_both_slots(self, session_store, storage, config, user):
        session_store.save("mock.abc.signature", user)

        assert storage.get(config.token_key) == "mock.abc.signature"
        assert session_store.load_user() == user

    def test_save_user_only_touches_snapshot(self, session_store, user):
        session_store.save("tok", user)
        session_store.save_user(user.model_copy(update={"name": "New"}))

        assert session_store.load_token() == "tok"
        assert session_store.load_user().name == "New"


class TestLoad:
    """Test reading session slots."""

    def test_empty(self, session_store):
        assert session_store.load_token() is None
        assert session_store.load_user() is None

    def test_corrupted_snapshot_raises(self, session_store, storage, config):
        storage.set(config.session_key, "[]")

        with pytest.raises(StorageCorruptedError):
            session_store.load_user()


class TestClear:
    """Test logout clearing."""

    def test_clear_removes_both(self, session_store, storage, config, user):
        session_store.save("tok", user)
        session_store.clear()

        assert storage.exists(config.token_key) is False
        assert storage.exists(config.session_key) is False

    def test_clear_without_session(self, session_store):
        session_store.clear()
