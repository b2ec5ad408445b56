"""Tests for auth/factory.py - service wiring."""

import asyncio
from unittest.mock import patch

import pytest

from auth.config import AuthConfig
from auth.factory import create_auth_service, create_storage
from clients.file_storage import FileStorage
from clients.memory_storage import InMemoryStorage


class TestCreateStorage:
    """Backend selection."""

    def test_default_memory(self, monkeypatch):
        monkeypatch.delenv("AUTH_STORAGE_BACKEND", raising=False)

        assert isinstance(create_storage(), InMemoryStorage)

    def test_file_backend(self, monkeypatch, tmp_path):
        monkeypatch.setenv("AUTH_STORAGE_PATH", str(tmp_path / "store.json"))

        storage = create_storage("file")

        assert isinstance(storage, FileStorage)
        assert storage.path == tmp_path / "store.json"

    def test_valkey_requires_url(self, monkeypatch):
        monkeypatch.delenv("AUTH_VALKEY_URL", raising=False)

        with pytest.raises(ValueError, match="AUTH_VALKEY_URL"):
            create_storage("valkey")

    def test_valkey_backend(self, monkeypatch):
        monkeypatch.setenv("AUTH_VALKEY_URL", "redis://localhost:6379/0")

        with patch("clients.valkey_client.redis.from_url") as from_url:
            create_storage("valkey")

        from_url.assert_called_once_with("redis://localhost:6379/0", decode_responses=True)

    def test_unknown_backend(self):
        with pytest.raises(ValueError, match="Unknown storage backend"):
            create_storage("sqlite")


class TestCreateAuthService:
    """End-to-end wiring."""

    def test_seeds_and_logs_in(self):
        service = create_auth_service(
            config=AuthConfig(login_delay_seconds=0),
            storage=InMemoryStorage(),
        )

        result = asyncio.run(service.login("admin", "admin123", "admin"))

        assert result.success
        assert service.get_current_user().username == "admin"

    def test_file_storage_persists_users_across_instances(self, tmp_path):
        config = AuthConfig(login_delay_seconds=0)
        path = tmp_path / "storage.json"

        first = create_auth_service(config=config, storage=FileStorage(path))
        first.create_user({"username": "alice", "level": "regular"}, "pw123456")

        second = create_auth_service(config=config, storage=FileStorage(path))

        assert [u.username for u in second.get_all_users()][-1] == "alice"
