"""Wire up an AuthService from config and a storage backend."""

import logging
import os
from datetime import datetime
from typing import Callable

from clients.file_storage import FileStorage
from clients.memory_storage import InMemoryStorage
from clients.storage import KeyValueStorage
from clients.valkey_client import ValkeyClient
from auth.config import AuthConfig, load_config
from auth.credentials import CredentialStore
from auth.security_logger import SecurityLogger
from auth.service import AuthService
from auth.session import SessionStore
from auth.token_codec import TokenCodec
from auth.user_store import UserStore
from utils.timezone import now_utc

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_PATH = "data/storage.json"


def create_storage(backend: str | None = None) -> KeyValueStorage:
    """
    Build the storage backend named by AUTH_STORAGE_BACKEND.

    Backends:
        memory: InMemoryStorage (default)
        file: FileStorage at AUTH_STORAGE_PATH
        valkey: ValkeyClient at AUTH_VALKEY_URL (required)

    Raises:
        ValueError: If the backend is unknown or its settings are missing.
    """
    backend = (backend or os.getenv("AUTH_STORAGE_BACKEND") or "memory").lower()

    if backend == "memory":
        return InMemoryStorage()

    if backend == "file":
        return FileStorage(os.getenv("AUTH_STORAGE_PATH") or DEFAULT_STORAGE_PATH)

    if backend == "valkey":
        url = os.getenv("AUTH_VALKEY_URL")
        if not url:
            raise ValueError("AUTH_VALKEY_URL environment variable is required")
        return ValkeyClient(url)

    raise ValueError(f"Unknown storage backend: {backend}")


def create_auth_service(
    config: AuthConfig | None = None,
    storage: KeyValueStorage | None = None,
    clock: Callable[[], datetime] = now_utc,
) -> AuthService:
    """Build the full object graph. Missing pieces come from the environment."""
    config = config or load_config()
    storage = storage if storage is not None else create_storage()

    service = AuthService(
        config=config,
        user_store=UserStore(storage, key=config.users_key, clock=clock),
        session_store=SessionStore(storage, config),
        credentials=CredentialStore(),
        token_codec=TokenCodec(expiry_seconds=config.session_expiry_seconds),
        security_logger=SecurityLogger(
            buffer_size=config.security_log_buffer_size,
            clock=clock,
        ),
        clock=clock,
    )
    logger.info(f"AuthService ready ({type(storage).__name__})")
    return service
