"""Shared test fixtures for the auth test suite."""

import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from clients.memory_storage import InMemoryStorage
from auth.config import AuthConfig
from auth.credentials import CredentialStore
from auth.security_logger import SecurityLogger
from auth.service import AuthService
from auth.session import SessionStore
from auth.token_codec import TokenCodec
from auth.user_store import UserStore


# =============================================================================
# SEED CONSTANTS
# =============================================================================

ADMIN_ID = "1"
REGULAR_ID = "2"
MANAGER_ID = "3"

START_TIME = datetime(2024, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


# =============================================================================
# CLOCK
# =============================================================================


class FakeClock:
    """Controllable clock. Call it to read the time, advance() to move it."""

    def __init__(self, start: datetime = START_TIME):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


# =============================================================================
# STORAGE AND SERVICE FIXTURES
# =============================================================================


@pytest.fixture
def storage() -> InMemoryStorage:
    """Fresh in-memory storage (stands in for the durable store)."""
    return InMemoryStorage()


@pytest.fixture
def config() -> AuthConfig:
    """Default config with no login latency."""
    return AuthConfig(login_delay_seconds=0)


@pytest.fixture
def credentials() -> CredentialStore:
    return CredentialStore()


@pytest.fixture
def security_logger(clock) -> SecurityLogger:
    return SecurityLogger(buffer_size=100, clock=clock)


@pytest.fixture
def make_service(storage, config, credentials, security_logger, clock):
    """Build an AuthService over the shared storage (simulates a restart when called twice)."""

    def _make(credential_store: CredentialStore | None = None) -> AuthService:
        return AuthService(
            config=config,
            user_store=UserStore(storage, key=config.users_key, clock=clock),
            session_store=SessionStore(storage, config),
            credentials=credential_store or credentials,
            token_codec=TokenCodec(expiry_seconds=config.session_expiry_seconds),
            security_logger=security_logger,
            clock=clock,
        )

    return _make


@pytest.fixture
def auth_service(make_service) -> AuthService:
    return make_service()


@pytest.fixture
def logged_in_admin(auth_service):
    """Log in as the seed admin and return the LoginResult."""
    result = asyncio.run(auth_service.login("admin", "admin123", "admin"))
    assert result.success
    return result
