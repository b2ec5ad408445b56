"""Authentication configuration."""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field


class AuthConfig(BaseModel):
    """
    Authentication configuration.

    Durations are in their natural units (hours for the session, seconds
    for the simulated login latency). Storage keys default to the slot
    names used by the legacy browser console. Records in the legacy shape
    (nivel/nome/telefone fields) are not migrated and read as corrupted.
    """

    # Session settings
    session_expiry_hours: int = Field(
        default=24,
        description="Token lifetime in hours, fixed at mint time",
        ge=1,
        le=2160,
    )
    login_delay_seconds: float = Field(
        default=1.0,
        description="Simulated network latency awaited on every login",
        ge=0,
        le=10,
    )

    # Password policy (change-password flow)
    min_password_length: int = Field(
        default=6,
        description="Minimum length for a new password",
        ge=1,
        le=128,
    )

    # Storage slots
    users_key: str = Field(default="app_users", min_length=1)
    token_key: str = Field(default="auth_token", min_length=1)
    session_key: str = Field(default="user_session", min_length=1)

    # Security log
    security_log_buffer_size: int = Field(
        default=1000,
        description="Recent security events kept in memory",
        ge=0,
        le=100_000,
    )

    @property
    def session_expiry_seconds(self) -> int:
        return self.session_expiry_hours * 3600


_ENV_FIELDS = {
    "AUTH_SESSION_EXPIRY_HOURS": "session_expiry_hours",
    "AUTH_LOGIN_DELAY_SECONDS": "login_delay_seconds",
    "AUTH_MIN_PASSWORD_LENGTH": "min_password_length",
    "AUTH_USERS_KEY": "users_key",
    "AUTH_TOKEN_KEY": "token_key",
    "AUTH_SESSION_KEY": "session_key",
    "AUTH_SECURITY_LOG_BUFFER_SIZE": "security_log_buffer_size",
}


def load_config(dotenv_path: str | None = None) -> AuthConfig:
    """
    Build AuthConfig from AUTH_* environment variables.

    Loads .env first (existing environment wins). Unset variables keep
    their defaults; out-of-range values raise pydantic.ValidationError.
    """
    load_dotenv(dotenv_path)
    values = {
        field: os.environ[env_name]
        for env_name, field in _ENV_FIELDS.items()
        if os.environ.get(env_name)
    }
    return AuthConfig(**values)
