"""Pydantic models for auth domain."""

from datetime import datetime
from enum import Enum
from typing import Annotated

from pydantic import BaseModel, BeforeValidator, Field, field_validator

from utils.timezone import to_utc


class UserLevel(str, Enum):
    """Role gating which screens and operations a session may use."""

    ADMIN = "admin"
    MANAGER = "manager"
    REGULAR = "regular"

    @classmethod
    def _missing_(cls, value):
        # Wire values written by the legacy browser console
        if isinstance(value, str):
            return _LEVEL_ALIASES.get(value)
        return None


_LEVEL_ALIASES = {
    "user": UserLevel.REGULAR,
    "gerente": UserLevel.MANAGER,
}


def _coerce_level(value):
    if isinstance(value, str) and not isinstance(value, UserLevel):
        return UserLevel(value)
    return value


Level = Annotated[UserLevel, BeforeValidator(_coerce_level)]


class User(BaseModel):
    """A console user. Persisted with camelCase field names."""

    id: str = Field(..., min_length=1, description="Opaque id, immutable")
    username: str = Field(..., min_length=1)
    level: Level
    name: str | None = None
    email: str | None = None
    phone: str | None = None
    created_at: datetime = Field(..., alias="createdAt")

    model_config = {"populate_by_name": True}

    @field_validator("created_at")
    @classmethod
    def _created_at_utc(cls, value: datetime) -> datetime:
        return to_utc(value)


class UserCreate(BaseModel):
    """Fields supplied when creating a user (id and created_at are assigned)."""

    username: str = Field(..., min_length=1)
    level: Level
    name: str | None = None
    email: str | None = None
    phone: str | None = None


class UserUpdate(BaseModel):
    """
    Partial user patch.

    Only explicitly set fields are applied, so passing email=None clears
    the email while omitting it keeps it.
    """

    username: str | None = Field(default=None, min_length=1)
    level: Level | None = None
    name: str | None = None
    email: str | None = None
    phone: str | None = None

    model_config = {"extra": "forbid"}

    @field_validator("username", "level")
    @classmethod
    def _required_fields_not_null(cls, value):
        if value is None:
            raise ValueError("field cannot be cleared")
        return value

    def changes(self) -> dict:
        """Fields the caller set, keyed by User field name."""
        return self.model_dump(exclude_unset=True)


class TokenPayload(BaseModel):
    """Decoded session token body. Timestamps are epoch seconds."""

    user_id: str = Field(..., alias="userId")
    username: str
    level: Level
    iat: int
    exp: int

    model_config = {"populate_by_name": True}
