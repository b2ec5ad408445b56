"""Seed accounts written to an empty user store."""

from datetime import datetime

from auth.types import User, UserLevel


SEED_PASSWORDS: dict[str, str] = {
    "admin": "admin123",
    "user": "user123",
    "gerente": "gerente123",
}


def seed_users(created_at: datetime) -> list[User]:
    """The three fixed accounts, stamped with created_at."""
    return [
        User(
            id="1",
            username="admin",
            level=UserLevel.ADMIN,
            name="Administrador",
            email="admin@sistema.com",
            phone="(11) 99999-9999",
            created_at=created_at,
        ),
        User(
            id="2",
            username="user",
            level=UserLevel.REGULAR,
            name="Usuário Comum",
            email="user@sistema.com",
            phone="(11) 88888-8888",
            created_at=created_at,
        ),
        User(
            id="3",
            username="gerente",
            level=UserLevel.MANAGER,
            name="Gerente Sistema",
            email="gerente@sistema.com",
            phone="(11) 77777-7777",
            created_at=created_at,
        ),
    ]
