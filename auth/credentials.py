"""Plaintext credential map.

Process memory only: nothing here is persisted, so passwords set at
runtime are gone after a restart while the user records survive.
NOT a secure password store.
"""

from auth.seed import SEED_PASSWORDS


class CredentialStore:
    """username -> plaintext password, exact-match comparison."""

    def __init__(self, seed: dict[str, str] | None = None):
        self._passwords: dict[str, str] = dict(SEED_PASSWORDS if seed is None else seed)

    def check(self, username: str, password: str) -> bool:
        """True only if an entry exists and matches exactly."""
        stored = self._passwords.get(username)
        return stored is not None and stored == password

    def set(self, username: str, password: str) -> None:
        """Create or replace the entry for username."""
        self._passwords[username] = password

    def remove(self, username: str) -> None:
        """Drop the entry. Safe to call for unknown usernames."""
        self._passwords.pop(username, None)
