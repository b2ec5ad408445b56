"""
Key-value storage interface shared by every persistence backend.

Mirrors the browser localStorage contract: string keys, string values,
missing keys read as None. Callers own serialization.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class KeyValueStorage(Protocol):
    """String-keyed durable slots."""

    def get(self, key: str) -> str | None:
        """Return the stored string, or None if the key is absent."""
        ...

    def set(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""
        ...

    def delete(self, key: str) -> bool:
        """Remove key. Returns True if it existed."""
        ...

    def exists(self, key: str) -> bool:
        """Check if key is present."""
        ...
