"""Security event logging for auth audit trail.

Events go to the ``auth.security`` logger and into a bounded in-memory
buffer for inspection. Passwords are never recorded.
"""

import logging
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable

from utils.timezone import now_utc

logger = logging.getLogger("auth.security")


class SecurityEvent(Enum):
    """Auth security event types."""

    LOGIN_SUCCEEDED = "login_succeeded"
    LOGIN_FAILED = "login_failed"
    LOGOUT = "logout"
    SESSION_EXPIRED = "session_expired"
    USER_CREATED = "user_created"
    USER_UPDATED = "user_updated"
    USER_DELETED = "user_deleted"
    PASSWORD_CHANGED = "password_changed"


# Failures are logged at WARNING, everything else at INFO
_WARNING_EVENTS = {SecurityEvent.LOGIN_FAILED, SecurityEvent.SESSION_EXPIRED}


@dataclass
class SecurityEventRecord:
    """One logged event."""

    event: SecurityEvent
    created_at: datetime
    username: str | None = None
    user_id: str | None = None
    details: dict[str, Any] = field(default_factory=dict)


def compute_changes(
    old: dict[str, Any],
    new: dict[str, Any],
    exclude_fields: set[str] | None = None,
) -> dict[str, dict[str, Any]]:
    """
    Compute changes between two entity states.

    Returns:
        Dict of {field: {"old": old_val, "new": new_val}} for changed fields.
        Empty dict if no changes.
    """
    exclude = exclude_fields or set()
    changes = {}

    for key in set(old.keys()) | set(new.keys()):
        if key in exclude:
            continue

        old_val = old.get(key)
        new_val = new.get(key)

        if old_val != new_val:
            changes[key] = {"old": old_val, "new": new_val}

    return changes


class SecurityLogger:
    """Append-only security event logger with a bounded recent-events buffer."""

    def __init__(
        self,
        buffer_size: int = 1000,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._events: deque[SecurityEventRecord] = deque(maxlen=buffer_size)
        self._clock = clock

    def log(
        self,
        event: SecurityEvent,
        username: str | None = None,
        user_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Record an event and emit it to the auth.security logger."""
        record = SecurityEventRecord(
            event=event,
            created_at=self._clock(),
            username=username,
            user_id=user_id,
            details=details or {},
        )
        self._events.append(record)

        level = logging.WARNING if event in _WARNING_EVENTS else logging.INFO
        logger.log(
            level,
            f"{event.value} username={username} user_id={user_id}",
            extra={
                "security_event": event.value,
                "username": username,
                "user_id": user_id,
                "details": record.details,
            },
        )

    def get_recent_events(
        self,
        username: str | None = None,
        event_type: SecurityEvent | None = None,
        limit: int = 100,
    ) -> list[SecurityEventRecord]:
        """Recent events with optional filters, newest first."""
        matches = []
        for record in reversed(self._events):
            if username and record.username != username:
                continue
            if event_type and record.event != event_type:
                continue
            matches.append(record)
            if len(matches) >= limit:
                break
        return matches
