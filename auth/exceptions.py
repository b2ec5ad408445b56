"""Typed exceptions for auth failures.

Validation failures are raised inside the auth package and turned into
``success=False`` results at the AuthService boundary; str(exc) is the
message shown to the end user.
"""


class AuthError(Exception):
    """Base class for authentication/authorization errors."""


class InvalidTokenError(AuthError):
    """Session token is malformed, undecodable, or expired."""


class UserNotFoundError(AuthError):
    """No user matches the given id or username."""

    def __init__(self, message: str = "User not found"):
        super().__init__(message)


class UsernameTakenError(AuthError):
    """Another user already holds this username."""

    def __init__(self, username: str):
        self.username = username
        super().__init__("Username already exists")


class EmailInUseError(AuthError):
    """Another user already holds this email."""

    def __init__(self, email: str):
        self.email = email
        super().__init__("Email already in use")


class SelfDeleteError(AuthError):
    """The authenticated user tried to delete their own record."""

    def __init__(self):
        super().__init__("Cannot delete your own user")


class NotAuthenticatedError(AuthError):
    """Operation needs a session and there is none."""

    def __init__(self):
        super().__init__("Not authenticated")


class PasswordPolicyError(AuthError):
    """New password rejected (wrong current password, mismatch, too short)."""


class StorageCorruptedError(AuthError):
    """
    A storage slot holds data that does not match its schema.

    Readers treat the slot as absent. Writers refuse to overwrite it.
    """

    def __init__(self, key: str, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(f"Storage slot '{key}' is corrupted: {reason}")
