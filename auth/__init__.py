"""Authentication, session and user management."""

from auth.exceptions import (
    AuthError,
    InvalidTokenError,
    UserNotFoundError,
    UsernameTakenError,
    EmailInUseError,
    SelfDeleteError,
    NotAuthenticatedError,
    PasswordPolicyError,
    StorageCorruptedError,
)
from auth.types import (
    User,
    UserLevel,
    UserCreate,
    UserUpdate,
    TokenPayload,
)
from auth.config import AuthConfig, load_config
from auth.credentials import CredentialStore
from auth.user_store import UserStore
from auth.session import SessionStore
from auth.token_codec import TokenCodec
from auth.security_logger import SecurityLogger, SecurityEvent, compute_changes
from auth.service import (
    AuthService,
    LoginResult,
    UserResult,
    OperationResult,
    SystemStats,
)
from auth.factory import create_auth_service, create_storage
