"""Session token encoding.

Wire format: ``mock.<base64(json payload)>.signature``. The outer
segments are constant markers; there is NO signature. Anyone can forge a
token that decodes, so validity only means "well-formed and not expired".
Local-only placeholder, never use for real authentication.
"""

import base64
import binascii
import logging
from datetime import datetime

from auth.exceptions import InvalidTokenError
from auth.types import TokenPayload, User
from utils.timezone import to_epoch_seconds

logger = logging.getLogger(__name__)


class TokenCodec:
    """Encode/decode unsigned session tokens."""

    PREFIX = "mock"
    SUFFIX = "signature"

    def __init__(self, expiry_seconds: int = 24 * 60 * 60):
        self._expiry_seconds = expiry_seconds

    def encode(self, user: User, now: datetime) -> str:
        """Mint a token for user, valid for expiry_seconds from now."""
        iat = to_epoch_seconds(now)
        payload = TokenPayload(
            user_id=user.id,
            username=user.username,
            level=user.level,
            iat=iat,
            exp=iat + self._expiry_seconds,
        )
        body = payload.model_dump_json(by_alias=True)
        encoded = base64.b64encode(body.encode("utf-8")).decode("ascii")
        return f"{self.PREFIX}.{encoded}.{self.SUFFIX}"

    def parse(self, token: str) -> TokenPayload:
        """
        Decode token shape and payload without checking expiry.

        Raises:
            InvalidTokenError: If the token is not three dot-separated parts
                or the middle part is not base64 JSON of a TokenPayload.
        """
        if not isinstance(token, str):
            raise InvalidTokenError("Token must be a string")

        parts = token.split(".")
        if len(parts) != 3:
            raise InvalidTokenError("Token must have exactly three parts")

        try:
            raw = base64.b64decode(parts[1], validate=True)
            return TokenPayload.model_validate_json(raw)
        except (binascii.Error, ValueError) as e:
            # pydantic.ValidationError is a ValueError
            raise InvalidTokenError(f"Token payload undecodable: {e}")

    def decode(self, token: str, now: datetime) -> TokenPayload | None:
        """
        Return the payload of a valid token, else None.

        A token is valid iff it parses and its expiry is strictly after now.
        Never raises.
        """
        try:
            payload = self.parse(token)
        except InvalidTokenError as e:
            logger.debug(f"Rejected token: {e}")
            return None

        if payload.exp <= to_epoch_seconds(now):
            logger.debug(f"Rejected expired token for {payload.username}")
            return None

        return payload
