"""
Session token creation and validation.

Session tokens are HS256 JWTs that are never stored server-side:
- sub: User ID (opaque string)
- iat: Issued at timestamp
- exp: Expiration timestamp (iat + JWT_SESSION_TOKEN_EXPIRE_DAYS)
- type: "access"

There is no revocation list. Rotating JWT_SECRET_KEY invalidates every
outstanding token at once.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, ExpiredSignatureError, jwt

from fintrack.config import settings
from fintrack.services.constants import SESSION_TOKEN_TYPE
from fintrack.services.exceptions import TokenExpiredError, InvalidTokenError


logger = logging.getLogger(__name__)


class JWTHandler:
    """Handles session token creation and validation."""

    @staticmethod
    def create_session_token(
        user_id: str,
        issued_at: datetime | None = None,
    ) -> str:
        """
        Create a signed session token for a user.

        Args:
            user_id: The user's opaque ID
            issued_at: Override for the issue time (defaults to now, UTC)

        Returns:
            Encoded JWT string
        """
        if issued_at is None:
            issued_at = datetime.now(timezone.utc)

        payload = {
            "sub": str(user_id),
            "iat": issued_at,
            "exp": issued_at + timedelta(days=settings.jwt_session_token_expire_days),
            "type": SESSION_TOKEN_TYPE,
        }

        return jwt.encode(
            payload,
            settings.jwt_secret_key,
            algorithm=settings.jwt_algorithm,
        )

    @staticmethod
    def validate_session_token(token: str) -> dict[str, Any]:
        """
        Validate a session token and return its payload.

        Args:
            token: The JWT string to validate

        Returns:
            Dict containing the token claims (sub, iat, exp, type)

        Raises:
            TokenExpiredError: If the token has expired
            InvalidTokenError: If the token is malformed, mis-signed,
                of the wrong type or missing its subject
        """
        try:
            payload = jwt.decode(
                token,
                settings.jwt_secret_key,
                algorithms=[settings.jwt_algorithm],
            )
        except ExpiredSignatureError:
            raise TokenExpiredError()
        except JWTError as e:
            logger.debug(f"Session token rejected: {e}")
            raise InvalidTokenError()

        if payload.get("type") != SESSION_TOKEN_TYPE:
            raise InvalidTokenError("Invalid token type")

        if not payload.get("sub"):
            raise InvalidTokenError()

        return payload

    @staticmethod
    def verify_session_token(token: str) -> str | None:
        """
        Return the user ID a token was issued for, or None if it is not valid.

        Expired, malformed and mis-signed tokens all yield None.
        """
        try:
            payload = JWTHandler.validate_session_token(token)
        except (TokenExpiredError, InvalidTokenError):
            return None
        return payload["sub"]
