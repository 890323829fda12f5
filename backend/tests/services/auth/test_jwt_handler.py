# tests/services/auth/test_jwt_handler.py
"""
Tests for session token handling.

Tests:
- Session token creation with correct claims
- Token validation (valid, expired, tampered, wrong type)
- verify_session_token returning the user id or None
"""

from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from fintrack.config import settings
from fintrack.services.auth.jwt_handler import JWTHandler
from fintrack.services.exceptions import (
    AuthenticationError,
    InvalidTokenError,
    TokenExpiredError,
)


USER_ID = "3f2c1b0a9e8d4c7b6a5f4e3d2c1b0a99"


def _encode(claims: dict, key: str | None = None) -> str:
    return jwt.encode(
        claims,
        key or settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
    )


# =============================================================================
# TEST: SESSION TOKEN CREATION
# =============================================================================


class TestCreateSessionToken:
    """Tests for session token creation."""

    def test_create_token_is_valid_jwt(self):
        """Created token should be a JWT (3 dot-separated parts)."""
        token = JWTHandler.create_session_token(USER_ID)

        assert isinstance(token, str)
        assert len(token.split(".")) == 3  # header.payload.signature

    def test_token_contains_correct_claims(self):
        token = JWTHandler.create_session_token(USER_ID)

        payload = JWTHandler.validate_session_token(token)

        assert payload["sub"] == USER_ID
        assert payload["type"] == "access"
        assert "exp" in payload
        assert "iat" in payload

    def test_token_lifetime_is_thirty_days(self):
        token = JWTHandler.create_session_token(USER_ID)

        payload = JWTHandler.validate_session_token(token)

        assert payload["exp"] - payload["iat"] == 30 * 24 * 60 * 60

    def test_different_users_get_different_tokens(self):
        token1 = JWTHandler.create_session_token("user-one")
        token2 = JWTHandler.create_session_token("user-two")

        assert token1 != token2


# =============================================================================
# TEST: SESSION TOKEN VALIDATION
# =============================================================================


class TestValidateSessionToken:
    """Tests for session token validation."""

    def test_token_near_end_of_lifetime_still_valid(self):
        issued_at = datetime.now(timezone.utc) - timedelta(days=29)
        token = JWTHandler.create_session_token(USER_ID, issued_at=issued_at)

        assert JWTHandler.validate_session_token(token)["sub"] == USER_ID

    def test_expired_token_raises_error(self):
        """A token issued 31 days ago is past its 30-day lifetime."""
        issued_at = datetime.now(timezone.utc) - timedelta(days=31)
        token = JWTHandler.create_session_token(USER_ID, issued_at=issued_at)

        with pytest.raises(TokenExpiredError) as exc_info:
            JWTHandler.validate_session_token(token)

        assert "expired" in str(exc_info.value).lower()

    def test_garbage_token_raises_error(self):
        with pytest.raises(InvalidTokenError):
            JWTHandler.validate_session_token("not-a-valid-jwt")

    def test_wrong_secret_raises_error(self):
        now = datetime.now(timezone.utc)
        token = _encode(
            {"sub": USER_ID, "iat": now, "exp": now + timedelta(days=1), "type": "access"},
            key="some-other-secret-key-of-sufficient-length",
        )

        with pytest.raises(InvalidTokenError):
            JWTHandler.validate_session_token(token)

    def test_modified_payload_raises_error(self):
        """Swapping in another payload must break the signature."""
        token = JWTHandler.create_session_token(USER_ID)
        other = JWTHandler.create_session_token("someone-else")

        header, _, signature = token.split(".")
        forged = ".".join([header, other.split(".")[1], signature])

        with pytest.raises(InvalidTokenError):
            JWTHandler.validate_session_token(forged)

    def test_wrong_token_type_raises_error(self):
        now = datetime.now(timezone.utc)
        token = _encode(
            {"sub": USER_ID, "iat": now, "exp": now + timedelta(days=1), "type": "refresh"}
        )

        with pytest.raises(InvalidTokenError) as exc_info:
            JWTHandler.validate_session_token(token)

        assert "type" in str(exc_info.value).lower()

    def test_missing_subject_raises_error(self):
        now = datetime.now(timezone.utc)
        token = _encode({"iat": now, "exp": now + timedelta(days=1), "type": "access"})

        with pytest.raises(InvalidTokenError):
            JWTHandler.validate_session_token(token)

    def test_errors_are_authentication_errors(self):
        """All token failures map to the unauthenticated family."""
        assert issubclass(TokenExpiredError, AuthenticationError)
        assert issubclass(InvalidTokenError, AuthenticationError)


# =============================================================================
# TEST: VERIFY (BOOLEAN-STYLE)
# =============================================================================


class TestVerifySessionToken:
    """verify_session_token returns the user id or None."""

    def test_valid_token_returns_user_id(self):
        token = JWTHandler.create_session_token(USER_ID)

        assert JWTHandler.verify_session_token(token) == USER_ID

    def test_expired_token_returns_none(self):
        issued_at = datetime.now(timezone.utc) - timedelta(days=31)
        token = JWTHandler.create_session_token(USER_ID, issued_at=issued_at)

        assert JWTHandler.verify_session_token(token) is None

    def test_invalid_token_returns_none(self):
        assert JWTHandler.verify_session_token("garbage") is None
        assert JWTHandler.verify_session_token("") is None
