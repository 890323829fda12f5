"""
Authentication request/response schemas.

Defines Pydantic models for:
- OTP request and registration
- Login (password and Google)
- Set/change password
- User profile and auth responses

Password length is deliberately not enforced here beyond an upper
bound: the auth service owns the minimum-length rule and reports it as
a WeakPasswordError (400) rather than a schema error (422).
"""

from datetime import datetime

from pydantic import ConfigDict, EmailStr, Field

from fintrack.schemas.base import CamelModel
from fintrack.services.constants import (
    MAX_PASSWORD_LENGTH,
    OTP_CODE_DIGITS,
    OTP_CODE_PATTERN,
)


# =============================================================================
# REQUEST SCHEMAS
# =============================================================================


class SendOTPRequest(CamelModel):
    """Request body for requesting a registration code."""

    email: EmailStr = Field(
        ...,
        description="Address to send the verification code to",
        examples=["alice@example.com"],
    )


class UserRegisterRequest(CamelModel):
    """Request body for user registration."""

    name: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="User's display name",
        examples=["Alice"],
    )
    email: EmailStr = Field(
        ...,
        description="User's email address",
        examples=["alice@example.com"],
    )
    password: str = Field(
        ...,
        max_length=MAX_PASSWORD_LENGTH,
        description="Password (min 8 characters)",
        examples=["MySecurePassword123!"],
    )
    otp: str = Field(
        ...,
        min_length=OTP_CODE_DIGITS,
        max_length=OTP_CODE_DIGITS,
        pattern=OTP_CODE_PATTERN,
        description="Verification code received by email",
        examples=["123456"],
    )
    challenge_token: str = Field(
        ...,
        min_length=1,
        max_length=512,
        description="Challenge token returned by /auth/send-otp",
    )


class UserLoginRequest(CamelModel):
    """Request body for user login."""

    email: EmailStr = Field(
        ...,
        description="User's email address",
        examples=["alice@example.com"],
    )
    password: str = Field(
        ...,
        max_length=MAX_PASSWORD_LENGTH,
        description="User's password",
        examples=["MySecurePassword123!"],
    )


class GoogleLoginRequest(CamelModel):
    """Request body for Google sign-in."""

    assertion: str = Field(
        ...,
        min_length=1,
        max_length=4096,
        description="Google ID token obtained by the frontend",
    )


class SetPasswordRequest(CamelModel):
    """Request body for adding a password to a Google-only account."""

    new_password: str = Field(
        ...,
        max_length=MAX_PASSWORD_LENGTH,
        description="New password (min 8 characters)",
    )


class ChangePasswordRequest(CamelModel):
    """Request body for changing an existing password."""

    current_password: str = Field(
        ...,
        max_length=MAX_PASSWORD_LENGTH,
        description="Current password",
    )
    new_password: str = Field(
        ...,
        max_length=MAX_PASSWORD_LENGTH,
        description="New password (min 8 characters)",
    )


# =============================================================================
# RESPONSE SCHEMAS
# =============================================================================


class UserResponse(CamelModel):
    """Public view of a user. Never includes hashes or external ids."""

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(
        ...,
        description="User's unique ID",
    )
    name: str = Field(
        ...,
        description="User's display name",
    )
    email: str = Field(
        ...,
        description="User's email address",
    )
    has_password: bool = Field(
        ...,
        description="Whether email/password login is available",
    )


class AuthResponse(CamelModel):
    """Response for successful registration or login."""

    user: UserResponse
    token: str = Field(
        ...,
        description="Session token (send as 'Authorization: Bearer <token>')",
    )


class CurrentUserResponse(CamelModel):
    """Response for GET /auth/me."""

    user: UserResponse


class OTPChallengeResponse(CamelModel):
    """Challenge token to echo back at registration."""

    challenge_token: str = Field(
        ...,
        description="Signed challenge bound to the email and emailed code",
    )
    expires_at: datetime = Field(
        ...,
        description="When the challenge stops being accepted",
    )


class MessageResponse(CamelModel):
    """Simple message response."""

    message: str = Field(
        ...,
        description="Response message",
    )


class ClearDataResponse(CamelModel):
    """Result of clearing a user's financial records."""

    message: str
    deleted: dict[str, int] = Field(
        ...,
        description="Number of records removed per resource type",
    )
