"""
Authentication endpoints.

Provides:
- POST /auth/send-otp - Email a registration code, return its challenge
- POST /auth/register - Register with email/password + OTP
- POST /auth/login - Login with email/password
- POST /auth/google - Login with a Google ID token
- GET /auth/me - Get current user profile

Successful register/login responses carry the user and a 30-day session
token. Clients send it back as ``Authorization: Bearer <token>``.
"""

from datetime import datetime, timezone
from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from fintrack.database import get_db
from fintrack.dependencies import (
    CurrentIdentity,
    get_auth_service,
    get_google_verifier,
)
from fintrack.middleware.rate_limit import (
    limiter,
    RATE_LIMIT_AUTH_LOGIN,
    RATE_LIMIT_AUTH_REGISTER,
    RATE_LIMIT_AUTH_OTP,
)
from fintrack.schemas.auth import (
    SendOTPRequest,
    UserRegisterRequest,
    UserLoginRequest,
    GoogleLoginRequest,
    AuthResponse,
    CurrentUserResponse,
    OTPChallengeResponse,
    UserResponse,
)
from fintrack.services.auth import AuthService, AuthResult, GoogleIdentityVerifier


router = APIRouter(prefix="/auth", tags=["Authentication"])


def _to_auth_response(result: AuthResult) -> AuthResponse:
    """Convert an AuthResult into the public response DTO."""
    return AuthResponse(
        user=UserResponse.model_validate(result.user),
        token=result.token,
    )


# =============================================================================
# REGISTRATION
# =============================================================================


@router.post(
    "/send-otp",
    response_model=OTPChallengeResponse,
    summary="Send a registration code",
    description=(
        "Email a 6-digit verification code to the address and return the signed "
        "challenge token that must accompany it at registration."
    ),
)
@limiter.limit(RATE_LIMIT_AUTH_OTP)
def send_otp(
    request: Request,  # Required for rate limiter
    data: SendOTPRequest,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> OTPChallengeResponse:
    """Issue an OTP challenge and email its code."""
    challenge = auth_service.send_otp(data.email)
    return OTPChallengeResponse(
        challenge_token=challenge.challenge_token,
        expires_at=datetime.fromtimestamp(challenge.expires_at, tz=timezone.utc),
    )


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
    description="Create an account with email and password, confirmed by the emailed code.",
)
@limiter.limit(RATE_LIMIT_AUTH_REGISTER)
def register(
    request: Request,  # Required for rate limiter
    data: UserRegisterRequest,
    db: Annotated[Session, Depends(get_db)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> AuthResponse:
    """Register a new user with email/password."""
    result = auth_service.register(
        db=db,
        name=data.name,
        email=data.email,
        password=data.password,
        code=data.otp,
        challenge_token=data.challenge_token,
    )
    return _to_auth_response(result)


# =============================================================================
# LOGIN
# =============================================================================


@router.post(
    "/login",
    response_model=AuthResponse,
    summary="Login with email and password",
)
@limiter.limit(RATE_LIMIT_AUTH_LOGIN)
def login(
    request: Request,  # Required for rate limiter
    data: UserLoginRequest,
    db: Annotated[Session, Depends(get_db)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> AuthResponse:
    """Login with email and password."""
    result = auth_service.login(db=db, email=data.email, password=data.password)
    return _to_auth_response(result)


@router.post(
    "/google",
    response_model=AuthResponse,
    summary="Login with Google",
    description=(
        "Verify a Google ID token. Links Google to an existing account with the "
        "same email, or creates a password-less account."
    ),
)
@limiter.limit(RATE_LIMIT_AUTH_LOGIN)
async def google_login(
    request: Request,  # Required for rate limiter
    data: GoogleLoginRequest,
    db: Annotated[Session, Depends(get_db)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
    verifier: Annotated[GoogleIdentityVerifier, Depends(get_google_verifier)],
) -> AuthResponse:
    """Login or sign up with a Google identity."""
    identity = await verifier.verify(data.assertion)
    result = auth_service.google_login(db=db, identity=identity)
    return _to_auth_response(result)


# =============================================================================
# USER PROFILE
# =============================================================================


@router.get(
    "/me",
    response_model=CurrentUserResponse,
    summary="Get current user",
    description="Get the profile of the currently authenticated user.",
)
def get_me(identity: CurrentIdentity) -> CurrentUserResponse:
    """Get current user profile."""
    return CurrentUserResponse(user=UserResponse.model_validate(identity.user))
