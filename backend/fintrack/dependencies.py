# backend/fintrack/dependencies.py
"""
Dependency injection module for FastAPI services.

Provides singleton service instances shared across requests, and the
access guard that turns a bearer token into an explicit Identity.

Services are lazily initialized on first use to avoid import-time side effects.

Usage in routers:
    from fintrack.dependencies import CurrentIdentity, get_auth_service

    @router.get("/")
    def list_transactions(
        identity: CurrentIdentity,
        db: Annotated[Session, Depends(get_db)],
    ):
        ...
"""

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Annotated

from fastapi import Depends
from fastapi.concurrency import run_in_threadpool
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from fintrack.database import get_db
from fintrack.models import User
from fintrack.services.auth import (
    AuthService,
    EmailService,
    GoogleIdentityVerifier,
    OTPService,
)
from fintrack.services.exceptions import AuthenticationError
from fintrack.utils.context import set_current_user_id

logger = logging.getLogger(__name__)

# HTTP Bearer scheme; a missing header is reported by the guard, not FastAPI
_bearer_scheme = HTTPBearer(auto_error=False)


# =============================================================================
# SINGLETON SERVICE INSTANCES
# =============================================================================
# Order matters: define dependencies before dependents
# 1. get_email_service, get_otp_service, get_google_verifier (no deps)
# 2. get_auth_service (depends on email + otp)


@lru_cache(maxsize=1)
def get_email_service() -> EmailService:
    """Get the singleton EmailService instance."""
    logger.debug("Initializing singleton EmailService")
    return EmailService()


@lru_cache(maxsize=1)
def get_otp_service() -> OTPService:
    """
    Get the singleton OTPService instance.

    Holds no per-challenge state; the singleton only avoids rebuilding
    the signer on every request.
    """
    logger.debug("Initializing singleton OTPService")
    return OTPService()


@lru_cache(maxsize=1)
def get_google_verifier() -> GoogleIdentityVerifier:
    """Get the singleton GoogleIdentityVerifier instance."""
    logger.debug("Initializing singleton GoogleIdentityVerifier")
    return GoogleIdentityVerifier()


@lru_cache(maxsize=1)
def get_auth_service() -> AuthService:
    """
    Get the singleton AuthService instance.

    Handles registration, login and password management.
    """
    logger.debug("Initializing singleton AuthService")
    return AuthService(
        email_service=get_email_service(),
        otp_service=get_otp_service(),
    )


# =============================================================================
# ACCESS GUARD
# =============================================================================


@dataclass(frozen=True)
class Identity:
    """The authenticated caller, passed explicitly into every protected handler."""
    user_id: str
    user: User


async def get_current_identity(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_bearer_scheme)],
    db: Annotated[Session, Depends(get_db)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> Identity:
    """
    Dependency that resolves the bearer token to an Identity.

    Usage:
        @router.get("/protected")
        def protected_endpoint(identity: CurrentIdentity):
            return {"user_id": identity.user_id}

    The token check and user lookup are blocking database work and run in
    the threadpool. The user id is recorded back on the request's own
    context so it reaches every log line and the rate-limit key.

    Raises:
        AuthenticationError: If no token is sent, the token is invalid or
            expired, or its user no longer exists (all mapped to 401)
    """
    if credentials is None:
        raise AuthenticationError()

    user = await run_in_threadpool(
        auth_service.authenticate_token, db, credentials.credentials
    )

    set_current_user_id(user.id)
    return Identity(user_id=user.id, user=user)


CurrentIdentity = Annotated[Identity, Depends(get_current_identity)]


# =============================================================================
# CACHE MANAGEMENT
# =============================================================================

def clear_service_caches() -> None:
    """
    Clear all service caches.

    Useful for testing or when you need to reset state.
    """
    get_email_service.cache_clear()
    get_otp_service.cache_clear()
    get_google_verifier.cache_clear()
    get_auth_service.cache_clear()
    logger.info("Cleared all service singleton caches")
