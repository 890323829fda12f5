# backend/fintrack/middleware/rate_limit.py
"""
Request throttling with slowapi.

Anonymous traffic (login, registration, OTP sending, health) is keyed by
client IP. Once the access guard has identified the caller, limits on
that endpoint are keyed by user id instead, so several people behind one
NAT do not share a write budget.

Storage is in-memory; running more than one instance needs a shared
storage_uri on the Limiter.

Usage:
    from fintrack.middleware.rate_limit import limiter, RATE_LIMIT_AUTH_LOGIN

    @router.post("/login")
    @limiter.limit(RATE_LIMIT_AUTH_LOGIN)
    def login(request: Request, ...):
        ...
"""

import logging

from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from fintrack.config import settings
from fintrack.schemas.errors import ErrorDetail
from fintrack.services.constants import (
    RATE_LIMIT_DEFAULT,
    RATE_LIMIT_WRITE,
    RATE_LIMIT_HEALTH,
    RATE_LIMIT_AUTH_LOGIN,
    RATE_LIMIT_AUTH_REGISTER,
    RATE_LIMIT_AUTH_OTP,
    RATE_LIMIT_AUTH_PASSWORD,
)
from fintrack.utils.context import get_current_user_id

logger = logging.getLogger(__name__)

RETRY_AFTER_SECONDS = 60


def get_client_ip(request: Request) -> str:
    """
    Best-effort client address.

    Forwarded headers are honoured only when the direct peer is a trusted
    proxy (or TRUST_PROXY_HEADERS is on); otherwise any client could pick
    its own rate-limit bucket.
    """
    peer = get_remote_address(request)
    if not (settings.trust_proxy_headers or peer in settings.trusted_proxy_ips):
        return peer

    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()
    return request.headers.get("X-Real-IP") or peer


def rate_limit_key(request: Request) -> str:
    """Bucket by authenticated user when known, else by client IP."""
    user_id = get_current_user_id()
    if user_id:
        return f"user:{user_id}"
    return f"ip:{get_client_ip(request)}"


limiter = Limiter(
    key_func=rate_limit_key,
    default_limits=[RATE_LIMIT_DEFAULT],
    enabled=settings.rate_limit_enabled,
)


async def rate_limit_exceeded_handler(
    request: Request, exc: RateLimitExceeded
) -> JSONResponse:
    """429 in the standard error format, with Retry-After."""
    limit_info = str(exc.detail) if exc.detail else "Rate limit exceeded"
    logger.warning(f"Rate limit hit for {rate_limit_key(request)}: {limit_info}")

    body = ErrorDetail(
        error="RateLimitError",
        message=f"Too many requests. {limit_info}",
        details={"retry_after": RETRY_AFTER_SECONDS},
    )
    return JSONResponse(
        status_code=429,
        content=body.model_dump(),
        headers={"Retry-After": str(RETRY_AFTER_SECONDS)},
    )


__all__ = [
    "limiter",
    "get_client_ip",
    "rate_limit_key",
    "rate_limit_exceeded_handler",
    "SlowAPIMiddleware",
    "RATE_LIMIT_DEFAULT",
    "RATE_LIMIT_WRITE",
    "RATE_LIMIT_HEALTH",
    "RATE_LIMIT_AUTH_LOGIN",
    "RATE_LIMIT_AUTH_REGISTER",
    "RATE_LIMIT_AUTH_OTP",
    "RATE_LIMIT_AUTH_PASSWORD",
]
