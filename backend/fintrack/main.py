# backend/fintrack/main.py
"""
FastAPI application entry point.

This file:
- Configures application-wide logging
- Creates the FastAPI application
- Registers global exception handlers
- Registers all routers
- Defines global endpoints (health checks)
"""

import logging

from fastapi import FastAPI, Depends, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from sqlalchemy import text
from sqlalchemy.orm import Session
from starlette.exceptions import HTTPException as StarletteHTTPException

from fintrack.config import settings
from fintrack.database import get_db
from fintrack.middleware import (
    CorrelationIdMiddleware,
    limiter,
    rate_limit_exceeded_handler,
    SlowAPIMiddleware,
    RATE_LIMIT_HEALTH,
)
from fintrack.routers import (
    auth_router,
    users_router,
    transactions_router,
    budgets_router,
    investments_router,
)
from fintrack.schemas.errors import ErrorDetail, ValidationErrorDetail
from fintrack.services.exceptions import (
    ServiceError,
    ValidationError,
    WeakPasswordError,
    NotFoundError,
    AuthenticationError,
    InvalidCredentialsError,
    AuthProviderRejectedError,
    UserExistsError,
    InvalidOTPError,
    OTPExpiredError,
    PasswordStateError,
    EmailDeliveryError,
)
from fintrack.utils import setup_logging

logger = logging.getLogger(__name__)

# =============================================================================
# LOGGING SETUP (must be before app creation)
# =============================================================================

setup_logging()

# =============================================================================
# APPLICATION SETUP
# =============================================================================

app = FastAPI(
    title=settings.app_name,
    description="Personal finance tracking API: transactions, budgets and investments",
    version="0.1.0",
)


# =============================================================================
# CORS MIDDLEWARE
# =============================================================================
# Origins are configured via CORS_ORIGINS environment variable

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)


# =============================================================================
# MIDDLEWARE (order matters: last added = first executed)
# =============================================================================

# Attach limiter to app state (required by slowapi)
app.state.limiter = limiter

app.add_middleware(SlowAPIMiddleware)

# Extracts/generates correlation IDs and echoes them in response headers
app.add_middleware(CorrelationIdMiddleware)


# =============================================================================
# GLOBAL EXCEPTION HANDLERS
# =============================================================================
# Service-layer exceptions carry no HTTP knowledge; these handlers give
# them status codes and the ErrorDetail body. Starlette picks the most
# specific handler along the exception's MRO.
# =============================================================================

_BEARER_CHALLENGE = {"WWW-Authenticate": "Bearer"}


def _error_response(
    status_code: int,
    error: str,
    message: str,
    details: dict | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorDetail(error=error, message=message, details=details).model_dump(),
        headers=headers,
    )


app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)


@app.exception_handler(WeakPasswordError)
async def weak_password_handler(request: Request, exc: WeakPasswordError) -> JSONResponse:
    """Handle passwords below the minimum length (400)."""
    logger.info("Rejected weak password")
    return _error_response(
        400,
        "WeakPasswordError",
        str(exc),
        details={"field": exc.field, "min_length": exc.min_length},
    )


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """Handle validation errors (400)."""
    logger.warning(f"Validation error: {exc}")
    return _error_response(
        400,
        "ValidationError",
        str(exc),
        details={"field": exc.field} if exc.field else None,
    )


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    """
    Handle not found errors (404).

    Ownership misses land here too, so the body must not reveal whether
    the id exists for another user.
    """
    logger.warning(f"{exc.resource_type or 'Resource'} not found: {exc.resource_id}")
    return _error_response(404, "NotFoundError", str(exc))


# =============================================================================
# AUTHENTICATION EXCEPTION HANDLERS
# =============================================================================


@app.exception_handler(InvalidCredentialsError)
async def invalid_credentials_handler(
    request: Request, exc: InvalidCredentialsError
) -> JSONResponse:
    """Handle invalid credentials errors (401)."""
    logger.warning("Invalid credentials attempt")
    return _error_response(401, "InvalidCredentialsError", str(exc), headers=_BEARER_CHALLENGE)


@app.exception_handler(AuthProviderRejectedError)
async def auth_provider_rejected_handler(
    request: Request, exc: AuthProviderRejectedError
) -> JSONResponse:
    """Handle rejected external identity assertions (401). The reason stays in the logs."""
    logger.warning(f"{exc.provider} assertion rejected: {exc.reason}")
    return _error_response(
        401,
        "AuthProviderRejectedError",
        str(exc),
        details={"provider": exc.provider},
    )


@app.exception_handler(AuthenticationError)
async def authentication_error_handler(
    request: Request, exc: AuthenticationError
) -> JSONResponse:
    """Handle missing, invalid or expired session tokens (401)."""
    logger.warning(f"Authentication error: {exc}")
    return _error_response(401, type(exc).__name__, str(exc), headers=_BEARER_CHALLENGE)


# =============================================================================
# REGISTRATION / PASSWORD STATE HANDLERS
# =============================================================================


@app.exception_handler(UserExistsError)
async def user_exists_handler(request: Request, exc: UserExistsError) -> JSONResponse:
    """Handle registration with an existing email (400)."""
    logger.warning("Registration attempt with existing email")
    return _error_response(400, "UserExistsError", str(exc))


@app.exception_handler(OTPExpiredError)
async def otp_expired_handler(request: Request, exc: OTPExpiredError) -> JSONResponse:
    """Handle expired registration challenges (400)."""
    logger.info("Expired OTP challenge submitted")
    return _error_response(400, "OTPExpiredError", str(exc))


@app.exception_handler(InvalidOTPError)
async def invalid_otp_handler(request: Request, exc: InvalidOTPError) -> JSONResponse:
    """Handle wrong codes or tampered challenges (400)."""
    logger.warning("Invalid OTP submitted")
    return _error_response(400, "InvalidOTPError", str(exc))


@app.exception_handler(PasswordStateError)
async def password_state_handler(request: Request, exc: PasswordStateError) -> JSONResponse:
    """Handle set/change password on an account in the wrong state (400)."""
    logger.info(f"Password state mismatch: {type(exc).__name__}")
    return _error_response(400, type(exc).__name__, str(exc))


@app.exception_handler(EmailDeliveryError)
async def email_delivery_handler(request: Request, exc: EmailDeliveryError) -> JSONResponse:
    """Handle SMTP failures (502)."""
    logger.error(f"Email delivery failed: {exc.reason}")
    return _error_response(502, "EmailDeliveryError", str(exc))


# =============================================================================
# FALLBACK HANDLERS
# =============================================================================


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    """Handle unmapped service errors (500)."""
    logger.error(f"Service error: {exc}")
    return _error_response(500, "ServiceError", "An internal error occurred")


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last resort (500). Details go to the log, never to the client."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return _error_response(500, "InternalServerError", "An internal error occurred")


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """
    Handle all HTTPExceptions with consistent error format.

    Converts the default {"detail": "..."} format to ErrorDetail, including
    the framework's own 404/405 for unknown routes.
    """
    error_types = {
        400: "BadRequestError",
        401: "UnauthorizedError",
        403: "ForbiddenError",
        404: "NotFoundError",
        405: "MethodNotAllowedError",
        409: "ConflictError",
        422: "ValidationError",
        429: "RateLimitError",
        500: "InternalServerError",
        503: "ServiceUnavailableError",
    }
    return _error_response(
        exc.status_code,
        error_types.get(exc.status_code, "HTTPError"),
        str(exc.detail) if exc.detail else "An error occurred",
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Convert request validation failures (422) to ValidationErrorDetail."""
    errors = [
        {
            "field": ".".join(str(loc) for loc in error["loc"]),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]

    return JSONResponse(
        status_code=422,
        content=ValidationErrorDetail(details=errors).model_dump(),
    )


# =============================================================================
# ROUTER REGISTRATION
# =============================================================================

app.include_router(auth_router)  # /auth/*
app.include_router(users_router)  # /user/*
app.include_router(transactions_router)  # /transactions/*
app.include_router(budgets_router)  # /budgets/*
app.include_router(investments_router)  # /investments/*


# =============================================================================
# GLOBAL ENDPOINTS
# =============================================================================

@app.get("/", tags=["Health"])
@limiter.limit(RATE_LIMIT_HEALTH)
def root(request: Request):
    """API root - returns basic application info."""
    return {
        "message": f"Welcome to {settings.app_name}!",
        "docs": "/docs",
    }


@app.get("/health", tags=["Health"])
@limiter.limit(RATE_LIMIT_HEALTH)
def health_check(request: Request, db: Session = Depends(get_db)):
    """
    Health check endpoint.

    Returns HTTP 503 if the database is unreachable. Email and Google
    sign-in are reported as configured or not; neither affects the
    status code.
    """
    checks = {}
    critical_healthy = True

    try:
        db.execute(text("SELECT 1"))
        checks["database"] = {"status": "healthy", "critical": True}
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        checks["database"] = {"status": "unhealthy", "critical": True}
        critical_healthy = False

    checks["email"] = {
        "status": "configured" if settings.is_email_configured else "not_configured",
        "critical": False,
    }
    checks["google_signin"] = {
        "status": "configured" if settings.is_google_signin_configured else "not_configured",
        "critical": False,
    }

    response_data = {
        "status": "healthy" if critical_healthy else "unhealthy",
        "checks": checks,
    }

    if not critical_healthy:
        return JSONResponse(status_code=503, content=response_data)

    return response_data


@app.get("/health/live", tags=["Health"])
@limiter.limit(RATE_LIMIT_HEALTH)
def liveness_check(request: Request):
    """
    Liveness probe endpoint.

    Always 200 while the process is alive. Does NOT check dependencies.
    """
    return {"status": "alive"}
