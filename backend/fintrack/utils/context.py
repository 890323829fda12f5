# backend/fintrack/utils/context.py
"""
Request context management.

Holds request-scoped values that log records and services can read without
threading them through every call:
- Correlation ID for request tracing (set by CorrelationIdMiddleware)
- Authenticated user ID (set by the access guard once a token resolves)

Uses contextvars, so values propagate through async/await and are isolated
per request.

Usage:
    from fintrack.utils.context import get_correlation_id, set_current_user_id

    set_current_user_id("3f2b...")
    get_current_user_id()  # "3f2b..."
"""

from contextvars import ContextVar

# =============================================================================
# CONTEXT VARIABLES
# =============================================================================

_correlation_id_var: ContextVar[str | None] = ContextVar("correlation_id", default=None)

_current_user_id_var: ContextVar[str | None] = ContextVar("current_user_id", default=None)


# =============================================================================
# CORRELATION ID
# =============================================================================

def get_correlation_id() -> str | None:
    """
    Get the current request's correlation ID.

    Returns:
        The correlation ID for the current request, or None if not set.
    """
    return _correlation_id_var.get()


def set_correlation_id(correlation_id: str) -> None:
    """
    Set the correlation ID for the current request.

    Args:
        correlation_id: Unique identifier for this request
    """
    _correlation_id_var.set(correlation_id)


def clear_correlation_id() -> None:
    """Clear the correlation ID at the end of a request."""
    _correlation_id_var.set(None)


# =============================================================================
# AUTHENTICATED USER
# =============================================================================

def get_current_user_id() -> str | None:
    """Get the authenticated user ID for the current request, if any."""
    return _current_user_id_var.get()


def set_current_user_id(user_id: str) -> None:
    """Record the authenticated user ID for the current request."""
    _current_user_id_var.set(user_id)


def clear_current_user_id() -> None:
    _current_user_id_var.set(None)
