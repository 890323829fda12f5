# backend/fintrack/utils/__init__.py
"""
Cross-cutting utilities.

- logging: Logging configuration with correlation ID / user ID support
- context: Request-scoped context (correlation ID, authenticated user ID)

Usage:
    from fintrack.utils import setup_logging, get_logger
    from fintrack.utils import get_correlation_id, set_correlation_id
"""

from fintrack.utils.context import (
    get_correlation_id,
    set_correlation_id,
    clear_correlation_id,
    get_current_user_id,
    set_current_user_id,
    clear_current_user_id,
)
from fintrack.utils.logging import setup_logging, get_logger

__all__ = [
    # Logging
    "setup_logging",
    "get_logger",
    # Context
    "get_correlation_id",
    "set_correlation_id",
    "clear_correlation_id",
    "get_current_user_id",
    "set_current_user_id",
    "clear_current_user_id",
]
