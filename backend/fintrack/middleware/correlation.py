# backend/fintrack/middleware/correlation.py
"""
Correlation ID middleware for request tracing.

For each request this middleware:
1. Takes the correlation ID from X-Correlation-ID or X-Request-ID,
   generating a UUID when neither is present
2. Stores it in the request context so every log line carries it
3. Echoes it back in the X-Correlation-ID response header
4. Clears request context (correlation ID and authenticated user) afterwards

Usage:
    app.add_middleware(CorrelationIdMiddleware)
"""

import logging
import uuid
from typing import Awaitable, Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from fintrack.utils.context import (
    set_correlation_id,
    clear_correlation_id,
    clear_current_user_id,
)

logger = logging.getLogger(__name__)

CORRELATION_ID_HEADER = "X-Correlation-ID"
REQUEST_ID_HEADER = "X-Request-ID"


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Attach a correlation ID to every request and its response."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        correlation_id = self._get_correlation_id(request)
        set_correlation_id(correlation_id)

        try:
            response = await call_next(request)
            response.headers[CORRELATION_ID_HEADER] = correlation_id
            return response
        finally:
            clear_correlation_id()
            clear_current_user_id()

    def _get_correlation_id(self, request: Request) -> str:
        """
        Extract correlation ID from request headers or generate a new one.

        Checks X-Correlation-ID, then X-Request-ID, then falls back to a UUID4.
        """
        correlation_id = request.headers.get(CORRELATION_ID_HEADER)
        if correlation_id:
            return correlation_id

        correlation_id = request.headers.get(REQUEST_ID_HEADER)
        if correlation_id:
            return correlation_id

        return str(uuid.uuid4())
