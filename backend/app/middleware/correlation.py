# backend/app/middleware/correlation.py
"""
Correlation ID middleware for request tracing.

Every request gets an ID that the logging filter stamps on each record
written while the request is handled, so a manual sync can be followed
through price lookups and YNAB calls in the logs.

Correlation ID Sources (in order of precedence):
1. X-Correlation-ID header (from client or upstream service)
2. X-Request-ID header (alternative header name)
3. Generated UUID if neither header is present (or the header is unusable)

The ID is echoed back in the X-Correlation-ID response header.

Client Usage:
    curl -H "X-Correlation-ID: sync-debug-1" -X POST http://localhost:3000/api/ynab/sync
"""

import logging
import re
import time
import uuid
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from app.utils.context import set_correlation_id, clear_correlation_id

logger = logging.getLogger(__name__)

CORRELATION_ID_HEADER = "X-Correlation-ID"
REQUEST_ID_HEADER = "X-Request-ID"

# Client-supplied IDs end up in log lines; keep them short and printable
MAX_CORRELATION_ID_LENGTH = 128
_SAFE_ID = re.compile(r"^[A-Za-z0-9._:\-]+$")


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """
    Assigns a correlation ID per request and logs the request outcome.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Response],
    ) -> Response:
        correlation_id = self._get_correlation_id(request)
        set_correlation_id(correlation_id)
        started = time.perf_counter()

        try:
            response = await call_next(request)
            response.headers[CORRELATION_ID_HEADER] = correlation_id

            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.debug(
                f"{request.method} {request.url.path} -> {response.status_code} "
                f"({elapsed_ms:.1f} ms)"
            )
            return response

        finally:
            clear_correlation_id()

    def _get_correlation_id(self, request: Request) -> str:
        """First usable ID from the headers, otherwise a new UUID."""
        for header in (CORRELATION_ID_HEADER, REQUEST_ID_HEADER):
            candidate = request.headers.get(header)
            if candidate and is_valid_correlation_id(candidate):
                return candidate

        return str(uuid.uuid4())


def is_valid_correlation_id(value: str) -> bool:
    return len(value) <= MAX_CORRELATION_ID_LENGTH and bool(_SAFE_ID.fullmatch(value))
