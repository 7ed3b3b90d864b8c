# backend/app/middleware/rate_limit.py
"""
Rate limiting middleware for API protection.

This module provides rate limiting using slowapi to:
- Protect the YNAB API quota (manual sync, budget/account browsing)
- Protect the free tiers of the price APIs (Finnhub, Alpha Vantage, ...)
- Keep one client from starving the others

Rate limits are configured in app/services/constants.py.

Key by: Client IP address (X-Forwarded-For only from trusted proxies)
Storage: In-memory (single instance deployment)

The limiter is disabled when ENVIRONMENT=test so API tests are not
throttled.

Usage:
    from app.middleware.rate_limit import limiter, RATE_LIMIT_SYNC

    @router.post("/sync")
    @limiter.limit(RATE_LIMIT_SYNC)
    def trigger_sync(request: Request):
        ...
"""

import logging

from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from app.config import settings
from app.services.constants import (
    RATE_LIMIT_DEFAULT,
    RATE_LIMIT_WRITE,
    RATE_LIMIT_SYNC,
    RATE_LIMIT_MARKET_DATA,
    RATE_LIMIT_HEALTH,
)

logger = logging.getLogger(__name__)

RETRY_AFTER_SECONDS = 60


def _is_trusted_proxy(request: Request) -> bool:
    """
    Whether X-Forwarded-For from this client can be believed.

    Either every proxy is trusted (TRUST_PROXY_HEADERS, for deployments
    behind a load balancer) or the immediate client is listed in
    TRUSTED_PROXY_IPS.
    """
    if settings.trust_proxy_headers:
        return True

    return get_remote_address(request) in settings.trusted_proxy_ips


def _get_client_ip(request: Request) -> str:
    """
    Rate limit key: the original client IP.

    Forwarded headers are only honoured from trusted proxies, so a client
    cannot dodge its limit by sending its own X-Forwarded-For.
    """
    if _is_trusted_proxy(request):
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            # First entry is the original client
            return forwarded_for.split(",")[0].strip()

        real_ip = request.headers.get("X-Real-IP")
        if real_ip:
            return real_ip

    return get_remote_address(request)


# =============================================================================
# LIMITER INSTANCE
# =============================================================================

limiter = Limiter(
    key_func=_get_client_ip,
    default_limits=[RATE_LIMIT_DEFAULT],
    enabled=not settings.is_test,
)


# =============================================================================
# RATE LIMIT EXCEEDED HANDLER
# =============================================================================

async def rate_limit_exceeded_handler(
    request: Request, exc: RateLimitExceeded
) -> JSONResponse:
    """
    Return 429 in the standard error format with a Retry-After header.
    """
    limit_info = str(exc.detail) if exc.detail else "Rate limit exceeded"

    logger.warning(f"Rate limit exceeded for {_get_client_ip(request)}: {limit_info}")

    return JSONResponse(
        status_code=429,
        content={
            "error": "RateLimitError",
            "message": f"Too many requests. {limit_info}",
            "details": {
                "retry_after": RETRY_AFTER_SECONDS,
            },
        },
        headers={
            "Retry-After": str(RETRY_AFTER_SECONDS),
        },
    )


# =============================================================================
# EXPORTS
# =============================================================================

__all__ = [
    "limiter",
    "rate_limit_exceeded_handler",
    "SlowAPIMiddleware",
    "RATE_LIMIT_DEFAULT",
    "RATE_LIMIT_WRITE",
    "RATE_LIMIT_SYNC",
    "RATE_LIMIT_MARKET_DATA",
    "RATE_LIMIT_HEALTH",
]
