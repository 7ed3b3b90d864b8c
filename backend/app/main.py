# backend/app/main.py
"""
FastAPI application entry point.

This file:
- Configures application-wide logging
- Creates the FastAPI application and its lifespan (sync scheduler)
- Registers global exception handlers
- Registers all routers under /api
- Defines global endpoints (root, health checks)
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Depends, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from sqlalchemy import text
from sqlalchemy.orm import Session
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import settings
from app.database import get_db
from app.dependencies import get_market_data_service, get_sync_scheduler
from app.middleware import (
    CorrelationIdMiddleware,
    limiter,
    rate_limit_exceeded_handler,
    SlowAPIMiddleware,
    RATE_LIMIT_HEALTH,
)
from app.routers import (
    assets_router,
    market_data_router,
    settings_router,
    ynab_router,
)
from app.schemas.errors import ErrorDetail, ValidationErrorDetail
from app.services.exceptions import (
    ServiceError,
    ValidationError,
    NotFoundError,
    ConfigurationError,
    MarketDataError,
    ProviderUnavailableError,
    TickerNotFoundError,
    RateLimitError,
    CurrencyConversionError,
    YnabApiError,
    YnabAuthenticationError,
    YnabNotFoundError,
)
from app.services.market_data import MarketDataService
from app.utils import setup_logging

logger = logging.getLogger(__name__)

# =============================================================================
# LOGGING SETUP (must be before app creation)
# =============================================================================

setup_logging()


# =============================================================================
# LIFESPAN
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Start the daily sync scheduler with the app and stop it on shutdown.

    Disabled with SCHEDULER_ENABLED=false and always off under test.
    """
    scheduler = None
    if settings.is_scheduler_active:
        scheduler = get_sync_scheduler()
        scheduler.start()
    else:
        logger.info("Sync scheduler disabled")

    logger.info(f"{settings.app_name} {settings.app_version} started ({settings.environment})")
    try:
        yield
    finally:
        if scheduler is not None:
            scheduler.shutdown()


# =============================================================================
# APPLICATION SETUP
# =============================================================================

app = FastAPI(
    title=settings.app_name,
    description="Values an investment portfolio from live market prices and keeps YNAB account balances in sync",
    version=settings.app_version,
    debug=settings.debug,
    lifespan=lifespan,
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

# Outermost, so every log line of a request carries its correlation ID
app.add_middleware(CorrelationIdMiddleware)


# =============================================================================
# GLOBAL EXCEPTION HANDLERS
# =============================================================================
# These handlers catch service-layer exceptions and convert them to
# consistent HTTP responses. The most specific registered class in the
# exception's MRO wins.
# =============================================================================

app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)


def _error_response(
        status_code: int,
        exc: Exception,
        details: dict | None = None,
        headers: dict | None = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorDetail(
            error=type(exc).__name__,
            message=str(exc),
            details=details,
        ).model_dump(),
        headers=headers,
    )


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    """Handle missing resources (404)."""
    logger.warning(f"Not found: {exc}")
    return _error_response(
        404,
        exc,
        details={
            "resource_type": exc.resource_type,
            "resource_id": exc.resource_id,
        },
    )


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """Handle business validation errors (400)."""
    logger.warning(f"Validation error: {exc}")
    return _error_response(400, exc, details={"field": exc.field} if exc.field else None)


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError) -> JSONResponse:
    """Handle missing settings or an unusable YNAB setup (400)."""
    logger.warning(f"Configuration error: {exc}")
    return _error_response(400, exc)


@app.exception_handler(YnabAuthenticationError)
async def ynab_auth_handler(request: Request, exc: YnabAuthenticationError) -> JSONResponse:
    """
    Handle a rejected YNAB token (400).

    Not 401: the caller is authenticated with us, it is their YNAB token
    that is wrong.
    """
    logger.warning("YNAB rejected the API token")
    return _error_response(400, exc)


@app.exception_handler(YnabNotFoundError)
async def ynab_not_found_handler(request: Request, exc: YnabNotFoundError) -> JSONResponse:
    """Handle unknown YNAB budgets/accounts (404)."""
    logger.warning(f"YNAB resource not found: {exc.resource}")
    return _error_response(404, exc, details={"resource": exc.resource})


@app.exception_handler(YnabApiError)
async def ynab_api_error_handler(request: Request, exc: YnabApiError) -> JSONResponse:
    """Handle unexpected YNAB responses (502)."""
    logger.error(f"YNAB API error: {exc}")
    return _error_response(502, exc, details={"ynab_status": exc.status_code})


@app.exception_handler(TickerNotFoundError)
async def ticker_not_found_handler(request: Request, exc: TickerNotFoundError) -> JSONResponse:
    """Handle symbols no provider could price (404)."""
    logger.warning(f"Ticker not found: {exc.ticker}")
    return _error_response(404, exc, details={"ticker": exc.ticker})


@app.exception_handler(CurrencyConversionError)
async def currency_conversion_handler(
    request: Request, exc: CurrencyConversionError
) -> JSONResponse:
    """Handle currency pairs without an exchange rate (400)."""
    logger.warning(f"Currency conversion error: {exc}")
    return _error_response(
        400,
        exc,
        details={"from_currency": exc.from_currency, "to_currency": exc.to_currency},
    )


@app.exception_handler(ProviderUnavailableError)
async def provider_unavailable_handler(
    request: Request, exc: ProviderUnavailableError
) -> JSONResponse:
    """Handle unreachable upstream services (503)."""
    logger.error(f"Provider unavailable: {exc}")
    return _error_response(503, exc, details={"provider": exc.provider})


@app.exception_handler(RateLimitError)
async def rate_limit_handler(request: Request, exc: RateLimitError) -> JSONResponse:
    """Handle upstream rate limiting (429)."""
    logger.warning(f"Rate limit exceeded: {exc}")
    return _error_response(
        429,
        exc,
        details={"retry_after": exc.retry_after} if exc.retry_after else None,
        headers={"Retry-After": str(exc.retry_after)} if exc.retry_after else None,
    )


@app.exception_handler(MarketDataError)
async def market_data_error_handler(request: Request, exc: MarketDataError) -> JSONResponse:
    """Handle generic market data errors (500)."""
    logger.error(f"Market data error: {exc}")
    return _error_response(500, exc)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    """Handle generic service errors (500)."""
    logger.error(f"Service error: {exc}")
    return _error_response(500, exc)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """
    Handle all HTTPExceptions with consistent error format.

    Converts FastAPI's default {"detail": "..."} format to our standard
    ErrorDetail format for API consistency.
    """
    error_types = {
        400: "BadRequestError",
        404: "NotFoundError",
        405: "MethodNotAllowedError",
        409: "ConflictError",
        422: "ValidationError",
        429: "RateLimitError",
        500: "InternalServerError",
        503: "ServiceUnavailableError",
    }
    error_type = error_types.get(exc.status_code, "HTTPError")

    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorDetail(
            error=error_type,
            message=str(exc.detail) if exc.detail else "An error occurred",
            details=None,
        ).model_dump(),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """
    Handle request validation errors with consistent format.

    Converts the default 422 validation error to our ValidationErrorDetail format.
    """
    errors = []
    for error in exc.errors():
        errors.append({
            "field": ".".join(str(loc) for loc in error["loc"]),
            "message": error["msg"],
            "type": error["type"],
        })

    return JSONResponse(
        status_code=422,
        content=ValidationErrorDetail(
            error="ValidationError",
            message="Request validation failed",
            details=errors,
        ).model_dump(),
    )


# =============================================================================
# ROUTER REGISTRATION
# =============================================================================

API_PREFIX = "/api"

app.include_router(assets_router, prefix=API_PREFIX)  # /api/assets/*
app.include_router(settings_router, prefix=API_PREFIX)  # /api/settings
app.include_router(market_data_router, prefix=API_PREFIX)  # /api/market-data/*
app.include_router(ynab_router, prefix=API_PREFIX)  # /api/ynab/*


# =============================================================================
# GLOBAL ENDPOINTS
# =============================================================================

@app.get("/", tags=["Health"])
@limiter.limit(RATE_LIMIT_HEALTH)
def root(request: Request):
    """
    API root - returns basic application info.
    """
    return {
        "message": f"Welcome to {settings.app_name}!",
        "version": settings.app_version,
        "status": "running",
        "docs": "/docs",
    }


@app.get("/health", tags=["Health"])
@limiter.limit(RATE_LIMIT_HEALTH)
def health_check(
        request: Request,
        db: Session = Depends(get_db),
        market_data: MarketDataService = Depends(get_market_data_service),
):
    """
    Health check endpoint.

    Returns HTTP 503 if the database is unreachable. Price providers are
    reported but are not critical: with none active, syncs simply price
    nothing.

    **Response Status Codes:**
    - 200: Healthy, or degraded (no price provider active)
    - 503: Database unhealthy
    """
    checks = {}
    overall_status = "healthy"

    # Check 1: Database (CRITICAL)
    try:
        db.execute(text("SELECT 1"))
        checks["database"] = {
            "status": "healthy",
            "critical": True,
        }
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        checks["database"] = {
            "status": "unhealthy",
            "critical": True,
            "error": str(e),
        }
        overall_status = "unhealthy"

    # Check 2: Price providers - NON-CRITICAL
    providers = market_data.get_available_providers()
    checks["market_data"] = {
        "status": "healthy" if providers else "degraded",
        "critical": False,
        "providers": providers,
    }
    if not providers and overall_status == "healthy":
        overall_status = "degraded"

    # Check 3: Scheduler - NON-CRITICAL
    checks["scheduler"] = {
        "enabled": settings.is_scheduler_active,
        "running": get_sync_scheduler().running if settings.is_scheduler_active else False,
    }

    response_data = {
        "status": overall_status,
        "version": settings.app_version,
        "checks": checks,
    }

    if overall_status == "unhealthy":
        return JSONResponse(status_code=503, content=response_data)

    return response_data


@app.get("/health/live", tags=["Health"])
@limiter.limit(RATE_LIMIT_HEALTH)
def liveness_check(request: Request):
    """
    Liveness check. Always 200 while the process is up; checks nothing.
    """
    return {"status": "alive"}


@app.get("/health/ready", tags=["Health"])
@limiter.limit(RATE_LIMIT_HEALTH)
def readiness_check(request: Request, db: Session = Depends(get_db)):
    """
    Readiness check. 503 while the database is unreachable.
    """
    try:
        db.execute(text("SELECT 1"))
        return {"status": "ready"}
    except Exception as e:
        logger.error(f"Readiness check failed: {e}")
        return JSONResponse(
            status_code=503,
            content={
                "status": "not_ready",
                "error": "Database unavailable",
            },
        )
