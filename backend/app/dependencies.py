# backend/app/dependencies.py
"""
Dependency injection module for FastAPI services.

This module provides singleton service instances that are shared across
all requests. Sharing matters for the currency converter, whose rate cache
should survive between requests, and for the scheduler, of which there must
be exactly one.

Services are lazily initialized on first use to avoid import-time side effects.

Usage in routers:
    from app.dependencies import get_asset_service, get_sync_service

    @router.post("/sync")
    def trigger_sync(
        service: PortfolioSyncService = Depends(get_sync_service),
        db: Session = Depends(get_db),
    ):
        ...

Tests replace any of these through `app.dependency_overrides`.
"""

import logging
from functools import lru_cache

from app.config import settings
from app.database import SessionLocal
from app.services.asset_service import AssetService
from app.services.market_data import (
    AlphaVantageProvider,
    CoinMarketCapProvider,
    CurrencyConverter,
    FinnhubProvider,
    MarketDataService,
    PolygonProvider,
    PriceProvider,
    RaiffeisenCZProvider,
    StaticPriceProvider,
    YahooFinanceProvider,
)
from app.services.scheduler import SyncScheduler
from app.services.sync_service import PortfolioSyncService
from app.services.user_settings_service import UserSettingsService
from app.services.ynab import YnabService

logger = logging.getLogger(__name__)


# =============================================================================
# SINGLETON SERVICE INSTANCES
# =============================================================================
# Using @lru_cache ensures the function returns the same instance on every call

@lru_cache(maxsize=1)
def get_currency_converter() -> CurrencyConverter:
    """Get the shared currency converter (holds the exchange-rate cache)."""
    return CurrencyConverter(
        base_url=settings.exchange_rate_api_url,
        timeout=settings.http_timeout_seconds,
        cache_ttl_seconds=settings.fx_cache_ttl_seconds,
    )


@lru_cache(maxsize=1)
def get_price_providers() -> tuple[PriceProvider, ...]:
    """
    All price providers in preference order.

    Providers without credentials are constructed anyway; the market data
    service filters them out.
    """
    timeout = settings.http_timeout_seconds
    converter = get_currency_converter()

    return (
        FinnhubProvider(settings.finnhub_api_key, timeout=timeout, converter=converter),
        YahooFinanceProvider(converter=converter),
        RaiffeisenCZProvider(timeout=timeout, converter=converter),
        AlphaVantageProvider(settings.alpha_vantage_api_key, timeout=timeout, converter=converter),
        PolygonProvider(settings.polygon_api_key, timeout=timeout, converter=converter),
        CoinMarketCapProvider(settings.coinmarketcap_api_key, timeout=timeout, converter=converter),
        StaticPriceProvider(enabled=settings.static_prices_enabled),
    )


@lru_cache(maxsize=1)
def get_market_data_service() -> MarketDataService:
    """Get the singleton MarketDataService instance."""
    return MarketDataService(list(get_price_providers()), converter=get_currency_converter())


@lru_cache(maxsize=1)
def get_ynab_service() -> YnabService:
    """Get the singleton YNAB client."""
    return YnabService(
        base_url=settings.ynab_api_base_url,
        timeout=settings.http_timeout_seconds,
    )


@lru_cache(maxsize=1)
def get_asset_service() -> AssetService:
    return AssetService()


@lru_cache(maxsize=1)
def get_user_settings_service() -> UserSettingsService:
    return UserSettingsService()


@lru_cache(maxsize=1)
def get_sync_service() -> PortfolioSyncService:
    """Get the singleton PortfolioSyncService instance."""
    return PortfolioSyncService(
        market_data_service=get_market_data_service(),
        ynab_service=get_ynab_service(),
        asset_service=get_asset_service(),
        settings_service=get_user_settings_service(),
    )


@lru_cache(maxsize=1)
def get_sync_scheduler() -> SyncScheduler:
    """
    Get the scheduler that runs the daily sync check.

    Not started here; the application lifespan starts and stops it.
    """
    return SyncScheduler(
        sync_service=get_sync_service(),
        session_factory=SessionLocal,
        hour=settings.sync_cron_hour,
        minute=settings.sync_cron_minute,
        timezone=settings.scheduler_timezone,
    )


def clear_service_caches() -> None:
    """
    Clear all cached service instances.

    Useful for testing or when configuration changes.
    """
    get_currency_converter.cache_clear()
    get_price_providers.cache_clear()
    get_market_data_service.cache_clear()
    get_ynab_service.cache_clear()
    get_asset_service.cache_clear()
    get_user_settings_service.cache_clear()
    get_sync_service.cache_clear()
    get_sync_scheduler.cache_clear()
    logger.info("Service caches cleared")
