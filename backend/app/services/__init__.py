# backend/app/services/__init__.py
"""
Service layer for business logic.

Services:
- Have NO knowledge of HTTP (no HTTPException, no status codes)
- Raise domain-specific exceptions
- Receive database sessions as parameters (not via Depends)

Usage:
    from app.services import AssetService, UserSettingsService
    from app.services import PortfolioSyncService
    from app.services import SettingsNotConfiguredError

Architecture:
    services/
    ├── exceptions.py            # Domain exceptions
    ├── constants.py             # Rate limits, YNAB constants, fallback prices
    ├── http_client.py           # httpx client construction
    ├── asset_service.py         # Asset CRUD
    ├── user_settings_service.py # YNAB token / schedule / budget
    ├── sync_service.py          # Portfolio -> YNAB sync orchestration
    ├── scheduler.py             # Schedule evaluation and APScheduler job
    ├── market_data/             # Price providers and dispatcher
    └── ynab/                    # YNAB API client
"""

from app.services.asset_service import AssetService
from app.services.exceptions import (
    ServiceError,
    ValidationError,
    NotFoundError,
    AssetNotFoundError,
    ConfigurationError,
    SettingsNotConfiguredError,
    BudgetNotFoundError,
    MarketDataError,
    ProviderUnavailableError,
    TickerNotFoundError,
    RateLimitError,
    CurrencyConversionError,
    YnabError,
    YnabApiError,
    YnabAuthenticationError,
    YnabNotFoundError,
)
from app.services.sync_service import (
    PortfolioSyncService,
    SyncResult,
    AccountSyncResult,
    AccountSyncStatus,
)
from app.services.user_settings_service import UserSettingsService, SettingsUpdateResult

__all__ = [
    "AssetService",
    "UserSettingsService",
    "SettingsUpdateResult",
    "PortfolioSyncService",
    "SyncResult",
    "AccountSyncResult",
    "AccountSyncStatus",
    "ServiceError",
    "ValidationError",
    "NotFoundError",
    "AssetNotFoundError",
    "ConfigurationError",
    "SettingsNotConfiguredError",
    "BudgetNotFoundError",
    "MarketDataError",
    "ProviderUnavailableError",
    "TickerNotFoundError",
    "RateLimitError",
    "CurrencyConversionError",
    "YnabError",
    "YnabApiError",
    "YnabAuthenticationError",
    "YnabNotFoundError",
]
