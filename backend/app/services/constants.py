# backend/app/services/constants.py
"""
Centralized constants for the YNAB investments sync services.

Usage:
    from app.services.constants import (
        RATE_LIMIT_SYNC,
        RECONCILIATION_THRESHOLD,
    )
"""

from decimal import Decimal


# =============================================================================
# RATE LIMITING (slowapi limit strings)
# =============================================================================

# Default limit applied to every route by SlowAPIMiddleware
RATE_LIMIT_DEFAULT: str = "120/minute"

# Asset and settings writes
RATE_LIMIT_WRITE: str = "60/minute"

# Manual sync hits YNAB and every price provider
RATE_LIMIT_SYNC: str = "5/minute"

# Price lookups fan out to third-party APIs with their own quotas
RATE_LIMIT_MARKET_DATA: str = "30/minute"

# Health checks from load balancers
RATE_LIMIT_HEALTH: str = "300/minute"


# =============================================================================
# YNAB
# =============================================================================

# YNAB stores currency amounts as integers in thousandths of the major unit
MILLIUNITS_PER_UNIT: Decimal = Decimal("1000")

# Differences smaller than a cent are not written to YNAB
RECONCILIATION_THRESHOLD: Decimal = Decimal("0.01")

SYNC_PAYEE_NAME: str = "Investment Sync"
SYNC_MEMO: str = "Automated investment portfolio sync"
RECONCILIATION_PAYEE_NAME: str = "Investment Portfolio Reconciliation"

DEFAULT_BUDGET_CURRENCY: str = "USD"


# =============================================================================
# PRICE RESOLUTION
# =============================================================================

DEFAULT_TARGET_CURRENCY: str = "USD"

# Fixed prices served by StaticPriceProvider
STATIC_FALLBACK_PRICES: dict[str, Decimal] = {
    "AAPL": Decimal("150"),
    "MSFT": Decimal("300"),
    "GOOGL": Decimal("2500"),
    "BTC": Decimal("45000"),
    "ETH": Decimal("3000"),
}
STATIC_DEFAULT_PRICE: Decimal = Decimal("100")
