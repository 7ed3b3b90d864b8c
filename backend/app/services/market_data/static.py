# backend/app/services/market_data/static.py
"""Fixed-price provider for local development without network access."""

import logging

from app.services.constants import STATIC_DEFAULT_PRICE, STATIC_FALLBACK_PRICES
from app.services.market_data.base import PriceLookup, PriceProvider

logger = logging.getLogger(__name__)


class StaticPriceProvider(PriceProvider):
    """
    Prices every symbol from a fixed table, with a default for the rest.

    Prices are returned as-is in whatever target currency was requested.
    Only enabled through STATIC_PRICES_ENABLED; it must never shadow real
    providers, so the dispatcher places it last.
    """

    def __init__(self, enabled: bool = True):
        self._enabled = enabled

    @property
    def name(self) -> str:
        return "Static"

    def is_available(self) -> bool:
        return self._enabled

    def lookup_prices(self, symbols: list[str], target_currency: str) -> PriceLookup:
        lookup = PriceLookup()
        for symbol in symbols:
            price = STATIC_FALLBACK_PRICES.get(symbol.upper(), STATIC_DEFAULT_PRICE)
            self._accept(lookup, symbol, price, target_currency)
        logger.debug(f"Static prices served for {len(symbols)} symbols")
        return lookup
