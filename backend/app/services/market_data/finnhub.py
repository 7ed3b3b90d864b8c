# backend/app/services/market_data/finnhub.py
"""Finnhub quote API provider (US equities, ETFs)."""

import logging

from app.services.exceptions import RateLimitError
from app.services.market_data.api_base import KeyedApiProvider
from app.services.market_data.base import PriceLookup, to_decimal

logger = logging.getLogger(__name__)

FINNHUB_QUOTE_URL = "https://finnhub.io/api/v1/quote"


class FinnhubProvider(KeyedApiProvider):
    """
    Resolves symbols one at a time via `/quote`; the current price is `c`.

    Finnhub reports unknown symbols as a quote with `c == 0`, which is
    recorded as invalid rather than found.
    """

    @property
    def name(self) -> str:
        return "Finnhub"

    def lookup_prices(self, symbols: list[str], target_currency: str) -> PriceLookup:
        lookup = PriceLookup()

        for symbol in symbols:
            try:
                data = self._get_json(
                    FINNHUB_QUOTE_URL,
                    params={"symbol": symbol.upper(), "token": self._api_key},
                )
            except RateLimitError as e:
                logger.warning(f"{e}; leaving remaining symbols for other providers")
                break

            if not isinstance(data, dict) or "c" not in data:
                continue

            price = to_decimal(data.get("c"))
            if price is None:
                continue
            self._accept(lookup, symbol, self._from_quote_currency(price, target_currency), target_currency)

        return lookup
