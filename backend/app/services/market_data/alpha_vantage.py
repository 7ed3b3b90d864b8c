# backend/app/services/market_data/alpha_vantage.py
"""
Alpha Vantage GLOBAL_QUOTE provider.

The free tier allows 5 requests per minute, so requests are spaced by
REQUEST_INTERVAL_SECONDS. Alpha Vantage signals throttling with HTTP 200
and a "Note" (or "Information") message instead of data; the rest of the
batch is then left to later providers.
"""

import logging
import time
from collections.abc import Callable

import httpx

from app.services.exceptions import RateLimitError
from app.services.market_data.api_base import KeyedApiProvider
from app.services.market_data.base import PriceLookup, to_decimal
from app.services.market_data.currency import CurrencyConverter

logger = logging.getLogger(__name__)

ALPHA_VANTAGE_URL = "https://www.alphavantage.co/query"


class AlphaVantageProvider(KeyedApiProvider):

    REQUEST_INTERVAL_SECONDS: float = 12.0

    def __init__(
            self,
            api_key: str | None,
            timeout: float = 10.0,
            client: httpx.Client | None = None,
            converter: CurrencyConverter | None = None,
            sleep: Callable[[float], None] = time.sleep,
    ):
        super().__init__(api_key, timeout=timeout, client=client, converter=converter)
        self._sleep = sleep

    @property
    def name(self) -> str:
        return "Alpha Vantage"

    def lookup_prices(self, symbols: list[str], target_currency: str) -> PriceLookup:
        lookup = PriceLookup()

        for index, symbol in enumerate(symbols):
            if index > 0:
                self._sleep(self.REQUEST_INTERVAL_SECONDS)

            try:
                data = self._get_json(
                    ALPHA_VANTAGE_URL,
                    params={"function": "GLOBAL_QUOTE", "symbol": symbol, "apikey": self._api_key},
                )
            except RateLimitError as e:
                logger.warning(str(e))
                break

            if not isinstance(data, dict):
                continue

            if "Note" in data or "Information" in data:
                logger.warning("Alpha Vantage API limit reached; stopping this batch")
                break

            quote = data.get("Global Quote") or {}
            price = to_decimal(quote.get("05. price"))
            if price is None:
                logger.debug(f"Alpha Vantage has no quote for {symbol}")
                continue
            self._accept(lookup, symbol, self._from_quote_currency(price, target_currency), target_currency)

        return lookup
