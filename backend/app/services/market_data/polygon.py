# backend/app/services/market_data/polygon.py
"""
Polygon.io previous-close provider.

Symbols are first looked up as stock tickers; whatever is left is retried
as an index (`I:{symbol}`), so "SPX" or "NDX" resolve too.
"""

import logging
from urllib.parse import quote

from app.services.exceptions import RateLimitError
from app.services.market_data.api_base import KeyedApiProvider
from app.services.market_data.base import PriceLookup, to_decimal

logger = logging.getLogger(__name__)

POLYGON_PREV_CLOSE_URL = "https://api.polygon.io/v2/aggs/ticker/{ticker}/prev"


class PolygonProvider(KeyedApiProvider):

    @property
    def name(self) -> str:
        return "Polygon.io"

    def lookup_prices(self, symbols: list[str], target_currency: str) -> PriceLookup:
        lookup = PriceLookup()

        try:
            self._fetch_batch(lookup, symbols, target_currency, index=False)
            remaining = [s for s in symbols if s not in lookup.found_symbols]
            if remaining:
                self._fetch_batch(lookup, remaining, target_currency, index=True)
        except RateLimitError as e:
            logger.warning(f"{e}; leaving remaining symbols for other providers")

        return lookup

    def _fetch_batch(
            self,
            lookup: PriceLookup,
            symbols: list[str],
            target_currency: str,
            index: bool,
    ) -> None:
        for symbol in symbols:
            ticker = f"I:{symbol.upper()}" if index else symbol.upper()
            data = self._get_json(
                POLYGON_PREV_CLOSE_URL.format(ticker=quote(ticker, safe=":")),
                params={"adjusted": "true", "apikey": self._api_key},
            )

            results = data.get("results") if isinstance(data, dict) else None
            if not results:
                logger.debug(f"No Polygon.io data for {ticker}")
                continue

            price = to_decimal(results[0].get("c"))
            if price is None:
                continue
            self._accept(lookup, symbol, self._from_quote_currency(price, target_currency), target_currency)
