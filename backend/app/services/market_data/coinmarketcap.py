# backend/app/services/market_data/coinmarketcap.py
"""
CoinMarketCap crypto quotes provider.

One request for the whole batch; CoinMarketCap converts to the target
currency itself. Only alphanumeric symbols are sent (the API rejects the
whole request otherwise). For each symbol the first listed, active
coin is used.
"""

import logging
import re

from app.services.exceptions import RateLimitError
from app.services.market_data.api_base import KeyedApiProvider
from app.services.market_data.base import PriceLookup, to_decimal

logger = logging.getLogger(__name__)

CMC_QUOTES_URL = "https://pro-api.coinmarketcap.com/v2/cryptocurrency/quotes/latest"

_CRYPTO_SYMBOL = re.compile(r"^[A-Za-z0-9]+$")


class CoinMarketCapProvider(KeyedApiProvider):

    @property
    def name(self) -> str:
        return "CoinMarketCap"

    def lookup_prices(self, symbols: list[str], target_currency: str) -> PriceLookup:
        lookup = PriceLookup()

        valid = [s for s in symbols if _CRYPTO_SYMBOL.match(s)]
        skipped = [s for s in symbols if not _CRYPTO_SYMBOL.match(s)]
        if skipped:
            logger.debug(f"CoinMarketCap: skipping non-alphanumeric symbols {skipped}")
        if not valid:
            return lookup

        currency = target_currency.upper()
        try:
            payload = self._get_json(
                CMC_QUOTES_URL,
                params={"symbol": ",".join(s.upper() for s in valid), "convert": currency},
                headers={"X-CMC_PRO_API_KEY": self._api_key or "", "Accept": "application/json"},
            )
        except RateLimitError as e:
            logger.warning(str(e))
            return lookup

        data = payload.get("data") if isinstance(payload, dict) else None
        if not isinstance(data, dict):
            return lookup

        requested = {s.upper(): s for s in valid}
        for key, entries in data.items():
            symbol = requested.get(key.upper())
            if symbol is None or not isinstance(entries, list) or not entries:
                continue

            coin = entries[0]
            if not isinstance(coin, dict):
                continue
            if coin.get("is_active") != 1:
                logger.debug(f"CoinMarketCap: {key} is inactive")
                continue

            quote = coin.get("quote")
            quote = quote.get(currency) if isinstance(quote, dict) else None
            price = to_decimal(quote.get("price")) if isinstance(quote, dict) else None
            if price is None:
                logger.debug(f"CoinMarketCap: no {currency} quote for {key}")
                continue
            self._accept(lookup, symbol, price, target_currency)

        return lookup
