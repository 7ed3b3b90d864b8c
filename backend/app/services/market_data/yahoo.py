# backend/app/services/market_data/yahoo.py
"""
Yahoo Finance price provider.

Uses the yfinance library's quote info (`regularMarketPrice`, `currency`).
Symbols are passed to Yahoo as-is, so exchange-suffixed tickers such as
"SAP.DE" or "VWCE.DE" work directly.

Limitations:
- Undocumented rate limits; a throttled symbol is simply left unresolved
- Quotes may be delayed 15-20 minutes
- `Ticker.info` takes no timeout argument, so HTTP_TIMEOUT_SECONDS does not
  bound these calls; only yfinance's own defaults apply
"""

import logging
from decimal import Decimal
from typing import Any

import yfinance as yf

from app.services.market_data.base import PriceLookup, PriceProvider, to_decimal
from app.services.market_data.currency import CurrencyConverter

logger = logging.getLogger(__name__)


class YahooFinanceProvider(PriceProvider):
    """
    Price provider backed by yfinance.

    Example:
        provider = YahooFinanceProvider(converter=CurrencyConverter())
        quotes = provider.fetch_asset_prices(["AAPL", "SAP.DE"], "EUR")
    """

    def __init__(self, converter: CurrencyConverter | None = None) -> None:
        self._converter = converter
        logger.info("YahooFinanceProvider initialized")

    @property
    def name(self) -> str:
        return "Yahoo Finance"

    def lookup_prices(self, symbols: list[str], target_currency: str) -> PriceLookup:
        lookup = PriceLookup()

        for symbol in symbols:
            try:
                info = self._fetch_quote_info(symbol)
            except Exception as e:
                error_str = str(e).lower()
                if "rate limit" in error_str or "too many requests" in error_str:
                    logger.warning(f"Yahoo Finance rate limited while fetching {symbol}")
                else:
                    logger.error(f"Yahoo Finance error for {symbol}: {e}")
                continue

            if not info:
                logger.debug(f"Yahoo Finance has no quote for {symbol}")
                continue

            price = to_decimal(info.get("regularMarketPrice"))
            if price is None:
                logger.debug(f"Yahoo Finance quote for {symbol} has no market price")
                continue

            quote_currency = (info.get("currency") or "USD").upper()
            if price > 0 and quote_currency != target_currency.upper():
                price = self._convert(price, quote_currency, target_currency)

            self._accept(lookup, symbol, price, target_currency)

        return lookup

    def _fetch_quote_info(self, symbol: str) -> dict[str, Any]:
        """Raw yfinance info dict for a symbol (empty when Yahoo has nothing)."""
        return yf.Ticker(symbol).info or {}

    def _convert(self, price: Decimal, from_currency: str, to_currency: str) -> Decimal:
        if self._converter is None:
            return price
        return self._converter.convert(price, from_currency, to_currency)
