# backend/app/services/market_data/currency.py
"""
Currency conversion backed by the exchangerate-api.com public endpoint.

Rates are fetched per base currency (`GET {base_url}/{FROM}`) and reused for
`cache_ttl_seconds`. Providers call `convert`, which degrades to returning
the unconverted amount when no rate is available; the public convert
endpoint calls `convert_strict`, which raises instead.
"""

import logging
import threading
import time
from collections.abc import Callable
from decimal import Decimal

import httpx

from app.services.http_client import build_http_client
from app.services.market_data.base import to_decimal
from app.services.exceptions import CurrencyConversionError

logger = logging.getLogger(__name__)


class CurrencyConverter:
    """Convert amounts between ISO 4217 currencies using cached daily rates."""

    def __init__(
            self,
            base_url: str = "https://api.exchangerate-api.com/v4/latest",
            timeout: float = 10.0,
            cache_ttl_seconds: int = 1800,
            client: httpx.Client | None = None,
            clock: Callable[[], float] = time.monotonic,
    ):
        self._base_url = base_url.rstrip("/")
        self._cache_ttl = cache_ttl_seconds
        self._client = client or build_http_client(timeout=timeout)
        self._clock = clock
        self._rates: dict[str, tuple[float, dict[str, Decimal]]] = {}
        self._lock = threading.Lock()

    def convert(self, amount: Decimal, from_currency: str, to_currency: str) -> Decimal:
        """
        Convert `amount`; on any failure log a warning and return it unchanged.
        """
        try:
            return self.convert_strict(amount, from_currency, to_currency)
        except CurrencyConversionError as e:
            logger.warning(f"{e}; using unconverted amount {amount} {from_currency}")
            return amount

    def convert_strict(self, amount: Decimal, from_currency: str, to_currency: str) -> Decimal:
        """
        Convert `amount` from one currency to another.

        Raises:
            CurrencyConversionError: Rates unavailable or target currency unknown
        """
        source = from_currency.upper()
        target = to_currency.upper()
        if source == target:
            return amount

        rates = self._get_rates(source)
        rate = rates.get(target)
        if rate is None:
            raise CurrencyConversionError(source, target, reason="no exchange rate")

        converted = amount * rate
        logger.debug(f"Converted {amount} {source} -> {converted} {target} (rate {rate})")
        return converted

    def clear_cache(self) -> None:
        with self._lock:
            self._rates.clear()

    def _get_rates(self, base: str) -> dict[str, Decimal]:
        now = self._clock()
        with self._lock:
            cached = self._rates.get(base)
            if cached is not None and now - cached[0] < self._cache_ttl:
                return cached[1]

        rates = self._fetch_rates(base)

        with self._lock:
            self._rates[base] = (now, rates)
        return rates

    def _fetch_rates(self, base: str) -> dict[str, Decimal]:
        url = f"{self._base_url}/{base}"
        try:
            response = self._client.get(url)
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise CurrencyConversionError(base, "*", reason=f"rate fetch failed: {e}") from e

        raw_rates = payload.get("rates") if isinstance(payload, dict) else None
        if not isinstance(raw_rates, dict):
            raise CurrencyConversionError(base, "*", reason="malformed rates response")

        rates = {}
        for code, value in raw_rates.items():
            rate = to_decimal(value)
            if rate is not None and rate > 0:
                rates[code.upper()] = rate
        logger.info(f"Fetched {len(rates)} exchange rates for base {base}")
        return rates
