# backend/app/services/market_data/api_base.py
"""
Shared plumbing for price providers backed by keyed JSON APIs.

Subclasses get an httpx client, the API key, availability tied to the key,
and `_get_json`, which turns transport problems into a logged `None` so
`lookup_prices` can keep going with the next symbol.
"""

import logging
from decimal import Decimal
from typing import Any

import httpx

from app.services.exceptions import RateLimitError
from app.services.http_client import build_http_client
from app.services.market_data.base import PriceProvider
from app.services.market_data.currency import CurrencyConverter

logger = logging.getLogger(__name__)


class KeyedApiProvider(PriceProvider):
    """Base for providers that need an API key and speak JSON over HTTPS."""

    # Currency the upstream API quotes prices in
    QUOTE_CURRENCY: str = "USD"

    def __init__(
            self,
            api_key: str | None,
            timeout: float = 10.0,
            client: httpx.Client | None = None,
            converter: CurrencyConverter | None = None,
    ):
        self._api_key = api_key
        self._client = client or build_http_client(timeout=timeout)
        self._converter = converter

    def is_available(self) -> bool:
        return bool(self._api_key)

    def _get_json(
            self,
            url: str,
            params: dict[str, str] | None = None,
            headers: dict[str, str] | None = None,
    ) -> Any | None:
        """
        GET a JSON document.

        Returns:
            Decoded JSON, or None on network errors, timeouts, non-2xx
            statuses and undecodable bodies

        Raises:
            RateLimitError: Upstream answered 429; callers stop their batch
        """
        try:
            response = self._client.get(url, params=params, headers=headers)
        except httpx.HTTPError as e:
            logger.warning(f"{self.name} request failed: {e}")
            return None

        if response.status_code == 429:
            retry_after = response.headers.get("Retry-After")
            raise RateLimitError(
                provider=self.name,
                retry_after=int(retry_after) if retry_after and retry_after.isdigit() else None,
            )

        if not response.is_success:
            logger.debug(f"{self.name} returned HTTP {response.status_code}: {response.text[:200]}")
            return None

        try:
            return response.json()
        except ValueError:
            logger.warning(f"{self.name} returned a non-JSON body")
            return None

    def _from_quote_currency(self, price: Decimal, target_currency: str) -> Decimal:
        """Convert a price from QUOTE_CURRENCY to `target_currency` when they differ."""
        if price <= 0 or target_currency.upper() == self.QUOTE_CURRENCY:
            return price
        if self._converter is None:
            logger.warning(f"{self.name}: no converter, keeping {self.QUOTE_CURRENCY} price")
            return price
        return self._converter.convert(price, self.QUOTE_CURRENCY, target_currency)
