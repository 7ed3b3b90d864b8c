# backend/app/services/market_data/service.py
"""
Price resolution across an ordered list of providers.

For a batch of symbols, each available provider in turn is asked for the
symbols no earlier provider could price. The first valid price wins; there
is no reconciliation between providers and nothing is cached. A provider
that raises is logged and skipped.

Usage:
    service = MarketDataService([finnhub, yahoo, raiffeisen])
    resolution = service.get_asset_prices(["AAPL", "AT0000A1TW21"], "CZK")
    resolution.quotes["AAPL"].price
    resolution.not_found    # nobody knew these
    resolution.invalid      # somebody returned zero/garbage for these
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal

from app.services.constants import DEFAULT_TARGET_CURRENCY
from app.services.exceptions import CurrencyConversionError, TickerNotFoundError
from app.services.market_data.base import PriceProvider, PriceQuote
from app.services.market_data.currency import CurrencyConverter

logger = logging.getLogger(__name__)


@dataclass
class PriceResolution:
    """
    Result of resolving a batch of symbols.

    Attributes:
        target_currency: Currency all quotes are expressed in
        quotes: Requested symbol -> quote (keys keep the caller's spelling)
        not_found: Symbols no provider returned anything for
        invalid: Symbol -> reason, for symbols that only got invalid prices
        provider_by_symbol: Which provider priced each resolved symbol
        timestamp: When the resolution finished
    """

    target_currency: str
    quotes: dict[str, PriceQuote] = field(default_factory=dict)
    not_found: list[str] = field(default_factory=list)
    invalid: dict[str, str] = field(default_factory=dict)
    provider_by_symbol: dict[str, str] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def price_for(self, symbol: str) -> Decimal | None:
        """Case-insensitive price lookup."""
        quote = self.quotes.get(symbol)
        if quote is None:
            for key, candidate in self.quotes.items():
                if key.upper() == symbol.upper():
                    quote = candidate
                    break
        return quote.price if quote else None

    @property
    def unresolved(self) -> list[str]:
        return self.not_found + list(self.invalid)

    @property
    def resolved_count(self) -> int:
        return len(self.quotes)


class MarketDataService:
    """Dispatches price lookups over providers in preference order."""

    def __init__(
            self,
            providers: list[PriceProvider],
            converter: CurrencyConverter | None = None,
    ) -> None:
        self._providers = [p for p in providers if p.is_available()]
        self._converter = converter

        skipped = [p.name for p in providers if p not in self._providers]
        logger.info(
            f"MarketDataService initialized with providers: "
            f"{', '.join(self.get_available_providers()) or 'none'}"
            + (f" (unavailable: {', '.join(skipped)})" if skipped else "")
        )

    def get_available_providers(self) -> list[str]:
        return [p.name for p in self._providers]

    def get_asset_prices(
            self,
            symbols: list[str],
            target_currency: str = DEFAULT_TARGET_CURRENCY,
            log_not_found: bool = False,
    ) -> PriceResolution:
        """
        Resolve prices for `symbols` in `target_currency`.

        Symbols are de-duplicated case-insensitively; the first spelling wins.
        Never raises for provider failures.
        """
        currency = target_currency.upper()
        resolution = PriceResolution(target_currency=currency)

        remaining: list[str] = []
        seen: set[str] = set()
        for symbol in symbols:
            cleaned = symbol.strip()
            if cleaned and cleaned.upper() not in seen:
                seen.add(cleaned.upper())
                remaining.append(cleaned)

        if not remaining:
            return resolution

        logger.info(f"Resolving {len(remaining)} symbols in {currency}: {remaining}")

        for provider in self._providers:
            if not remaining:
                break

            try:
                lookup = provider.lookup_prices(list(remaining), currency)
            except Exception as e:
                logger.error(f"Provider {provider.name} failed: {e}")
                continue

            by_upper = {s.upper(): s for s in remaining}
            for quote in lookup.quotes:
                requested = by_upper.get(quote.symbol.upper())
                if requested is None or requested in resolution.quotes:
                    continue
                resolution.quotes[requested] = PriceQuote(
                    symbol=requested, price=quote.price, currency=currency,
                )
                resolution.provider_by_symbol[requested] = provider.name
                resolution.invalid.pop(requested, None)

            for symbol, reason in lookup.invalid.items():
                requested = by_upper.get(symbol.upper())
                if requested is not None and requested not in resolution.quotes:
                    resolution.invalid.setdefault(requested, reason)

            remaining = [s for s in remaining if s not in resolution.quotes]
            logger.debug(
                f"{provider.name} resolved {lookup.found_count} symbols, "
                f"{len(remaining)} remaining"
            )

        resolution.not_found = [s for s in remaining if s not in resolution.invalid]
        resolution.timestamp = datetime.now(timezone.utc)

        self._log_breakdown(resolution, log_not_found)
        return resolution

    def get_asset_price(
            self,
            symbol: str,
            target_currency: str = DEFAULT_TARGET_CURRENCY,
    ) -> PriceQuote:
        """
        Resolve a single symbol.

        Raises:
            TickerNotFoundError: No provider returned a valid price
        """
        resolution = self.get_asset_prices([symbol], target_currency)
        if not resolution.quotes:
            raise TickerNotFoundError(ticker=symbol)
        return next(iter(resolution.quotes.values()))

    def convert_currency(self, amount: Decimal, from_currency: str, to_currency: str) -> Decimal:
        """
        Convert an amount using current exchange rates.

        Raises:
            CurrencyConversionError: No converter configured or no rate available
        """
        if from_currency.upper() == to_currency.upper():
            return amount
        if self._converter is None:
            raise CurrencyConversionError(from_currency, to_currency, reason="no converter configured")
        return self._converter.convert_strict(amount, from_currency, to_currency)

    def _log_breakdown(self, resolution: PriceResolution, log_not_found: bool) -> None:
        counts = Counter(resolution.provider_by_symbol.values())
        breakdown = ", ".join(f"{name}: {count}" for name, count in counts.items()) or "none"
        logger.info(
            f"Resolved {resolution.resolved_count} prices in {resolution.target_currency} "
            f"({breakdown}); not found: {len(resolution.not_found)}, invalid: {len(resolution.invalid)}"
        )
        if resolution.invalid:
            logger.warning(f"Invalid prices: {resolution.invalid}")
        if log_not_found and resolution.not_found:
            logger.warning(f"No provider found prices for: {resolution.not_found}")
