# backend/app/services/market_data/base.py
"""
Abstract interface for price providers.

Every data source (HTML scraper, Yahoo Finance, keyed JSON APIs, the static
fallback) implements `PriceProvider`. The dispatcher in service.py holds an
ordered list of providers and asks each one for the symbols that are still
unresolved.

Contract:
- `lookup_prices` never raises. A symbol whose lookup failed is simply
  missing from the result.
- A price must be strictly positive. A provider that parsed an explicit
  zero or garbage value records the symbol in `PriceLookup.invalid` so the
  two kinds of omission can be told apart in logs and API responses.
- Results may come back in any order and may be shorter than the input.
"""

import logging
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation

logger = logging.getLogger(__name__)


# =============================================================================
# DATA CLASSES
# =============================================================================

@dataclass(frozen=True)
class PriceQuote:
    """
    A single resolved price. Never persisted.

    Attributes:
        symbol: The symbol exactly as requested
        price: Price per unit in `currency`, always > 0
        currency: ISO 4217 code of the price (the requested target currency)
    """

    symbol: str
    price: Decimal
    currency: str

    def __post_init__(self) -> None:
        if not self.symbol:
            raise ValueError("symbol is required")
        if not self.currency:
            raise ValueError("currency is required")
        if not is_valid_price(self.price):
            raise ValueError(f"price must be positive, got {self.price}")


@dataclass
class PriceLookup:
    """
    Outcome of one provider call.

    Attributes:
        quotes: Valid prices, at most one per symbol
        invalid: Symbol -> reason, for symbols that produced a non-positive
                 or unparseable price and no valid one
    """

    quotes: list[PriceQuote] = field(default_factory=list)
    invalid: dict[str, str] = field(default_factory=dict)

    def add_quote(self, quote: PriceQuote) -> None:
        self.quotes.append(quote)
        self.invalid.pop(quote.symbol, None)

    def mark_invalid(self, symbol: str, reason: str) -> None:
        if symbol not in self.found_symbols:
            self.invalid[symbol] = reason

    @property
    def found_symbols(self) -> set[str]:
        return {q.symbol for q in self.quotes}

    @property
    def found_count(self) -> int:
        return len(self.quotes)


# =============================================================================
# HELPERS
# =============================================================================

def is_valid_price(value: object) -> bool:
    """True for a finite number strictly greater than zero."""
    if value is None or isinstance(value, bool):
        return False
    try:
        number = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return False
    return number.is_finite() and number > 0


def to_decimal(value: object) -> Decimal | None:
    """Convert a JSON number (int, float or numeric string) to Decimal."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None


# =============================================================================
# ABSTRACT BASE CLASS
# =============================================================================

class PriceProvider(ABC):
    """
    Abstract base class for price providers.

    Subclasses implement `name` and `lookup_prices`, and override
    `is_available` when they need configuration (an API key) to work.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable provider name used in logs and diagnostics."""
        pass

    @abstractmethod
    def lookup_prices(self, symbols: list[str], target_currency: str) -> PriceLookup:
        """
        Resolve prices for a batch of symbols.

        Must not raise: upstream failures are logged and the affected symbols
        are left out of the result.

        Args:
            symbols: Symbols to resolve (already de-duplicated by the caller)
            target_currency: Currency the prices must be expressed in

        Returns:
            PriceLookup with valid quotes and explicitly invalid symbols
        """
        pass

    def fetch_asset_prices(self, symbols: list[str], target_currency: str) -> list[PriceQuote]:
        """Valid quotes for `symbols`; unresolved symbols are absent."""
        return self.lookup_prices(symbols, target_currency).quotes

    def get_provider_name(self) -> str:
        return self.name

    def is_available(self) -> bool:
        """
        Whether the provider can be used at all.

        Default implementation returns True. Keyed providers return False
        when their API key is not configured.
        """
        return True

    # =========================================================================
    # SHARED HELPERS
    # =========================================================================

    def _accept(
            self,
            lookup: PriceLookup,
            symbol: str,
            price: object,
            currency: str,
    ) -> bool:
        """
        Add a quote to `lookup` if `price` is valid, else record it as invalid.

        Returns:
            True when a quote was added
        """
        if is_valid_price(price):
            lookup.add_quote(PriceQuote(symbol=symbol, price=Decimal(str(price)), currency=currency))
            logger.debug(f"{self.name}: {symbol} = {price} {currency}")
            return True

        lookup.mark_invalid(symbol, f"{self.name} returned invalid price {price!r}")
        logger.debug(f"{self.name}: invalid price {price!r} for {symbol}")
        return False
