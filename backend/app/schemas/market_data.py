# backend/app/schemas/market_data.py
"""
Market data request/response schemas.

A price request names either a single `symbol` or a list of `symbols`
(both may be given; duplicates collapse). Results always come back as a
list together with the symbols nobody could price.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import Field, field_validator, model_validator

from app.schemas.base import CamelModel, JsonDecimal


def _normalize_currency(v: str) -> str:
    code = v.strip().upper()
    if len(code) != 3 or not code.isalpha():
        raise ValueError("currency must be a 3-letter ISO 4217 code")
    return code


# =============================================================================
# PRICES
# =============================================================================

class PriceRequest(CamelModel):
    """Request body for POST /api/market-data/price."""

    symbol: str | None = Field(
        default=None,
        examples=["AAPL"],
        description="Single symbol to price",
    )
    symbols: list[str] | None = Field(
        default=None,
        examples=[["AAPL", "BTC", "CZ0008019106"]],
        description="Several symbols to price in one call",
    )
    target_currency: str = Field(
        default="USD",
        examples=["USD", "CZK"],
        description="Currency the prices are returned in",
    )

    @field_validator("target_currency")
    @classmethod
    def normalize_currency(cls, v: str) -> str:
        return _normalize_currency(v)

    @model_validator(mode="after")
    def require_symbols(self) -> "PriceRequest":
        if not self.requested_symbols():
            raise ValueError("Provide 'symbol' or a non-empty 'symbols' list")
        return self

    def requested_symbols(self) -> list[str]:
        """All requested symbols, trimmed, blanks dropped."""
        raw = ([self.symbol] if self.symbol else []) + list(self.symbols or [])
        return [s.strip() for s in raw if s and s.strip()]


class PriceQuoteResponse(CamelModel):
    symbol: str
    price: JsonDecimal
    currency: str


class BulkPriceResponse(CamelModel):
    """
    Outcome of a price request.

    `notFound` lists symbols no provider knew; `invalid` maps symbols that
    only ever received zero or malformed prices to the reason.
    """

    results: list[PriceQuoteResponse]
    not_found: list[str] = Field(default_factory=list)
    invalid: dict[str, str] = Field(default_factory=dict)
    timestamp: datetime


# =============================================================================
# CURRENCY CONVERSION
# =============================================================================

class ConvertRequest(CamelModel):
    """Request body for POST /api/market-data/convert."""

    amount: Decimal = Field(..., ge=0, examples=[100.5])
    from_currency: str = Field(..., examples=["EUR"])
    to_currency: str = Field(..., examples=["USD"])

    @field_validator("from_currency", "to_currency")
    @classmethod
    def normalize_currency(cls, v: str) -> str:
        return _normalize_currency(v)


class ConvertResponse(CamelModel):
    converted_amount: JsonDecimal
    from_currency: str
    to_currency: str


class ProvidersResponse(CamelModel):
    """Active providers in the order they are consulted."""

    providers: list[str]
