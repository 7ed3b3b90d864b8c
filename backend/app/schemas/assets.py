# backend/app/schemas/assets.py
"""
Pydantic schemas for Asset validation.

These schemas define:
- What data clients must send (Create)
- What data clients can update (Update)
- What data the API returns (Response)

Validation layers:
- Field constraints: positive amount, UUID-shaped account id
- Field validators: symbol normalization (trim, uppercase)
- Service: positivity re-checked on update
"""

from datetime import datetime
from decimal import Decimal

from pydantic import Field, field_validator

from app.schemas.base import CamelModel, JsonDecimal, UUID_PATTERN


def _normalize_symbol(v: str) -> str:
    symbol = v.strip().upper()
    if not symbol:
        raise ValueError("symbol must not be empty")
    return symbol


# =============================================================================
# REQUEST SCHEMAS
# =============================================================================

class AssetCreate(CamelModel):
    """Request body for tracking a new holding."""

    symbol: str = Field(
        ...,
        min_length=1,
        max_length=50,
        examples=["AAPL", "BTC", "CZ0008019106"],
        description="Ticker, crypto symbol or ISIN",
    )
    amount: Decimal = Field(
        ...,
        gt=0,
        examples=[10, "0.5"],
        description="Units held",
    )
    ynab_account_id: str = Field(
        ...,
        pattern=UUID_PATTERN,
        examples=["12345678-1234-1234-1234-123456789012"],
        description="YNAB account the holding belongs to",
    )

    @field_validator("symbol")
    @classmethod
    def normalize_symbol(cls, v: str) -> str:
        return _normalize_symbol(v)


class AssetUpdate(CamelModel):
    """
    Request body for a partial asset update.

    Omitted fields are left unchanged.
    """

    symbol: str | None = Field(default=None, min_length=1, max_length=50)
    amount: Decimal | None = Field(default=None, gt=0)
    ynab_account_id: str | None = Field(default=None, pattern=UUID_PATTERN)

    @field_validator("symbol")
    @classmethod
    def normalize_symbol(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return _normalize_symbol(v)


# =============================================================================
# RESPONSE SCHEMAS
# =============================================================================

class AssetResponse(CamelModel):
    """An asset as returned by the API."""

    id: str
    symbol: str
    amount: JsonDecimal
    ynab_account_id: str
    created_at: datetime
    updated_at: datetime


class MessageResponse(CamelModel):
    """Plain acknowledgement."""

    message: str = Field(..., examples=["Asset deleted successfully"])
