# backend/app/schemas/ynab.py
"""
YNAB proxy and sync schemas.

The budgets/accounts endpoints take the token in the request body so the
frontend can browse YNAB before any settings are saved.
"""

from datetime import datetime

from pydantic import Field

from app.schemas.base import CamelModel, JsonDecimal


# =============================================================================
# REQUEST SCHEMAS
# =============================================================================

class TokenRequest(CamelModel):
    token: str = Field(..., min_length=1, description="YNAB personal access token")


class AccountsRequest(TokenRequest):
    budget_id: str | None = Field(
        default=None,
        description="Budget to list accounts of; the first budget when omitted",
    )


# =============================================================================
# RESPONSE SCHEMAS
# =============================================================================

class BudgetResponse(CamelModel):
    id: str
    name: str
    currency: str
    last_modified_on: str | None = None
    first_month: str | None = None
    last_month: str | None = None


class AccountResponse(CamelModel):
    id: str
    name: str
    type: str
    balance: JsonDecimal
    currency: str


class AccountSyncSummary(CamelModel):
    account_id: str
    account_name: str | None = None
    currency: str | None = None
    total_value: JsonDecimal
    adjustment: JsonDecimal | None = None
    status: str
    priced_symbols: list[str] = Field(default_factory=list)
    skipped_symbols: list[str] = Field(default_factory=list)


class SyncResponse(CamelModel):
    """Summary of a manual sync run."""

    message: str = Field(..., examples=["Sync completed successfully"])
    started_at: datetime
    completed_at: datetime | None = None
    accounts_updated: int
    assets_skipped: int
    unresolved_symbols: list[str] = Field(default_factory=list)
    accounts: list[AccountSyncSummary] = Field(default_factory=list)
