# backend/app/schemas/user_settings.py
"""
User settings request/response schemas.

Defines Pydantic models for:
- The YNAB personal access token
- The sync schedule (one of six values)
- The optional target budget
"""

from datetime import datetime

from pydantic import Field, field_validator

from app.models import SyncSchedule
from app.schemas.base import CamelModel


def _strip_token(v: str | None) -> str | None:
    if v is None:
        return None
    token = v.strip()
    if not token:
        raise ValueError("ynabApiToken must not be empty")
    return token


# =============================================================================
# REQUEST SCHEMAS
# =============================================================================

class SettingsCreate(CamelModel):
    """Request body for saving settings. Replaces anything stored before."""

    ynab_api_token: str = Field(
        ...,
        min_length=1,
        description="YNAB personal access token",
    )
    sync_schedule: SyncSchedule = Field(
        default=SyncSchedule.DAILY,
        description="How often the scheduled sync runs",
        examples=["daily", "weekly", "monthly_last"],
    )
    target_budget_id: str | None = Field(
        default=None,
        max_length=36,
        description="Budget to sync into; the first budget when omitted",
    )

    @field_validator("ynab_api_token")
    @classmethod
    def validate_token(cls, v: str) -> str:
        return _strip_token(v)


class SettingsUpdate(CamelModel):
    """
    Request body for a partial settings update.

    Sending `targetBudgetId: null` explicitly clears the target budget;
    omitting it leaves the stored value alone.
    """

    ynab_api_token: str | None = Field(default=None, min_length=1)
    sync_schedule: SyncSchedule | None = None
    target_budget_id: str | None = Field(default=None, max_length=36)

    @field_validator("ynab_api_token")
    @classmethod
    def validate_token(cls, v: str | None) -> str | None:
        return _strip_token(v)

    @property
    def clears_target_budget(self) -> bool:
        return "target_budget_id" in self.model_fields_set and self.target_budget_id is None


# =============================================================================
# RESPONSE SCHEMAS
# =============================================================================

class SettingsResponse(CamelModel):
    """Stored settings, token included."""

    id: str
    ynab_api_token: str
    sync_schedule: SyncSchedule
    target_budget_id: str | None = None
    created_at: datetime
    updated_at: datetime
