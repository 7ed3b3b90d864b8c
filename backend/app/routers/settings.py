# backend/app/routers/settings.py
"""
User settings endpoints.

There is one logical settings record: the YNAB token, the sync schedule and
the optional target budget. Nothing else works until it exists.

Endpoints:
    GET   /api/settings  - Current settings, or null
    POST  /api/settings  - Save settings (replaces existing ones)
    PATCH /api/settings  - Partial update (creates when missing, token required)
"""

import logging

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_user_settings_service
from app.middleware.rate_limit import limiter, RATE_LIMIT_WRITE
from app.models import UserSettings
from app.schemas.user_settings import SettingsCreate, SettingsUpdate, SettingsResponse
from app.services.user_settings_service import UserSettingsService

logger = logging.getLogger(__name__)

# =============================================================================
# ROUTER SETUP
# =============================================================================

router = APIRouter(
    prefix="/settings",
    tags=["Settings"],
)


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.get(
    "",
    response_model=SettingsResponse | None,
    summary="Get settings",
    response_description="Current settings, or null when not configured",
)
def get_settings(
        db: Session = Depends(get_db),
        service: UserSettingsService = Depends(get_user_settings_service),
) -> UserSettings | None:
    return service.get_settings(db)


@router.post(
    "",
    response_model=SettingsResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Save settings",
)
@limiter.limit(RATE_LIMIT_WRITE)
def create_settings(
        request: Request,  # Required for rate limiting
        payload: SettingsCreate,
        db: Session = Depends(get_db),
        service: UserSettingsService = Depends(get_user_settings_service),
) -> UserSettings:
    """
    Save settings, replacing any stored before.

    - **ynabApiToken**: YNAB personal access token
    - **syncSchedule**: daily, every_two_days, weekly, every_two_weeks,
      monthly_first or monthly_last (default daily)
    - **targetBudgetId**: budget to sync into; the first budget when omitted
    """
    return service.create_settings(
        db,
        ynab_api_token=payload.ynab_api_token,
        sync_schedule=payload.sync_schedule,
        target_budget_id=payload.target_budget_id,
    )


@router.patch(
    "",
    response_model=SettingsResponse,
    summary="Update settings",
    responses={400: {"description": "No settings yet and no token supplied"}},
)
@limiter.limit(RATE_LIMIT_WRITE)
def update_settings(
        request: Request,  # Required for rate limiting
        payload: SettingsUpdate,
        db: Session = Depends(get_db),
        service: UserSettingsService = Depends(get_user_settings_service),
) -> UserSettings:
    """
    Update only the fields sent. `targetBudgetId: null` clears the target
    budget.
    """
    result = service.update_settings(
        db,
        ynab_api_token=payload.ynab_api_token,
        sync_schedule=payload.sync_schedule,
        target_budget_id=payload.target_budget_id,
        clear_target_budget=payload.clears_target_budget,
    )

    if result.was_created:
        logger.info("Settings created via PATCH")
    elif not result.changed_fields:
        logger.debug("Settings PATCH changed nothing")

    return result.settings
