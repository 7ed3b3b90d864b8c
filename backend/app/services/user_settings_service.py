# backend/app/services/user_settings_service.py
"""
User Settings Service for the single-user YNAB connection settings.

This service handles:
- Saving settings (replacing whatever was stored before)
- Reading the current settings
- Partial updates, creating the row on first update

Design Principles:
- Single user: at most one logical settings record; the newest row wins
- No HTTP Knowledge: Raises domain exceptions, not HTTPException
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy import select, delete
from sqlalchemy.orm import Session

from app.models import SyncSchedule, UserSettings
from app.services.exceptions import ValidationError

logger = logging.getLogger(__name__)


# =============================================================================
# RESULT TYPES
# =============================================================================

@dataclass
class SettingsUpdateResult:
    """Result of updating user settings."""

    settings: UserSettings
    was_created: bool
    changed_fields: list[str]


# =============================================================================
# SERVICE
# =============================================================================

class UserSettingsService:
    """Reads and writes the YNAB token, sync schedule and target budget."""

    def __init__(self) -> None:
        logger.info("UserSettingsService initialized")

    def create_settings(
            self,
            db: Session,
            ynab_api_token: str,
            sync_schedule: SyncSchedule = SyncSchedule.DAILY,
            target_budget_id: str | None = None,
    ) -> UserSettings:
        """
        Save new settings, deleting any previously stored ones.
        """
        removed = db.execute(delete(UserSettings)).rowcount
        if removed:
            logger.info(f"Replacing {removed} existing settings record(s)")

        settings = UserSettings(
            ynab_api_token=ynab_api_token,
            sync_schedule=sync_schedule,
            target_budget_id=target_budget_id,
        )
        db.add(settings)
        db.commit()
        db.refresh(settings)

        logger.info(f"User settings saved (schedule={settings.sync_schedule.value})")
        return settings

    def get_settings(self, db: Session) -> UserSettings | None:
        """
        Get the current settings.

        Returns None if nothing has been configured yet.
        """
        return db.scalar(
            select(UserSettings)
            .order_by(UserSettings.created_at.desc())
            .limit(1)
        )

    def update_settings(
            self,
            db: Session,
            ynab_api_token: str | None = None,
            sync_schedule: SyncSchedule | None = None,
            target_budget_id: str | None = None,
            clear_target_budget: bool = False,
    ) -> SettingsUpdateResult:
        """
        Update the current settings.

        When nothing is stored yet the settings are created, which requires
        a token.

        Raises:
            ValidationError: No settings exist and no token was supplied
        """
        settings = self.get_settings(db)

        if settings is None:
            if not ynab_api_token:
                raise ValidationError(
                    "ynabApiToken is required when creating settings",
                    field="ynabApiToken",
                )
            created = self.create_settings(
                db,
                ynab_api_token=ynab_api_token,
                sync_schedule=sync_schedule or SyncSchedule.DAILY,
                target_budget_id=None if clear_target_budget else target_budget_id,
            )
            return SettingsUpdateResult(
                settings=created,
                was_created=True,
                changed_fields=["ynab_api_token", "sync_schedule", "target_budget_id"],
            )

        changed_fields: list[str] = []

        if ynab_api_token is not None and settings.ynab_api_token != ynab_api_token:
            settings.ynab_api_token = ynab_api_token
            changed_fields.append("ynab_api_token")

        if sync_schedule is not None and settings.sync_schedule != sync_schedule:
            settings.sync_schedule = sync_schedule
            changed_fields.append("sync_schedule")

        if clear_target_budget:
            if settings.target_budget_id is not None:
                settings.target_budget_id = None
                changed_fields.append("target_budget_id")
        elif target_budget_id is not None and settings.target_budget_id != target_budget_id:
            settings.target_budget_id = target_budget_id
            changed_fields.append("target_budget_id")

        if changed_fields:
            settings.updated_at = datetime.now(timezone.utc)
            db.commit()
            db.refresh(settings)
            logger.info(f"User settings updated: {changed_fields}")

        return SettingsUpdateResult(
            settings=settings,
            was_created=False,
            changed_fields=changed_fields,
        )
