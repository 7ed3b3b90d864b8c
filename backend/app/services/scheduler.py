# backend/app/services/scheduler.py
"""
Scheduled portfolio sync.

A single APScheduler cron job fires once a day (SYNC_CRON_HOUR, default
08:00 in SCHEDULER_TIMEZONE). Whether it actually syncs depends on the
stored schedule, evaluated by `should_sync`:

    daily            every day
    every_two_days   even days of the month
    weekly           Mondays
    every_two_weeks  Mondays in an even week of the month (ceil(day / 7))
    monthly_first    the 1st
    monthly_last     the last day of the month

A manual sync may overlap a scheduled one; runs are not serialized against
each other.
"""

import calendar
import logging
import math
from collections.abc import Callable
from datetime import date
from typing import TYPE_CHECKING

from apscheduler.executors.pool import ThreadPoolExecutor
from apscheduler.jobstores.memory import MemoryJobStore
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger
from sqlalchemy.orm import Session

from app.models import SyncSchedule

if TYPE_CHECKING:
    from app.services.sync_service import PortfolioSyncService

logger = logging.getLogger(__name__)

SYNC_JOB_ID = "portfolio_sync"


def should_sync(schedule: SyncSchedule, today: date) -> bool:
    """Whether a sync is due on `today` under `schedule`."""
    if schedule == SyncSchedule.DAILY:
        return True
    if schedule == SyncSchedule.EVERY_TWO_DAYS:
        return today.day % 2 == 0
    if schedule == SyncSchedule.WEEKLY:
        return today.weekday() == 0
    if schedule == SyncSchedule.EVERY_TWO_WEEKS:
        week_of_month = math.ceil(today.day / 7)
        return today.weekday() == 0 and week_of_month % 2 == 0
    if schedule == SyncSchedule.MONTHLY_FIRST:
        return today.day == 1
    if schedule == SyncSchedule.MONTHLY_LAST:
        return today.day == calendar.monthrange(today.year, today.month)[1]

    logger.warning(f"Unknown sync schedule {schedule!r}, not syncing")
    return False


class SyncScheduler:
    """
    Owns the BackgroundScheduler running the daily sync check.

    Usage:
        scheduler = SyncScheduler(sync_service, SessionLocal, hour=8)
        scheduler.start()
        ...
        scheduler.shutdown()
    """

    def __init__(
            self,
            sync_service: "PortfolioSyncService",
            session_factory: Callable[[], Session],
            hour: int = 8,
            minute: int = 0,
            timezone: str = "UTC",
    ) -> None:
        self._sync_service = sync_service
        self._session_factory = session_factory
        self._hour = hour
        self._minute = minute
        self._scheduler = BackgroundScheduler(
            jobstores={"default": MemoryJobStore()},
            executors={"default": ThreadPoolExecutor(max_workers=1)},
            job_defaults={
                "coalesce": True,
                "max_instances": 1,
                "misfire_grace_time": 60 * 30,
            },
            timezone=timezone,
        )

    @property
    def running(self) -> bool:
        return self._scheduler.running

    def start(self) -> bool:
        """
        Register the sync job and start the scheduler.

        Returns:
            False if it was already running
        """
        if self._scheduler.running:
            logger.info("Scheduler already running")
            return False

        self._scheduler.add_job(
            self.run_job,
            trigger=CronTrigger(hour=self._hour, minute=self._minute),
            id=SYNC_JOB_ID,
            name="Scheduled portfolio sync",
            replace_existing=True,
        )
        self._scheduler.start()
        logger.info(f"Sync scheduler started (daily at {self._hour:02d}:{self._minute:02d})")
        return True

    def shutdown(self) -> None:
        if self._scheduler.running:
            self._scheduler.shutdown(wait=False)
            logger.info("Sync scheduler shut down")

    def run_job(self, today: date | None = None) -> None:
        """
        The scheduled job body. Failures are logged, never raised, so the
        scheduler keeps firing on later days.
        """
        db = self._session_factory()
        try:
            result = self._sync_service.run_scheduled_sync(db, today=today)
            if result is not None:
                logger.info(
                    f"Scheduled sync finished: {result.accounts_updated} accounts reconciled"
                )
        except Exception as e:
            logger.error(f"Scheduled sync failed: {e}", exc_info=True)
        finally:
            db.close()
