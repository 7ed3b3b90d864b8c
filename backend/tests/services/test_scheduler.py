# backend/tests/services/test_scheduler.py
"""
Tests for schedule evaluation and the scheduled job wrapper.
"""

from datetime import date
from unittest.mock import MagicMock

import pytest

from app.models import SyncSchedule
from app.services.scheduler import SyncScheduler, should_sync


class TestShouldSync:

    @pytest.mark.parametrize("day", [date(2025, 3, 1), date(2025, 3, 4), date(2025, 12, 31)])
    def test_daily(self, day):
        assert should_sync(SyncSchedule.DAILY, day)

    @pytest.mark.parametrize("day,expected", [
        (date(2025, 3, 2), True),
        (date(2025, 3, 3), False),
        (date(2025, 3, 30), True),
        (date(2025, 3, 31), False),
    ])
    def test_every_two_days_uses_even_days(self, day, expected):
        assert should_sync(SyncSchedule.EVERY_TWO_DAYS, day) is expected

    @pytest.mark.parametrize("day,expected", [
        (date(2025, 3, 3), True),    # Monday
        (date(2025, 3, 4), False),
        (date(2025, 3, 9), False),   # Sunday
    ])
    def test_weekly_on_mondays(self, day, expected):
        assert should_sync(SyncSchedule.WEEKLY, day) is expected

    @pytest.mark.parametrize("day,expected", [
        (date(2025, 3, 3), False),   # Monday, week 1
        (date(2025, 3, 10), True),   # Monday, week 2
        (date(2025, 3, 17), False),  # Monday, week 3
        (date(2025, 3, 24), True),   # Monday, week 4
        (date(2025, 3, 31), False),  # Monday, week 5
        (date(2025, 3, 11), False),  # Tuesday, week 2
    ])
    def test_every_two_weeks_on_mondays_of_even_weeks(self, day, expected):
        assert should_sync(SyncSchedule.EVERY_TWO_WEEKS, day) is expected

    @pytest.mark.parametrize("day,expected", [
        (date(2025, 3, 1), True),
        (date(2025, 3, 2), False),
    ])
    def test_monthly_first(self, day, expected):
        assert should_sync(SyncSchedule.MONTHLY_FIRST, day) is expected

    @pytest.mark.parametrize("day,expected", [
        (date(2025, 2, 28), True),
        (date(2024, 2, 28), False),
        (date(2024, 2, 29), True),
        (date(2025, 4, 30), True),
        (date(2025, 3, 30), False),
    ])
    def test_monthly_last(self, day, expected):
        assert should_sync(SyncSchedule.MONTHLY_LAST, day) is expected


class TestSyncScheduler:

    def test_run_job_passes_fresh_session(self):
        sync_service = MagicMock()
        session = MagicMock()
        scheduler = SyncScheduler(sync_service, lambda: session)

        scheduler.run_job(today=date(2025, 3, 3))

        sync_service.run_scheduled_sync.assert_called_once_with(session, today=date(2025, 3, 3))
        session.close.assert_called_once()

    def test_run_job_swallows_failures(self):
        sync_service = MagicMock()
        sync_service.run_scheduled_sync.side_effect = RuntimeError("boom")
        session = MagicMock()
        scheduler = SyncScheduler(sync_service, lambda: session)

        scheduler.run_job()

        session.close.assert_called_once()

    def test_start_and_shutdown(self):
        scheduler = SyncScheduler(MagicMock(), MagicMock(), hour=3, minute=15)

        assert scheduler.start() is True
        try:
            assert scheduler.running
            assert scheduler.start() is False
        finally:
            scheduler.shutdown()

        assert not scheduler.running
