# backend/app/models.py
import enum
import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import String, DateTime, Enum, Numeric, CheckConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SyncSchedule(str, enum.Enum):
    """How often the scheduled job pushes portfolio values to YNAB."""
    DAILY = "daily"
    EVERY_TWO_DAYS = "every_two_days"
    WEEKLY = "weekly"
    EVERY_TWO_WEEKS = "every_two_weeks"
    MONTHLY_FIRST = "monthly_first"
    MONTHLY_LAST = "monthly_last"


class Asset(Base):
    """
    A single holding: how much of a symbol the user owns and which
    YNAB account its value is reported into.

    Several assets may point at the same YNAB account; the sync sums them.
    """
    __tablename__ = "assets"
    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_assets_amount_positive"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    symbol: Mapped[str] = mapped_column(String, index=True)  # ticker or ISIN
    amount: Mapped[Decimal] = mapped_column(Numeric(18, 8))
    ynab_account_id: Mapped[str] = mapped_column(String(36), index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)


class UserSettings(Base):
    """
    YNAB connection settings. The application is single-user, so at most
    one row is expected; the latest row wins if several exist.
    """
    __tablename__ = "user_settings"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    ynab_api_token: Mapped[str] = mapped_column(String)  # stored as provided
    sync_schedule: Mapped[SyncSchedule] = mapped_column(
        Enum(
            SyncSchedule,
            name="sync_schedule",
            values_callable=lambda e: [member.value for member in e],
        ),
        default=SyncSchedule.DAILY,
    )
    target_budget_id: Mapped[str | None] = mapped_column(String, nullable=True, default=None)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)
