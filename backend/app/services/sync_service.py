# backend/app/services/sync_service.py
"""
Portfolio Sync Service: pushes current portfolio values into YNAB.

Flow of one sync run:
1. Load settings (manual trigger fails fast when there are none)
2. Load all assets and group them by linked YNAB account
3. Fetch the target budget's accounts; unknown accounts are skipped
4. Resolve prices once per account currency (one batched call each)
5. Per account: total = sum(amount * price) over assets with a price
6. Reconcile each account with a positive total to that value

Partial failure is expected: an asset without a price is left out of its
account's total and the run carries on. YNAB errors abort the run.

Schedule evaluation lives in app/services/scheduler.py; this service only
runs when asked.
"""

import enum
import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from decimal import Decimal

from sqlalchemy.orm import Session

from app.models import UserSettings
from app.services.asset_service import AssetService
from app.services.exceptions import SettingsNotConfiguredError
from app.services.market_data.service import MarketDataService, PriceResolution
from app.services.scheduler import should_sync
from app.services.user_settings_service import UserSettingsService
from app.services.ynab.client import YnabService

logger = logging.getLogger(__name__)


# =============================================================================
# RESULT TYPES
# =============================================================================

class AccountSyncStatus(str, enum.Enum):
    RECONCILED = "reconciled"       # adjustment transaction written
    UNCHANGED = "unchanged"         # already within a cent of the value
    NO_VALUE = "no_value"           # no asset of the account could be priced
    ACCOUNT_NOT_FOUND = "account_not_found"


@dataclass
class AccountSyncResult:
    """Outcome for one YNAB account."""

    account_id: str
    account_name: str | None = None
    currency: str | None = None
    total_value: Decimal = Decimal("0")
    priced_symbols: list[str] = field(default_factory=list)
    skipped_symbols: list[str] = field(default_factory=list)
    adjustment: Decimal | None = None
    status: AccountSyncStatus = AccountSyncStatus.NO_VALUE


@dataclass
class SyncResult:
    """
    Summary of a sync run. Returned to the caller and logged, never stored.

    Attributes:
        accounts: One entry per YNAB account referenced by an asset
        unresolved_symbols: Symbols left out of totals for lack of a valid price.
            Assets on an unknown YNAB account are not listed here; they show
            up only in that account's skipped_symbols.
    """

    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    completed_at: datetime | None = None
    accounts: list[AccountSyncResult] = field(default_factory=list)
    unresolved_symbols: list[str] = field(default_factory=list)

    @property
    def accounts_updated(self) -> int:
        return sum(1 for a in self.accounts if a.status == AccountSyncStatus.RECONCILED)

    @property
    def assets_skipped(self) -> int:
        return sum(len(a.skipped_symbols) for a in self.accounts)

    def finish(self) -> "SyncResult":
        self.completed_at = datetime.now(timezone.utc)
        return self


# =============================================================================
# SERVICE
# =============================================================================

class PortfolioSyncService:
    """
    Orchestrates price resolution and YNAB reconciliation.

    Collaborators are passed in explicitly; see app/dependencies.py for
    the wiring used by the API and the scheduler.
    """

    def __init__(
            self,
            market_data_service: MarketDataService,
            ynab_service: YnabService,
            asset_service: AssetService,
            settings_service: UserSettingsService,
    ) -> None:
        self._market_data = market_data_service
        self._ynab = ynab_service
        self._assets = asset_service
        self._settings = settings_service
        logger.info("PortfolioSyncService initialized")

    def trigger_manual_sync(self, db: Session) -> SyncResult:
        """
        Run a sync now.

        Raises:
            SettingsNotConfiguredError: Settings were never saved
        """
        user_settings = self._settings.get_settings(db)
        if user_settings is None:
            raise SettingsNotConfiguredError()

        logger.info("Manual sync triggered")
        return self.perform_sync(db, user_settings)

    def run_scheduled_sync(self, db: Session, today: date | None = None) -> SyncResult | None:
        """
        Entry point for the scheduler: sync if today is a sync day.

        Returns:
            The SyncResult, or None when nothing ran
        """
        user_settings = self._settings.get_settings(db)
        if user_settings is None:
            logger.info("No user settings found, skipping scheduled sync")
            return None

        today = today or date.today()
        if not should_sync(user_settings.sync_schedule, today):
            logger.info(
                f"Skipping scheduled sync on {today.isoformat()} "
                f"(schedule={user_settings.sync_schedule.value})"
            )
            return None

        logger.info(f"Running scheduled sync (schedule={user_settings.sync_schedule.value})")
        return self.perform_sync(db, user_settings)

    def perform_sync(self, db: Session, user_settings: UserSettings) -> SyncResult:
        """
        Push the value of every linked account to YNAB.

        Raises:
            BudgetNotFoundError: No target budget and the token has no budgets
            YnabError / MarketDataError from the YNAB client: the run is aborted
        """
        result = SyncResult()

        assets = self._assets.find_all(db)
        if not assets:
            logger.info("No assets found, nothing to sync")
            return result.finish()

        by_account = self._assets.group_by_account(assets)
        token = user_settings.ynab_api_token
        budget_id = self._ynab.resolve_budget_id(token, user_settings.target_budget_id)
        ynab_accounts = {a.id: a for a in self._ynab.get_accounts(token, budget_id)}

        logger.info(
            f"Syncing {len(assets)} assets across {len(by_account)} YNAB accounts "
            f"(budget {budget_id})"
        )

        # One batched price lookup per account currency
        symbols_by_currency: dict[str, list[str]] = {}
        for account_id, account_assets in by_account.items():
            account = ynab_accounts.get(account_id)
            if account is None:
                continue
            bucket = symbols_by_currency.setdefault(account.currency, [])
            for asset in account_assets:
                if asset.symbol not in bucket:
                    bucket.append(asset.symbol)

        prices = {
            currency: self._resolve_prices(symbols, currency)
            for currency, symbols in symbols_by_currency.items()
        }

        for account_id, account_assets in by_account.items():
            account = ynab_accounts.get(account_id)
            if account is None:
                logger.warning(
                    f"YNAB account {account_id} not found in budget {budget_id}; "
                    f"skipping {len(account_assets)} assets"
                )
                result.accounts.append(AccountSyncResult(
                    account_id=account_id,
                    skipped_symbols=[a.symbol for a in account_assets],
                    status=AccountSyncStatus.ACCOUNT_NOT_FOUND,
                ))
                continue

            account_result = self._value_account(account_assets, account, prices[account.currency])

            if account_result.total_value > 0:
                adjustment = self._ynab.reconcile_account_balance(
                    token,
                    account.id,
                    account_result.total_value,
                    budget_id,
                    [a.symbol for a in account_assets],
                )
                account_result.adjustment = adjustment
                account_result.status = (
                    AccountSyncStatus.RECONCILED if adjustment is not None
                    else AccountSyncStatus.UNCHANGED
                )
            else:
                logger.warning(f"No priced assets for account '{account.name}', leaving it unchanged")

            result.accounts.append(account_result)

        result.unresolved_symbols = sorted({
            symbol
            for a in result.accounts
            if a.status != AccountSyncStatus.ACCOUNT_NOT_FOUND
            for symbol in a.skipped_symbols
        })
        result.finish()

        logger.info(
            f"Sync completed: {result.accounts_updated} accounts reconciled, "
            f"{result.assets_skipped} assets skipped"
        )
        return result

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _resolve_prices(self, symbols: list[str], currency: str) -> PriceResolution:
        try:
            return self._market_data.get_asset_prices(symbols, currency, log_not_found=True)
        except Exception as e:
            logger.error(f"Price resolution failed for {currency}: {e}")
            return PriceResolution(target_currency=currency, not_found=list(symbols))

    def _value_account(self, account_assets, account, resolution: PriceResolution) -> AccountSyncResult:
        account_result = AccountSyncResult(
            account_id=account.id,
            account_name=account.name,
            currency=account.currency,
        )

        total = Decimal("0")
        for asset in account_assets:
            price = resolution.price_for(asset.symbol)
            if price is None or price <= 0:
                logger.warning(f"No valid price for {asset.symbol}, excluded from '{account.name}'")
                account_result.skipped_symbols.append(asset.symbol)
                continue

            value = Decimal(asset.amount) * price
            total += value
            account_result.priced_symbols.append(asset.symbol)
            logger.info(f"Asset {asset.symbol}: {asset.amount} x {price} {account.currency} = {value:.2f}")

        account_result.total_value = total
        return account_result
