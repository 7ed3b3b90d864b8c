# backend/app/services/ynab/client.py
"""
YNAB API client.

The underlying httpx client holds no credentials. Every public method takes
the user's personal access token and sends it on that request only, so one
YnabService instance serves manual and scheduled syncs concurrently.

Retry Behavior:
    Read-only GETs retry with exponential backoff on RateLimitError (429)
    and ProviderUnavailableError (5xx, network errors, timeouts).
    Transaction POSTs are never retried; a retried write could create a
    duplicate transaction.
"""

import logging
from collections.abc import Callable
from datetime import date
from decimal import Decimal
from typing import Any, TypeVar

import httpx
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
    before_sleep_log,
)

from app.services.constants import (
    DEFAULT_BUDGET_CURRENCY,
    RECONCILIATION_PAYEE_NAME,
    RECONCILIATION_THRESHOLD,
    SYNC_MEMO,
    SYNC_PAYEE_NAME,
)
from app.services.exceptions import (
    BudgetNotFoundError,
    ProviderUnavailableError,
    RateLimitError,
    YnabApiError,
    YnabAuthenticationError,
    YnabNotFoundError,
)
from app.services.http_client import build_http_client
from app.services.ynab.types import (
    YnabAccount,
    YnabBudget,
    from_milliunits,
    to_milliunits,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

PROVIDER_NAME = "ynab"


class YnabService:
    """
    Thin client for the YNAB v1 API.

    Example:
        ynab = YnabService(base_url=settings.ynab_api_base_url)
        for budget in ynab.get_budgets(token):
            print(budget.name, budget.currency)
    """

    MAX_RETRY_ATTEMPTS: int = 3
    RETRY_MIN_WAIT: int = 1
    RETRY_MAX_WAIT: int = 10
    RETRY_MULTIPLIER: int = 1

    def __init__(
            self,
            base_url: str = "https://api.youneedabudget.com/v1",
            timeout: float = 10.0,
            client: httpx.Client | None = None,
            today: Callable[[], date] = date.today,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._client = client or build_http_client(timeout=timeout)
        self._today = today
        logger.info(f"YnabService initialized (base_url={self._base_url}, timeout={timeout}s)")

    # =========================================================================
    # BUDGETS
    # =========================================================================

    def get_budgets(self, token: str) -> list[YnabBudget]:
        data = self._get(token, "/budgets")
        budgets = [
            YnabBudget(
                id=b["id"],
                name=b.get("name", ""),
                currency=_currency_of(b),
                last_modified_on=b.get("last_modified_on"),
                first_month=b.get("first_month"),
                last_month=b.get("last_month"),
            )
            for b in data.get("budgets", [])
        ]
        logger.info(f"Fetched {len(budgets)} YNAB budgets")
        return budgets

    def get_budget_currency(self, token: str, budget_id: str) -> str:
        data = self._get(token, f"/budgets/{budget_id}")
        return _currency_of(data.get("budget") or {})

    def resolve_budget_id(self, token: str, budget_id: str | None = None) -> str:
        """
        Return `budget_id`, or the first budget of the account when it is None.

        Raises:
            BudgetNotFoundError: The token has access to no budgets
        """
        if budget_id:
            return budget_id

        budgets = self.get_budgets(token)
        if not budgets:
            raise BudgetNotFoundError()
        logger.info(f"No target budget configured, using '{budgets[0].name}'")
        return budgets[0].id

    # =========================================================================
    # ACCOUNTS
    # =========================================================================

    def get_accounts(self, token: str, budget_id: str | None = None) -> list[YnabAccount]:
        """
        List accounts of a budget with balances in major units.

        Raises:
            BudgetNotFoundError: No budget_id given and the token has no budgets
        """
        budget_id = self.resolve_budget_id(token, budget_id)
        currency = self.get_budget_currency(token, budget_id)
        data = self._get(token, f"/budgets/{budget_id}/accounts")

        accounts = [
            YnabAccount(
                id=a["id"],
                name=a.get("name", ""),
                type=a.get("type", ""),
                balance=from_milliunits(a.get("balance", 0)),
                currency=currency,
            )
            for a in data.get("accounts", [])
            if not a.get("deleted", False)
        ]
        logger.info(f"Fetched {len(accounts)} YNAB accounts for budget {budget_id}")
        return accounts

    def get_account_balance(self, token: str, account_id: str, budget_id: str | None = None) -> Decimal:
        budget_id = self.resolve_budget_id(token, budget_id)
        data = self._get(token, f"/budgets/{budget_id}/accounts/{account_id}")
        return from_milliunits((data.get("account") or {}).get("balance", 0))

    # =========================================================================
    # TRANSACTIONS
    # =========================================================================

    def update_account_balance(
            self,
            token: str,
            account_id: str,
            amount: Decimal,
            budget_id: str | None = None,
    ) -> None:
        """Post a transaction of `amount` tagged as an investment sync."""
        budget_id = self.resolve_budget_id(token, budget_id)
        self._create_transaction(token, budget_id, account_id, amount, SYNC_PAYEE_NAME, SYNC_MEMO)
        logger.info(f"Posted {amount} to YNAB account {account_id}")

    def reconcile_account_balance(
            self,
            token: str,
            account_id: str,
            target_balance: Decimal,
            budget_id: str | None = None,
            asset_symbols: list[str] | None = None,
    ) -> Decimal | None:
        """
        Bring an account's balance to `target_balance` with one transaction.

        Returns:
            The adjustment posted, or None when the balance was already
            within RECONCILIATION_THRESHOLD of the target
        """
        budget_id = self.resolve_budget_id(token, budget_id)
        current = self.get_account_balance(token, account_id, budget_id)
        difference = target_balance - current

        if abs(difference) < RECONCILIATION_THRESHOLD:
            logger.info(
                f"YNAB account {account_id} already at {current:.2f}, no reconciliation needed"
            )
            return None

        memo = f"{current:.2f} → {target_balance:.2f}"
        if asset_symbols:
            memo += f" ({', '.join(asset_symbols)})"

        self._create_transaction(
            token, budget_id, account_id, difference, RECONCILIATION_PAYEE_NAME, memo,
        )
        logger.info(
            f"Reconciled YNAB account {account_id}: {current:.2f} -> {target_balance:.2f} "
            f"(adjustment {difference:+.2f})"
        )
        return difference

    def _create_transaction(
            self,
            token: str,
            budget_id: str,
            account_id: str,
            amount: Decimal,
            payee_name: str,
            memo: str,
    ) -> None:
        payload = {
            "transaction": {
                "account_id": account_id,
                "amount": to_milliunits(amount),
                "payee_name": payee_name,
                "memo": memo,
                "cleared": "cleared",
                "approved": True,
                "date": self._today().isoformat(),
            }
        }
        self._request(token, "POST", f"/budgets/{budget_id}/transactions", json=payload)

    # =========================================================================
    # HTTP
    # =========================================================================

    def _get(self, token: str, path: str) -> dict[str, Any]:
        return self._execute_with_retry(self._request, token, "GET", path)

    def _request(
            self,
            token: str,
            method: str,
            path: str,
            json: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """
        Send one request and return the `data` member of the response.

        Raises:
            YnabAuthenticationError: 401
            YnabNotFoundError: 404
            RateLimitError: 429
            ProviderUnavailableError: 5xx, network errors and timeouts
            YnabApiError: Any other non-2xx response
        """
        url = f"{self._base_url}{path}"
        headers = {"Authorization": f"Bearer {token}"}

        try:
            response = self._client.request(method, url, headers=headers, json=json)
        except httpx.TimeoutException as e:
            raise ProviderUnavailableError(PROVIDER_NAME, reason=f"timeout calling {path}") from e
        except httpx.HTTPError as e:
            raise ProviderUnavailableError(PROVIDER_NAME, reason=str(e)) from e

        status = response.status_code
        if status == 401:
            raise YnabAuthenticationError()
        if status == 404:
            raise YnabNotFoundError(path)
        if status == 429:
            retry_after = response.headers.get("Retry-After")
            raise RateLimitError(
                PROVIDER_NAME,
                retry_after=int(retry_after) if retry_after and retry_after.isdigit() else None,
            )
        if status >= 500:
            raise ProviderUnavailableError(PROVIDER_NAME, reason=f"HTTP {status}")
        if not response.is_success:
            raise YnabApiError(f"YNAB API error {status}: {_error_detail(response)}", status_code=status)

        try:
            body = response.json()
        except ValueError as e:
            raise YnabApiError("YNAB returned a non-JSON response", status_code=status) from e
        return body.get("data") or {}

    def _execute_with_retry(self, func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        """Run `func`, retrying transient YNAB failures with exponential backoff."""

        @retry(
            stop=stop_after_attempt(self.MAX_RETRY_ATTEMPTS),
            wait=wait_exponential(
                multiplier=self.RETRY_MULTIPLIER,
                min=self.RETRY_MIN_WAIT,
                max=self.RETRY_MAX_WAIT,
            ),
            retry=retry_if_exception_type((ProviderUnavailableError, RateLimitError)),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        def _inner() -> T:
            return func(*args, **kwargs)

        return _inner()


def _currency_of(budget: dict[str, Any]) -> str:
    return (budget.get("currency_format") or {}).get("iso_code") or DEFAULT_BUDGET_CURRENCY


def _error_detail(response: httpx.Response) -> str:
    try:
        error = response.json().get("error") or {}
        return error.get("detail") or error.get("name") or response.text[:200]
    except ValueError:
        return response.text[:200]
