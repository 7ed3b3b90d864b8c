# backend/app/services/ynab/__init__.py
"""
YNAB REST API client.

Usage:
    from app.services.ynab import YnabService

    ynab = YnabService()
    accounts = ynab.get_accounts(token, budget_id)
    ynab.reconcile_account_balance(token, accounts[0].id, Decimal("1520.40"), budget_id)
"""

from app.services.ynab.client import YnabService
from app.services.ynab.types import (
    YnabAccount,
    YnabBudget,
    from_milliunits,
    to_milliunits,
)

__all__ = [
    "YnabService",
    "YnabAccount",
    "YnabBudget",
    "from_milliunits",
    "to_milliunits",
]
