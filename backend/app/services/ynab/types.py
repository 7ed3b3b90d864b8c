# backend/app/services/ynab/types.py
"""
YNAB data transfer objects and milliunit conversion.

YNAB stores every amount as an integer number of milliunits
(1/1000 of the currency's major unit): 150000 milliunits = 150.00.
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_FLOOR

from app.services.constants import MILLIUNITS_PER_UNIT


def from_milliunits(milliunits: int) -> Decimal:
    """150000 -> Decimal('150')"""
    return Decimal(milliunits) / MILLIUNITS_PER_UNIT


def to_milliunits(amount: Decimal) -> int:
    """Decimal('150.0') -> 150000. Halves round toward +infinity, so -0.0025 -> -2."""
    return int((Decimal(amount) * MILLIUNITS_PER_UNIT + Decimal("0.5")).to_integral_value(rounding=ROUND_FLOOR))


@dataclass(frozen=True)
class YnabBudget:
    id: str
    name: str
    currency: str
    last_modified_on: str | None = None
    first_month: str | None = None
    last_month: str | None = None


@dataclass(frozen=True)
class YnabAccount:
    """
    An account inside a budget.

    Attributes:
        balance: Balance in major units (converted from milliunits)
        currency: ISO code of the budget the account belongs to
    """

    id: str
    name: str
    type: str
    balance: Decimal
    currency: str
