"""Plain snapshot types shared by the aggregator, the client store and the API."""

import enum
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any


class TransactionType(enum.Enum):
    EXPENSE = "expense"
    INCOME = "income"


@dataclass(frozen=True)
class Currency:
    code: str
    name: str
    symbol: str
    rate: float  # units of this currency per 1 USD


@dataclass(frozen=True)
class Category:
    id: int
    name: str
    budget: float = 0.0  # default, used when no month override exists
    icon: str = ""
    color: str = ""
    monthly_budgets: dict[str, float] = field(default_factory=dict)
    spent: float = 0.0  # cached counter, see aggregation.verify_spent


@dataclass(frozen=True)
class Transaction:
    """
    A recorded transaction.

    ``amount`` is expressed in ``currency``, which is the base currency at the
    time of recording. ``original_amount`` / ``original_currency`` keep the
    amount as entered when a conversion happened.
    """

    id: int
    category_id: int
    amount: float
    date: date | datetime | str
    currency: str | None = None
    type: TransactionType = TransactionType.EXPENSE
    user_id: str | None = None
    description: str = ""
    original_amount: float | None = None
    original_currency: str | None = None
    receipt_id: int | None = None
    receipt_data: dict[str, Any] | None = None
