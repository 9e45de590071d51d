"""
Monthly budget resolution and spend aggregation.

Everything here is a pure function of its arguments: the client store, the
summary endpoint and the tests all pass snapshots in.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, Mapping

from .currency import RateTable, can_convert, convert
from .domain import Category, Transaction, TransactionType
from .months import month_of

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CategorySummary:
    category_id: int
    name: str
    icon: str
    color: str
    budget: float
    budget_is_override: bool
    spent: float
    remaining: float
    percentage: float
    over_budget: bool


@dataclass(frozen=True)
class MonthSummary:
    month: str
    base_currency: str
    income: float
    default_income: float
    income_is_override: bool
    using_default_income: bool
    total_budget: float
    total_spent: float
    remaining: float
    budget_remaining: float
    over_income: bool
    over_budget: bool
    percentage_spent: float
    budget_percentage: float
    expense_total: float
    income_total: float
    transaction_count: int
    categories: list[CategorySummary] = field(default_factory=list)
    unconverted_transaction_ids: list[int] = field(default_factory=list)


@dataclass(frozen=True)
class SpentMismatch:
    category_id: int
    cached: float
    computed: float


# --- Precedence rules ---

def budget_is_override(category: Category, month: str) -> bool:
    return month in (category.monthly_budgets or {})


def effective_budget(category: Category, month: str) -> float:
    """The month's override if one exists, else the category default."""
    if budget_is_override(category, month):
        return category.monthly_budgets[month]
    return category.budget


def effective_income(
    default_income: float,
    monthly_incomes: Mapping[str, float],
    month: str,
) -> float:
    if month in monthly_incomes:
        return monthly_incomes[month]
    return default_income


def is_using_default_income(income: float, default_income: float) -> bool:
    """Flag shown when a positive income is exactly the default baseline."""
    return income > 0 and income == default_income


# --- Spend ---

def in_month(transaction: Transaction, month: str) -> bool:
    try:
        return month_of(transaction.date) == month
    except (TypeError, ValueError):
        logger.warning(
            "Transaction %s has an unparseable date %r; excluded from %s",
            transaction.id, transaction.date, month,
        )
        return False


def transactions_in_month(transactions: Iterable[Transaction], month: str) -> list[Transaction]:
    return [t for t in transactions if in_month(t, month)]


def converted_amount(transaction: Transaction, base_currency: str, rates: RateTable) -> float:
    """Amount in ``base_currency``; a missing currency means it already is."""
    return convert(transaction.amount, transaction.currency or base_currency, base_currency, rates)


def _is_unconverted(transaction: Transaction, base_currency: str, rates: RateTable) -> bool:
    source = transaction.currency or base_currency
    return not can_convert(source, base_currency, rates)


def spend_by_category(
    transactions: Iterable[Transaction],
    month: str | None,
    categories: Iterable[Category],
    base_currency: str,
    rates: RateTable,
) -> dict[int, float]:
    """
    Spent per category in base currency.

    ``month=None`` aggregates over all time, which is what the cached
    per-category counters track.
    """
    totals = {c.id: 0.0 for c in categories}
    for t in transactions:
        if month is not None and not in_month(t, month):
            continue
        if t.category_id not in totals:
            logger.warning(
                "Transaction %s references unknown category %s", t.id, t.category_id
            )
            continue
        totals[t.category_id] += converted_amount(t, base_currency, rates)
    return totals


def _percentage(part: float, whole: float) -> float:
    if whole > 0:
        return part / whole * 100
    return 0.0


def summarize_month(
    month: str,
    categories: list[Category],
    transactions: list[Transaction],
    base_currency: str,
    rates: RateTable,
    default_income: float = 0.0,
    monthly_incomes: Mapping[str, float] | None = None,
) -> MonthSummary:
    """Income, budgets and spend for one month, in base currency."""
    monthly_incomes = monthly_incomes or {}
    month_transactions = transactions_in_month(transactions, month)

    spent = spend_by_category(month_transactions, None, categories, base_currency, rates)

    category_summaries = []
    for category in categories:
        budget = effective_budget(category, month)
        category_spent = spent[category.id]
        remaining = budget - category_spent
        category_summaries.append(CategorySummary(
            category_id=category.id,
            name=category.name,
            icon=category.icon,
            color=category.color,
            budget=budget,
            budget_is_override=budget_is_override(category, month),
            spent=category_spent,
            remaining=remaining,
            percentage=_percentage(category_spent, budget),
            over_budget=remaining < 0,
        ))

    income = effective_income(default_income, monthly_incomes, month)
    total_budget = sum(c.budget for c in category_summaries)
    total_spent = sum(c.spent for c in category_summaries)
    remaining = income - total_spent
    budget_remaining = total_budget - total_spent

    expense_total = 0.0
    income_total = 0.0
    unconverted = []
    for t in month_transactions:
        amount = converted_amount(t, base_currency, rates)
        if t.type == TransactionType.INCOME:
            income_total += amount
        else:
            expense_total += amount
        if _is_unconverted(t, base_currency, rates):
            unconverted.append(t.id)

    return MonthSummary(
        month=month,
        base_currency=base_currency,
        income=income,
        default_income=default_income,
        income_is_override=month in monthly_incomes,
        using_default_income=is_using_default_income(income, default_income),
        total_budget=total_budget,
        total_spent=total_spent,
        remaining=remaining,
        budget_remaining=budget_remaining,
        over_income=remaining < 0,
        over_budget=budget_remaining < 0,
        percentage_spent=_percentage(total_spent, income),
        budget_percentage=_percentage(total_spent, total_budget),
        expense_total=expense_total,
        income_total=income_total,
        transaction_count=len(month_transactions),
        categories=category_summaries,
        unconverted_transaction_ids=unconverted,
    )


# --- Cached counters ---

def verify_spent(
    categories: list[Category],
    transactions: list[Transaction],
    base_currency: str,
    rates: RateTable,
    tolerance: float = 0.005,
) -> list[SpentMismatch]:
    """Compare each category's cached ``spent`` with a fresh aggregation."""
    computed = spend_by_category(transactions, None, categories, base_currency, rates)
    mismatches = []
    for category in categories:
        if abs(category.spent - computed[category.id]) > tolerance:
            mismatches.append(SpentMismatch(
                category_id=category.id,
                cached=category.spent,
                computed=computed[category.id],
            ))
    return mismatches
