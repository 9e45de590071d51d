from datetime import date

import pytest

from spendwise.aggregation import (
    effective_budget,
    is_using_default_income,
    spend_by_category,
    summarize_month,
    verify_spent,
)
from spendwise.currency import DEFAULT_CURRENCIES, rate_table
from spendwise.domain import Category, Transaction, TransactionType

RATES = rate_table(DEFAULT_CURRENCIES)


def make_tx(id, category_id, amount, when, currency="USD", type=TransactionType.EXPENSE):
    return Transaction(id=id, category_id=category_id, amount=amount, date=when, currency=currency, type=type)


def summarize(categories, transactions, month="2025-05", **kwargs):
    return summarize_month(month, categories, transactions, "USD", RATES, **kwargs)


def test_category_spend_and_remaining():
    food = Category(id=1, name="Food", budget=200)
    summary = summarize([food], [
        make_tx(1, 1, 50, "2025-05-02"),
        make_tx(2, 1, 30, "2025-05-20"),
    ])

    category = summary.categories[0]
    assert category.spent == 80
    assert category.remaining == 120
    assert category.percentage == 40
    assert not category.over_budget
    assert summary.total_spent == 80


def test_only_transactions_in_month_count():
    food = Category(id=1, name="Food", budget=100)
    summary = summarize([food], [
        make_tx(1, 1, 50, "2025-05-31"),
        make_tx(2, 1, 70, "2025-04-30"),
        make_tx(3, 1, 10, date(2025, 6, 1)),
    ])
    assert summary.total_spent == 50
    assert summary.transaction_count == 1


def test_monthly_override_takes_precedence():
    food = Category(id=1, name="Food", budget=200, monthly_budgets={"2025-05": 150})
    assert effective_budget(food, "2025-05") == 150
    assert effective_budget(food, "2025-04") == 200

    summary = summarize([food], [])
    assert summary.categories[0].budget == 150
    assert summary.categories[0].budget_is_override
    assert summary.total_budget == 150


def test_zero_budget_reports_zero_percent():
    misc = Category(id=1, name="Misc", budget=0)
    summary = summarize([misc], [make_tx(1, 1, 40, "2025-05-03")])
    assert summary.categories[0].percentage == 0
    assert summary.categories[0].over_budget
    assert summary.budget_percentage == 0


def test_over_budget():
    food = Category(id=1, name="Food", budget=50)
    summary = summarize([food], [make_tx(1, 1, 80, "2025-05-03")])
    assert summary.categories[0].remaining == -30
    assert summary.over_budget


def test_month_income_overrides_default():
    feb = summarize([], [], month="2025-02", default_income=3000, monthly_incomes={"2025-02": 3500})
    assert feb.income == 3500
    assert feb.income_is_override
    assert not feb.using_default_income

    jan = summarize([], [], month="2025-01", default_income=3000, monthly_incomes={"2025-02": 3500})
    assert jan.income == 3000
    assert not jan.income_is_override
    assert jan.using_default_income


def test_default_income_flag():
    assert is_using_default_income(3000, 3000)
    assert not is_using_default_income(3200, 3000)
    assert not is_using_default_income(0, 0)
    assert not is_using_default_income(0, 500)
    assert is_using_default_income(500, 500)


def test_income_percentages():
    food = Category(id=1, name="Food", budget=500)
    summary = summarize([food], [make_tx(1, 1, 750, "2025-05-03")], default_income=3000)
    assert summary.remaining == 2250
    assert summary.percentage_spent == 25
    assert not summary.over_income


def test_zero_income_reports_zero_percent():
    food = Category(id=1, name="Food", budget=500)
    summary = summarize([food], [make_tx(1, 1, 75, "2025-05-03")])
    assert summary.percentage_spent == 0
    assert summary.over_income


def test_foreign_transactions_are_converted():
    food = Category(id=1, name="Food", budget=200)
    summary = summarize([food], [make_tx(1, 1, 100, "2025-05-03", currency="EUR")])
    assert summary.total_spent == pytest.approx(109.89, abs=0.01)
    assert summary.unconverted_transaction_ids == []


def test_unknown_currency_counts_raw_amount():
    food = Category(id=1, name="Food", budget=200)
    summary = summarize([food], [make_tx(7, 1, 25, "2025-05-03", currency="XYZ")])
    assert summary.total_spent == 25
    assert summary.unconverted_transaction_ids == [7]


def test_income_transactions_count_toward_spend():
    salary = Category(id=1, name="Salary", budget=0)
    food = Category(id=2, name="Food", budget=100)
    summary = summarize([salary, food], [
        make_tx(1, 1, 1000, "2025-05-01", type=TransactionType.INCOME),
        make_tx(2, 2, 40, "2025-05-02"),
    ])
    assert summary.total_spent == 1040
    assert summary.income_total == 1000
    assert summary.expense_total == 40


def test_unparseable_dates_are_excluded():
    food = Category(id=1, name="Food", budget=100)
    summary = summarize([food], [
        make_tx(1, 1, 10, "yesterday"),
        make_tx(2, 1, 20, "2025-05-09"),
    ])
    assert summary.total_spent == 20


def test_total_spent_is_sum_of_categories():
    categories = [Category(id=i, name=str(i), budget=100) for i in (1, 2, 3)]
    transactions = [
        make_tx(1, 1, 12.5, "2025-05-01"),
        make_tx(2, 2, 30, "2025-05-02", currency="GBP"),
        make_tx(3, 3, 1000, "2025-05-03", currency="JPY"),
        make_tx(4, 9, 99, "2025-05-04"),  # unknown category
    ]
    summary = summarize(categories, transactions)
    assert summary.total_spent == pytest.approx(sum(c.spent for c in summary.categories))
    assert summary.budget_remaining == pytest.approx(summary.total_budget - summary.total_spent)


def test_spend_by_category_all_time():
    categories = [Category(id=1, name="Food"), Category(id=2, name="Rent")]
    totals = spend_by_category([
        make_tx(1, 1, 10, "2024-01-01"),
        make_tx(2, 1, 15, "2025-05-01"),
        make_tx(3, 2, 800, "2025-05-01"),
    ], None, categories, "USD", RATES)
    assert totals == {1: 25, 2: 800}


def test_verify_spent_reports_drift():
    categories = [
        Category(id=1, name="Food", spent=25),
        Category(id=2, name="Rent", spent=500),
    ]
    transactions = [
        make_tx(1, 1, 25, "2025-05-01"),
        make_tx(2, 2, 800, "2025-05-01"),
    ]
    mismatches = verify_spent(categories, transactions, "USD", RATES)
    assert len(mismatches) == 1
    assert mismatches[0].category_id == 2
    assert mismatches[0].computed == 800
