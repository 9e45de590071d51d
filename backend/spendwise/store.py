"""
Client-side budget state.

``BudgetStore`` holds one immutable ``BudgetState`` snapshot. Every change is
a pure reducer ``(state, ...) -> state`` applied through ``dispatch``; the new
snapshot is committed in one step, persisted if a storage is attached, and
then passed to subscribers. Month resolution and aggregation never read the
store directly: they take the snapshot as an argument.
"""

import json
import logging
from dataclasses import asdict, dataclass, field, replace
from datetime import date, datetime
from pathlib import Path
from typing import Any, Callable, Protocol

from .aggregation import (
    MonthSummary,
    SpentMismatch,
    converted_amount,
    spend_by_category,
    summarize_month,
    verify_spent,
)
from .currency import DEFAULT_CURRENCIES, can_convert, convert, rate_table
from .domain import Category, Currency, Transaction, TransactionType
from .errors import NotFoundError
from .months import (
    MAX_LOOKBACK_MONTHS,
    current_month,
    first_income_month,
    is_valid_month,
    resolve_active_month,
    selectable_months,
)

logger = logging.getLogger(__name__)

STORAGE_KEY = "budget-storage"


@dataclass(frozen=True)
class BudgetState:
    default_income: float = 0.0
    monthly_incomes: dict[str, float] = field(default_factory=dict)
    categories: tuple[Category, ...] = ()
    transactions: tuple[Transaction, ...] = ()
    base_currency: str = "USD"
    currencies: tuple[Currency, ...] = DEFAULT_CURRENCIES
    receipts: dict[int, str] = field(default_factory=dict)  # transaction id -> image uri
    selected_month: str = field(default_factory=current_month)

    @property
    def rates(self) -> dict[str, Currency]:
        return rate_table(self.currencies)

    def category(self, category_id: int) -> Category:
        for c in self.categories:
            if c.id == category_id:
                return c
        raise NotFoundError("Category not found")

    def transaction(self, transaction_id: int) -> Transaction:
        for t in self.transactions:
            if t.id == transaction_id:
                return t
        raise NotFoundError("Transaction not found")


# --- Reducers ---

def _replace_category(state: BudgetState, category: Category) -> tuple[Category, ...]:
    return tuple(category if c.id == category.id else c for c in state.categories)


def _with_spent(category: Category, delta: float) -> Category:
    # Floored at zero
    return replace(category, spent=max(0.0, category.spent + delta))


def _recompute_spent(state: BudgetState) -> BudgetState:
    totals = spend_by_category(
        state.transactions, None, state.categories, state.base_currency, state.rates
    )
    return replace(state, categories=tuple(
        replace(c, spent=totals[c.id]) for c in state.categories
    ))


def set_income(state: BudgetState, income: float, is_default: bool = True) -> BudgetState:
    """Set the default income, or the selected month's income."""
    if is_default:
        return replace(state, default_income=income)
    return set_monthly_income(state, state.selected_month, income)


def set_monthly_income(state: BudgetState, month: str, income: float) -> BudgetState:
    return replace(state, monthly_incomes={**state.monthly_incomes, month: income})


def add_category(
    state: BudgetState,
    category_id: int,
    name: str,
    budget: float = 0.0,
    icon: str = "",
    color: str = "",
    is_default: bool = True,
) -> BudgetState:
    """
    Append a new category with ``spent = 0``.

    ``is_default=False`` records the budget for the selected month only and
    leaves the default at 0.
    """
    category = Category(
        id=category_id,
        name=name,
        icon=icon,
        color=color,
        budget=budget if is_default else 0.0,
        monthly_budgets={} if is_default else {state.selected_month: budget},
        spent=0.0,
    )
    return replace(state, categories=state.categories + (category,))


def update_category(state: BudgetState, category_id: int, **changes) -> BudgetState:
    changes.pop("id", None)
    changes.pop("spent", None)
    category = replace(state.category(category_id), **changes)
    return replace(state, categories=_replace_category(state, category))


def set_category_monthly_budget(
    state: BudgetState, category_id: int, month: str, budget: float
) -> BudgetState:
    category = state.category(category_id)
    category = replace(category, monthly_budgets={**category.monthly_budgets, month: budget})
    return replace(state, categories=_replace_category(state, category))


def delete_category(state: BudgetState, category_id: int) -> BudgetState:
    """Remove a category and, in the same snapshot, every transaction in it."""
    state.category(category_id)
    removed = {t.id for t in state.transactions if t.category_id == category_id}
    return replace(
        state,
        categories=tuple(c for c in state.categories if c.id != category_id),
        transactions=tuple(t for t in state.transactions if t.id not in removed),
        receipts={k: v for k, v in state.receipts.items() if k not in removed},
    )


def _default_transaction_date(state: BudgetState, now: datetime | None = None) -> datetime:
    """Now if the selected month is the current month, else its first day."""
    now = now or datetime.now()
    if state.selected_month == current_month(now.date()):
        return now
    year, month = state.selected_month.split("-")
    return datetime(int(year), int(month), 1)


def add_transaction(
    state: BudgetState,
    transaction_id: int,
    category_id: int,
    amount: float,
    user_id: str,
    currency: str | None = None,
    type: TransactionType = TransactionType.EXPENSE,
    date: date | datetime | str | None = None,
    description: str = "",
    receipt_data: dict[str, Any] | None = None,
) -> BudgetState:
    """Record a transaction in base currency and add it to the category's spent."""
    if not user_id:
        raise ValueError("Transaction must include user_id")
    category = state.category(category_id)

    base = state.base_currency
    original_amount = None
    original_currency = None
    stored_currency = currency or base
    if stored_currency != base and can_convert(stored_currency, base, state.rates):
        original_amount = amount
        original_currency = stored_currency
        amount = convert(amount, stored_currency, base, state.rates)
        stored_currency = base

    transaction = Transaction(
        id=transaction_id,
        user_id=user_id,
        category_id=category_id,
        amount=amount,
        currency=stored_currency,
        type=type,
        date=date if date is not None else _default_transaction_date(state),
        description=description,
        original_amount=original_amount,
        original_currency=original_currency,
        receipt_data=receipt_data,
    )
    category = _with_spent(category, converted_amount(transaction, base, state.rates))
    return replace(
        state,
        transactions=state.transactions + (transaction,),
        categories=_replace_category(state, category),
    )


def delete_transaction(state: BudgetState, transaction_id: int) -> BudgetState:
    """Remove a transaction, reverse its spent contribution and drop its receipt."""
    transaction = state.transaction(transaction_id)
    categories = state.categories
    try:
        category = state.category(transaction.category_id)
    except NotFoundError:
        logger.warning("Transaction %s had no category", transaction_id)
    else:
        amount = converted_amount(transaction, state.base_currency, state.rates)
        categories = _replace_category(state, _with_spent(category, -amount))
    return replace(
        state,
        transactions=tuple(t for t in state.transactions if t.id != transaction_id),
        categories=categories,
        receipts={k: v for k, v in state.receipts.items() if k != transaction_id},
    )


TRANSACTION_CHANGES = frozenset({"amount", "currency", "category_id", "type", "date", "description"})


def update_transaction(state: BudgetState, transaction_id: int, **changes) -> BudgetState:
    """
    Change amount, currency, category, date, type or description.

    A new amount or currency is converted again as on add; otherwise the
    stored and pre-conversion amounts are kept. The receipt link is kept.
    """
    unknown = set(changes) - TRANSACTION_CHANGES
    if unknown:
        raise TypeError(f"Unknown transaction fields: {', '.join(sorted(unknown))}")
    old = state.transaction(transaction_id)
    if "category_id" in changes:
        state.category(changes["category_id"])
    receipt = state.receipts.get(transaction_id)

    if "amount" in changes or "currency" in changes:
        state = delete_transaction(state, transaction_id)
        state = add_transaction(
            state,
            transaction_id=transaction_id,
            category_id=changes.get("category_id", old.category_id),
            amount=changes.get("amount", old.original_amount if old.original_currency else old.amount),
            user_id=old.user_id,
            currency=changes.get("currency", old.original_currency or old.currency),
            type=changes.get("type", old.type),
            date=changes.get("date", old.date),
            description=changes.get("description", old.description),
            receipt_data=old.receipt_data,
        )
        if old.receipt_id is not None:
            state = replace(state, transactions=tuple(
                replace(t, receipt_id=old.receipt_id) if t.id == transaction_id else t
                for t in state.transactions
            ))
    else:
        updated = replace(old, **changes)
        state = delete_transaction(state, transaction_id)
        category = state.category(updated.category_id)
        category = _with_spent(category, converted_amount(updated, state.base_currency, state.rates))
        state = replace(
            state,
            transactions=state.transactions + (updated,),
            categories=_replace_category(state, category),
        )

    if receipt is not None:
        state = replace(state, receipts={**state.receipts, transaction_id: receipt})
    return state


def set_base_currency(state: BudgetState, code: str) -> BudgetState:
    return _recompute_spent(replace(state, base_currency=code))


def update_currency_rates(state: BudgetState, rates: dict[str, float]) -> BudgetState:
    """Override the rate of known currencies; unknown codes are ignored."""
    currencies = tuple(
        replace(c, rate=rates[c.code]) if c.code in rates else c
        for c in state.currencies
    )
    return _recompute_spent(replace(state, currencies=currencies))


def add_receipt(
    state: BudgetState,
    transaction_id: int,
    image_uri: str,
    receipt_data: dict[str, Any] | None = None,
) -> BudgetState:
    transaction = replace(state.transaction(transaction_id), receipt_data=receipt_data)
    return replace(
        state,
        receipts={**state.receipts, transaction_id: image_uri},
        transactions=tuple(
            transaction if t.id == transaction_id else t for t in state.transactions
        ),
    )


def delete_receipt(state: BudgetState, transaction_id: int) -> BudgetState:
    return replace(
        state,
        receipts={k: v for k, v in state.receipts.items() if k != transaction_id},
        transactions=tuple(
            replace(t, receipt_data=None, receipt_id=None) if t.id == transaction_id else t
            for t in state.transactions
        ),
    )


def set_selected_month(state: BudgetState, month: str | None) -> BudgetState:
    """Select a month; anything but a valid ``YYYY-MM`` selects the current month."""
    return replace(state, selected_month=month if is_valid_month(month) else current_month())


def load_remote(
    state: BudgetState,
    categories: list[Category] | None = None,
    transactions: list[Transaction] | None = None,
    default_income: float | None = None,
    month_income: tuple[str, float | None] | None = None,
    base_currency: str | None = None,
) -> BudgetState:
    """
    Replace parts of the state with freshly fetched data.

    ``month_income`` is ``(month, income)``; an income of None clears the
    month's explicit value so the default applies.
    """
    changes: dict[str, Any] = {}
    if categories is not None:
        changes["categories"] = tuple(categories)
    if transactions is not None:
        changes["transactions"] = tuple(transactions)
    if default_income is not None:
        changes["default_income"] = default_income
    if base_currency is not None:
        changes["base_currency"] = base_currency
    if month_income is not None:
        month, income = month_income
        incomes = {k: v for k, v in state.monthly_incomes.items() if k != month}
        if income is not None:
            incomes[month] = income
        changes["monthly_incomes"] = incomes
    return _recompute_spent(replace(state, **changes))


def reset(state: BudgetState) -> BudgetState:
    """Clear all budget data, keeping currency settings and the selected month."""
    return replace(
        state,
        default_income=0.0,
        monthly_incomes={},
        categories=(),
        transactions=(),
        receipts={},
    )


# --- Persistence ---

def state_to_dict(state: BudgetState) -> dict:
    data = asdict(state)
    data["transactions"] = [
        {
            **asdict(t),
            "type": t.type.value,
            "date": t.date.isoformat() if isinstance(t.date, (date, datetime)) else t.date,
        }
        for t in state.transactions
    ]
    data["receipts"] = {str(k): v for k, v in state.receipts.items()}
    return data


def state_from_dict(data: dict) -> BudgetState:
    currencies = tuple(Currency(**c) for c in data.get("currencies") or ()) or DEFAULT_CURRENCIES
    transactions = tuple(
        Transaction(**{**t, "type": TransactionType(t.get("type") or "expense")})
        for t in data.get("transactions", ())
    )
    return BudgetState(
        default_income=data.get("default_income", 0.0),
        monthly_incomes=dict(data.get("monthly_incomes", {})),
        categories=tuple(Category(**c) for c in data.get("categories", ())),
        transactions=transactions,
        base_currency=data.get("base_currency", "USD"),
        currencies=currencies,
        receipts={int(k): v for k, v in data.get("receipts", {}).items()},
        selected_month=data.get("selected_month") or current_month(),
    )


class Storage(Protocol):
    def load(self, key: str) -> dict | None: ...

    def save(self, key: str, data: dict) -> None: ...


class JsonFileStorage:
    """Key-value storage kept in a single JSON file."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def _read(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r") as f:
                return json.load(f)
        except json.JSONDecodeError:
            logger.warning("Ignoring corrupt store file %s", self.path)
            return {}

    def load(self, key: str) -> dict | None:
        return self._read().get(key)

    def save(self, key: str, data: dict) -> None:
        contents = self._read()
        contents[key] = data
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w") as f:
            json.dump(contents, f, indent=2)


# --- Store ---

Listener = Callable[[BudgetState], None]


class BudgetStore:
    def __init__(
        self,
        state: BudgetState | None = None,
        storage: Storage | None = None,
        storage_key: str = STORAGE_KEY,
    ):
        self._storage = storage
        self._storage_key = storage_key
        self._listeners: list[Listener] = []

        if state is None and storage is not None:
            saved = storage.load(storage_key)
            if saved:
                state = state_from_dict(saved)
        self._state = state or BudgetState()

    def get_state(self) -> BudgetState:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a function that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def dispatch(self, mutation: Callable[..., BudgetState], *args, **kwargs) -> BudgetState:
        """Apply a reducer to the current snapshot and commit the result."""
        new_state = mutation(self._state, *args, **kwargs)
        self._state = new_state
        if self._storage is not None:
            self._storage.save(self._storage_key, state_to_dict(new_state))
        for listener in list(self._listeners):
            listener(new_state)
        return new_state

    def _next_id(self, items) -> int:
        return max((item.id for item in items), default=0) + 1

    # Convenience wrappers

    def add_category(self, name: str, budget: float = 0.0, icon: str = "", color: str = "",
                     is_default: bool = True) -> int:
        category_id = self._next_id(self._state.categories)
        self.dispatch(add_category, category_id, name, budget, icon, color, is_default)
        return category_id

    def add_transaction(self, category_id: int, amount: float, user_id: str, **kwargs) -> int:
        transaction_id = self._next_id(self._state.transactions)
        self.dispatch(add_transaction, transaction_id, category_id, amount, user_id, **kwargs)
        return transaction_id

    def delete_transaction(self, transaction_id: int) -> None:
        self.dispatch(delete_transaction, transaction_id)

    def delete_category(self, category_id: int) -> None:
        self.dispatch(delete_category, category_id)

    def set_selected_month(self, month: str | None) -> None:
        self.dispatch(set_selected_month, month)

    # Derived views

    def income_for_month(self, month: str) -> float:
        state = self._state
        return state.monthly_incomes.get(month, state.default_income)

    def summary(self, month: str | None = None) -> MonthSummary:
        state = self._state
        return summarize_month(
            month=month or state.selected_month,
            categories=list(state.categories),
            transactions=list(state.transactions),
            base_currency=state.base_currency,
            rates=state.rates,
            default_income=state.default_income,
            monthly_incomes=state.monthly_incomes,
        )

    def first_income_month(self) -> str:
        state = self._state
        return first_income_month(
            state.default_income,
            state.monthly_incomes,
            [t.date for t in state.transactions],
        )

    def selectable_months(
        self,
        anchor: str | None = None,
        limit: int = MAX_LOOKBACK_MONTHS,
    ) -> list[str]:
        """
        Months the user can pick, newest first.

        Resets the selected month to the newest entry if it fell outside the
        window.
        """
        months = selectable_months(anchor, self.first_income_month(), limit)
        active = resolve_active_month(self._state.selected_month, months)
        if active != self._state.selected_month:
            self.dispatch(set_selected_month, active)
        return months

    def verify_spent(self) -> list[SpentMismatch]:
        state = self._state
        return verify_spent(
            list(state.categories), list(state.transactions), state.base_currency, state.rates
        )
