"""
Keeps a ``BudgetStore`` in step with the Spendwise API.

``BudgetApiClient`` is a thin async wrapper over the HTTP routes; error bodies
come back as the same exception types the server raised. ``BudgetSync``
performs a mutation remotely, then awaits the re-fetch of whatever it touched
before returning, so callers always see the refreshed snapshot.
"""

import logging
from datetime import date

import httpx

from .domain import Category, Transaction, TransactionType
from .errors import SpendwiseError, error_from_payload
from .months import parse_month
from .store import BudgetStore, load_remote

logger = logging.getLogger(__name__)


def _cents(amount: float) -> int:
    return int(round(amount * 100))


class BudgetApiClient:
    """Async client for the ``/api`` routes of one user."""

    def __init__(
        self,
        base_url: str,
        user_id: str,
        role: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        headers = {"X-User-Id": user_id}
        if role:
            headers["X-User-Role"] = role
        self.user_id = user_id
        self._client = httpx.AsyncClient(base_url=base_url, headers=headers, transport=transport)

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs):
        response = await self._client.request(method, f"/api{path}", **kwargs)
        if response.is_error:
            try:
                payload = response.json()
            except ValueError:
                payload = {}
            if not isinstance(payload, dict):
                payload = {}
            raise error_from_payload(payload, response.status_code)
        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    # Categories

    async def list_categories(self) -> list[dict]:
        return await self._request("GET", "/categories/")

    async def create_category(self, data: dict) -> dict:
        return await self._request("POST", "/categories/", json=data)

    async def update_category(self, category_id: int, data: dict) -> dict:
        return await self._request("PATCH", f"/categories/{category_id}", json=data)

    async def set_category_budget(self, category_id: int, month: str, amount_cents: int) -> dict:
        return await self._request(
            "PUT", f"/categories/{category_id}/budgets/{month}",
            json={"amount_cents": amount_cents},
        )

    async def delete_category(self, category_id: int) -> None:
        await self._request("DELETE", f"/categories/{category_id}")

    # Transactions

    async def list_transactions(self, year: int | None = None, month: int | None = None) -> list[dict]:
        params = {}
        if year is not None and month is not None:
            params = {"year": year, "month": month}
        return await self._request("GET", "/transactions/", params=params)

    async def create_transaction(self, data: dict) -> dict:
        return await self._request("POST", "/transactions/", json=data)

    async def update_transaction(self, transaction_id: int, data: dict) -> dict:
        return await self._request("PATCH", f"/transactions/{transaction_id}", json=data)

    async def delete_transaction(self, transaction_id: int) -> None:
        await self._request("DELETE", f"/transactions/{transaction_id}")

    # Budgets

    async def get_month_budget(self, month: str) -> dict | None:
        year, month_number = parse_month(month)
        return await self._request("GET", f"/budgets/{year}/{month_number}")

    async def set_month_budget(self, month: str, income_cents: int, categories: dict[int, int]) -> dict:
        year, month_number = parse_month(month)
        return await self._request(
            "PUT", f"/budgets/{year}/{month_number}",
            json={"income_cents": income_cents, "categories": categories},
        )

    async def get_budget_defaults(self) -> dict:
        return await self._request("GET", "/budgets/defaults")

    async def set_budget_defaults(self, default_income_cents: int, default_category_budgets: dict[int, int]) -> dict:
        return await self._request(
            "PUT", "/budgets/defaults",
            json={
                "default_income_cents": default_income_cents,
                "default_category_budgets": default_category_budgets,
            },
        )

    # Settings

    async def get_settings(self) -> dict:
        return await self._request("GET", "/settings")

    async def get_summary(self, month: str) -> dict:
        return await self._request("GET", "/summary/", params={"month": month})


def category_from_api(data: dict) -> Category:
    return Category(
        id=data["id"],
        name=data["name"],
        icon=data.get("icon") or "",
        color=data.get("color") or "",
        budget=data["budget_cents"] / 100.0,
        monthly_budgets={
            month: cents / 100.0 for month, cents in (data.get("monthly_budgets") or {}).items()
        },
        spent=data.get("spent_cents", 0) / 100.0,
    )


def transaction_from_api(data: dict, user_id: str | None = None) -> Transaction:
    original = data.get("original_amount_cents")
    return Transaction(
        id=data["id"],
        user_id=user_id,
        category_id=data["category_id"],
        amount=data["amount_cents"] / 100.0,
        currency=data.get("currency"),
        date=data["posted_date"],
        type=TransactionType(data.get("transaction_type") or "expense"),
        description=data.get("note") or "",
        original_amount=original / 100.0 if original is not None else None,
        original_currency=data.get("original_currency"),
        receipt_id=data.get("receipt_id"),
    )


class BudgetSync:
    def __init__(self, store: BudgetStore, client: BudgetApiClient):
        self.store = store
        self.client = client

    # --- Fetching ---

    async def refresh_categories(self) -> None:
        data = await self.client.list_categories()
        self.store.dispatch(load_remote, categories=[category_from_api(c) for c in data])

    async def refresh_transactions(self) -> None:
        """All of the user's transactions, so spent counters stay all-time."""
        data = await self.client.list_transactions()
        self.store.dispatch(
            load_remote,
            transactions=[transaction_from_api(t, self.client.user_id) for t in data],
        )

    async def load_month_budget(self, month: str | None = None) -> None:
        """
        Load the month's income and the default income.

        A failed fetch falls back to the defaults already in the store.
        """
        month = month or self.store.get_state().selected_month
        try:
            defaults = await self.client.get_budget_defaults()
            budget = await self.client.get_month_budget(month)
        except (SpendwiseError, httpx.HTTPError) as e:
            logger.warning("Failed to load budget for %s, using defaults: %s", month, e)
            self.store.dispatch(load_remote, month_income=(month, None))
            return

        if budget and budget["income_is_explicit"]:
            income = budget["income_cents"] / 100.0
        else:
            income = None
        self.store.dispatch(
            load_remote,
            default_income=defaults["default_income_cents"] / 100.0,
            month_income=(month, income),
        )

    async def load_settings(self) -> None:
        settings = await self.client.get_settings()
        self.store.dispatch(load_remote, base_currency=settings["currency"])

    async def refresh(self, month: str | None = None) -> None:
        await self.load_settings()
        await self.refresh_categories()
        await self.refresh_transactions()
        await self.load_month_budget(month)

    # --- Mutations ---

    async def set_income(self, income: float, is_default: bool = True) -> None:
        state = self.store.get_state()
        if is_default:
            await self.client.set_budget_defaults(
                _cents(income), {c.id: _cents(c.budget) for c in state.categories}
            )
        else:
            await self.client.set_month_budget(state.selected_month, _cents(income), {})
        await self.load_month_budget(state.selected_month)

    async def add_category(
        self,
        name: str,
        budget: float = 0.0,
        icon: str = "",
        color: str = "",
        is_default: bool = True,
    ) -> int:
        created = await self.client.create_category({
            "name": name,
            "icon": icon,
            "color": color,
            "budget_cents": _cents(budget),
            "is_default": is_default,
            "month": self.store.get_state().selected_month,
        })
        await self.refresh_categories()
        return created["id"]

    async def update_category(self, category_id: int, **changes) -> None:
        data = {k: v for k, v in changes.items() if k != "budget"}
        if "budget" in changes:
            data["budget_cents"] = _cents(changes["budget"])
        await self.client.update_category(category_id, data)
        await self.refresh_categories()

    async def set_category_monthly_budget(self, category_id: int, month: str, budget: float) -> None:
        await self.client.set_category_budget(category_id, month, _cents(budget))
        await self.refresh_categories()

    async def delete_category(self, category_id: int) -> None:
        await self.client.delete_category(category_id)
        await self.refresh_categories()
        await self.refresh_transactions()

    async def add_transaction(
        self,
        category_id: int,
        amount: float,
        posted_date: date,
        currency: str | None = None,
        transaction_type: TransactionType = TransactionType.EXPENSE,
        note: str | None = None,
    ) -> int:
        created = await self.client.create_transaction({
            "category_id": category_id,
            "amount_cents": _cents(amount),
            "posted_date": posted_date.isoformat(),
            "currency": currency,
            "transaction_type": transaction_type.value,
            "note": note,
        })
        await self.refresh_transactions()
        return created["id"]

    async def update_transaction(self, transaction_id: int, **changes) -> None:
        data = {k: v for k, v in changes.items() if k not in ("amount", "posted_date", "transaction_type")}
        if "amount" in changes:
            data["amount_cents"] = _cents(changes["amount"])
        if "posted_date" in changes:
            data["posted_date"] = changes["posted_date"].isoformat()
        if "transaction_type" in changes:
            data["transaction_type"] = changes["transaction_type"].value
        await self.client.update_transaction(transaction_id, data)
        await self.refresh_transactions()

    async def delete_transaction(self, transaction_id: int) -> None:
        await self.client.delete_transaction(transaction_id)
        await self.refresh_transactions()
