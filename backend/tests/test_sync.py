import logging
from datetime import date

import httpx
import pytest

from spendwise.errors import ApiError, GuestLimitReached, NotFoundError
from spendwise.main import app
from spendwise.months import current_month
from spendwise.store import BudgetState, BudgetStore, set_income
from spendwise.sync import BudgetApiClient, BudgetSync


def api_client(user_id="user-1", role=None):
    return BudgetApiClient(
        "http://testserver", user_id, role=role, transport=httpx.ASGITransport(app=app)
    )


@pytest.mark.asyncio
async def test_mutations_refresh_the_store(database):
    store = BudgetStore(BudgetState(selected_month="2025-05"))
    async with api_client() as client:
        sync = BudgetSync(store, client)
        food = await sync.add_category("Food", 200)
        await sync.add_transaction(food, 50, date(2025, 5, 2))
        await sync.add_transaction(food, 30, date(2025, 5, 20))

    state = store.get_state()
    assert [c.name for c in state.categories] == ["Food"]
    assert len(state.transactions) == 2
    assert state.category(food).spent == 80
    assert store.verify_spent() == []
    assert store.summary().categories[0].remaining == 120


@pytest.mark.asyncio
async def test_income_round_trip(database):
    store = BudgetStore(BudgetState(selected_month="2025-05"))
    async with api_client() as client:
        sync = BudgetSync(store, client)
        await sync.set_income(3000)
        await sync.set_income(3500, is_default=False)

        assert store.get_state().default_income == 3000
        assert store.get_state().monthly_incomes == {"2025-05": 3500}

        await sync.load_month_budget("2025-04")
        assert "2025-04" not in store.get_state().monthly_incomes
        assert store.income_for_month("2025-04") == 3000


@pytest.mark.asyncio
async def test_override_only_month_follows_default_income(database):
    store = BudgetStore(BudgetState(selected_month="2025-05"))
    async with api_client() as client:
        sync = BudgetSync(store, client)
        await sync.set_income(500)
        food = await sync.add_category("Food", 200)
        await sync.set_category_monthly_budget(food, "2025-03", 150)

        await sync.load_month_budget("2025-03")
        assert "2025-03" not in store.get_state().monthly_incomes
        assert store.first_income_month() == current_month()

        await sync.set_income(800)
        server = await client.get_summary("2025-03")

    summary = store.summary("2025-03")
    assert summary.income == 800
    assert summary.income_is_override is False
    assert summary.categories[0].budget == 150
    assert server["income"] == summary.income
    assert server["income_is_override"] is False


@pytest.mark.asyncio
async def test_month_budget_failure_falls_back_to_defaults(caplog):
    def failing(request):
        return httpx.Response(500, json={"code": "ERROR", "message": "boom"})

    state = BudgetState(selected_month="2025-05", default_income=2000, monthly_incomes={"2025-05": 2500})
    store = BudgetStore(state)
    client = BudgetApiClient("http://testserver", "user-1", transport=httpx.MockTransport(failing))
    with caplog.at_level(logging.WARNING, logger="spendwise.sync"):
        await BudgetSync(store, client).load_month_budget()
    await client.aclose()

    assert store.get_state().monthly_incomes == {}
    assert store.income_for_month("2025-05") == 2000
    assert "using defaults" in caplog.text


@pytest.mark.asyncio
async def test_unknown_error_codes_become_api_errors():
    def failing(request):
        return httpx.Response(500, json={"code": "ERROR", "message": "boom"})

    async with BudgetApiClient("http://testserver", "user-1", transport=httpx.MockTransport(failing)) as client:
        with pytest.raises(ApiError) as excinfo:
            await client.list_categories()
    assert excinfo.value.status_code == 500
    assert excinfo.value.message == "boom"


@pytest.mark.asyncio
async def test_errors_are_mapped_back(database):
    store = BudgetStore()
    async with api_client() as client:
        with pytest.raises(NotFoundError):
            await BudgetSync(store, client).delete_category(999)


@pytest.mark.asyncio
async def test_guest_limit_propagates(database):
    store = BudgetStore()
    async with api_client("guest-1", role="guest") as client:
        sync = BudgetSync(store, client)
        for i in range(5):
            await sync.add_category(f"Category {i}")
        with pytest.raises(GuestLimitReached):
            await sync.add_category("One too many")
    assert len(store.get_state().categories) == 5


@pytest.mark.asyncio
async def test_delete_category_refreshes_transactions(database):
    store = BudgetStore(BudgetState(selected_month="2025-05"))
    async with api_client() as client:
        sync = BudgetSync(store, client)
        food = await sync.add_category("Food")
        rent = await sync.add_category("Rent")
        await sync.add_transaction(food, 10, date(2025, 5, 1))
        await sync.add_transaction(rent, 900, date(2025, 5, 1))

        await sync.delete_category(food)

    state = store.get_state()
    assert [c.id for c in state.categories] == [rent]
    assert [t.category_id for t in state.transactions] == [rent]


@pytest.mark.asyncio
async def test_refresh_loads_everything(database):
    async with api_client() as client:
        writer = BudgetSync(BudgetStore(BudgetState(selected_month="2025-05")), client)
        food = await writer.add_category("Food", 100)
        tx = await writer.add_transaction(food, 40, date(2025, 5, 3), currency="EUR")
        await writer.set_income(1500)

        store = BudgetStore(BudgetState(selected_month="2025-05"))
        store.dispatch(set_income, 99)
        await BudgetSync(store, client).refresh()

    state = store.get_state()
    assert state.base_currency == "USD"
    assert state.default_income == 1500
    transaction = state.transaction(tx)
    assert transaction.original_currency == "EUR"
    assert transaction.original_amount == 40
    assert state.category(food).spent == transaction.amount
