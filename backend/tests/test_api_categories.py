from fastapi.testclient import TestClient

from spendwise.main import app

from conftest import create_category, create_transaction


def test_create_and_list_categories(client):
    created = create_category(client, "Food", 20000, icon="🍔", color="#ff0000")
    assert created["budget_cents"] == 20000
    assert created["budget"] == 200.0
    assert created["spent_cents"] == 0
    assert created["monthly_budgets"] == {}

    response = client.get("/api/categories/")
    assert response.status_code == 200
    assert [c["name"] for c in response.json()] == ["Food"]


def test_create_category_for_one_month(client):
    created = create_category(client, "Gifts", 5000, is_default=False, month="2025-03")
    assert created["budget_cents"] == 0
    assert created["monthly_budgets"] == {"2025-03": 5000}


def test_missing_category_is_not_found(client):
    response = client.get("/api/categories/999")
    assert response.status_code == 404
    assert response.json() == {"code": "NOT_FOUND", "message": "Category not found"}


def test_requests_need_a_user(database):
    response = TestClient(app).get("/api/categories/")
    assert response.status_code == 401
    assert response.json()["code"] == "UNAUTHORIZED"


def test_categories_are_per_user(client):
    created = create_category(client)
    other = TestClient(app, headers={"X-User-Id": "user-2"})
    assert other.get("/api/categories/").json() == []
    assert other.get(f"/api/categories/{created['id']}").status_code == 404


def test_update_category(client):
    created = create_category(client)
    response = client.patch(f"/api/categories/{created['id']}", json={"name": "Groceries", "budget_cents": 25000})
    assert response.status_code == 200
    assert response.json()["name"] == "Groceries"
    assert response.json()["budget_cents"] == 25000


def test_monthly_budget_override(client):
    created = create_category(client)
    url = f"/api/categories/{created['id']}/budgets/2025-05"

    response = client.put(url, json={"amount_cents": 15000})
    assert response.status_code == 200
    assert response.json()["monthly_budgets"] == {"2025-05": 15000}

    response = client.put(url, json={"amount_cents": 12000})
    assert response.json()["monthly_budgets"] == {"2025-05": 12000}

    response = client.delete(url)
    assert response.json()["monthly_budgets"] == {}


def test_monthly_budget_rejects_bad_month(client):
    created = create_category(client)
    response = client.put(f"/api/categories/{created['id']}/budgets/2025-13", json={"amount_cents": 100})
    assert response.status_code == 422
    assert response.json()["code"] == "INVALID_MONTH"


def test_delete_category_removes_its_transactions(client):
    food = create_category(client, "Food")
    rent = create_category(client, "Rent")
    create_transaction(client, food["id"], 5000)
    kept = create_transaction(client, rent["id"], 90000)

    response = client.delete(f"/api/categories/{food['id']}")
    assert response.status_code == 204

    remaining = client.get("/api/transactions/").json()
    assert [t["id"] for t in remaining] == [kept["id"]]
    assert client.get(f"/api/categories/{food['id']}").status_code == 404


def test_guest_category_limit(guest_client):
    for i in range(5):
        create_category(guest_client, f"Category {i}")

    response = guest_client.post("/api/categories/", json={"name": "One too many"})
    assert response.status_code == 403
    body = response.json()
    assert body["code"] == "GUEST_LIMIT_REACHED"
    assert "5 categories" in body["message"]
    assert len(guest_client.get("/api/categories/").json()) == 5
