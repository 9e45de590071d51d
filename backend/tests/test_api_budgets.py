from conftest import create_category, create_transaction


def test_month_without_budget_is_null(client):
    response = client.get("/api/budgets/2025/5")
    assert response.status_code == 200
    assert response.json() is None


def test_set_and_get_month_budget(client):
    food = create_category(client, "Food", 20000)
    rent = create_category(client, "Rent", 90000)

    response = client.put("/api/budgets/2025/5", json={
        "income_cents": 350000,
        "categories": {str(food["id"]): 15000},
    })
    assert response.status_code == 200
    body = response.json()
    assert body["month"] == "2025-05"
    assert body["income_cents"] == 350000
    assert body["categories"] == {str(food["id"]): 15000, str(rent["id"]): 90000}

    assert body["income_is_explicit"] is True
    assert client.get("/api/budgets/2025/5").json() == body
    assert client.get("/api/budgets/2025/4").json() is None


def test_month_with_only_overrides_reports_default_income(client):
    food = create_category(client, "Food", 20000)
    client.put("/api/budgets/defaults", json={
        "default_income_cents": 300000,
        "default_category_budgets": {},
    })
    client.put(f"/api/categories/{food['id']}/budgets/2025-03", json={"amount_cents": 15000})

    body = client.get("/api/budgets/2025/3").json()
    assert body["income_cents"] == 300000
    assert body["income_is_explicit"] is False
    assert body["categories"] == {str(food["id"]): 15000}


def test_month_budget_unknown_category(client):
    response = client.put("/api/budgets/2025/5", json={"income_cents": 1000, "categories": {"999": 100}})
    assert response.status_code == 404
    assert response.json()["code"] == "NOT_FOUND"


def test_delete_month_budget_restores_defaults(client):
    food = create_category(client)
    client.put("/api/budgets/2025/5", json={"income_cents": 1000, "categories": {str(food["id"]): 100}})

    response = client.delete("/api/budgets/2025/5")
    assert response.status_code == 204
    assert client.get("/api/budgets/2025/5").json() is None
    assert client.get(f"/api/categories/{food['id']}").json()["monthly_budgets"] == {}


def test_invalid_month(client):
    response = client.get("/api/budgets/2025/13")
    assert response.status_code == 422
    assert response.json()["code"] == "INVALID_MONTH"


def test_defaults(client):
    food = create_category(client, "Food", 20000)

    response = client.get("/api/budgets/defaults")
    assert response.status_code == 200
    assert response.json() == {
        "default_income_cents": 0,
        "default_category_budgets": {str(food["id"]): 20000},
    }

    response = client.put("/api/budgets/defaults", json={
        "default_income_cents": 300000,
        "default_category_budgets": {str(food["id"]): 25000},
    })
    assert response.status_code == 200
    assert response.json()["default_income_cents"] == 300000
    assert client.get(f"/api/categories/{food['id']}").json()["budget_cents"] == 25000


def test_month_summary(client):
    client.put("/api/budgets/defaults", json={"default_income_cents": 300000})
    food = create_category(client, "Food", 20000)
    create_transaction(client, food["id"], 5000, posted_date="2025-05-02")
    create_transaction(client, food["id"], 3000, posted_date="2025-05-20")
    create_transaction(client, food["id"], 9900, posted_date="2025-04-20")

    response = client.get("/api/summary/", params={"month": "2025-05"})
    assert response.status_code == 200
    summary = response.json()
    assert summary["income"] == 3000
    assert summary["using_default_income"] is True
    assert summary["total_spent"] == 80
    assert summary["remaining"] == 2920
    assert summary["transaction_count"] == 2

    category = summary["categories"][0]
    assert category["spent"] == 80
    assert category["remaining"] == 120
    assert category["percentage"] == 40


def test_month_summary_uses_month_income(client):
    client.put("/api/budgets/defaults", json={"default_income_cents": 300000})
    client.put("/api/budgets/2025/2", json={"income_cents": 350000})

    feb = client.get("/api/summary/", params={"month": "2025-02"}).json()
    assert feb["income"] == 3500
    assert feb["income_is_override"] is True
    assert feb["using_default_income"] is False

    jan = client.get("/api/summary/", params={"month": "2025-01"}).json()
    assert jan["income"] == 3000
    assert jan["using_default_income"] is True


def test_month_summary_rejects_bad_month(client):
    response = client.get("/api/summary/", params={"month": "May 2025"})
    assert response.status_code == 422
    assert response.json()["code"] == "INVALID_MONTH"


def test_month_window(client):
    client.put("/api/budgets/2025/1", json={"income_cents": 100000})

    response = client.get("/api/summary/months", params={"anchor": "2025-05", "active": "2024-01"})
    assert response.status_code == 200
    window = response.json()
    assert window["months"] == ["2025-05", "2025-04", "2025-03", "2025-02", "2025-01"]
    assert window["earliest_month"] == "2025-01"
    assert window["active_month"] == "2025-05"

    response = client.get("/api/summary/months", params={"anchor": "2025-05", "active": "2025-03"})
    assert response.json()["active_month"] == "2025-03"
