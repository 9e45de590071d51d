import pytest
from fastapi.testclient import TestClient

from spendwise.config import AppConfig, set_config
from spendwise.database import close_database, get_session, open_database
from spendwise.main import app


@pytest.fixture
def config():
    config = AppConfig()
    set_config(config)
    yield config
    set_config(None)


@pytest.fixture
def database(tmp_path, config):
    open_database(tmp_path / "spendwise.db")
    yield tmp_path / "spendwise.db"
    close_database()


@pytest.fixture
def db(database):
    session = get_session()
    yield session
    session.close()


# Not entered as a context manager, so the lifespan does not reopen the
# configured database over the temporary one.
@pytest.fixture
def client(database):
    return TestClient(app, headers={"X-User-Id": "user-1"})


@pytest.fixture
def guest_client(database):
    return TestClient(app, headers={"X-User-Id": "guest-1", "X-User-Role": "guest"})


def create_category(client, name="Food", budget_cents=20000, **extra):
    response = client.post("/api/categories/", json={"name": name, "budget_cents": budget_cents, **extra})
    assert response.status_code == 201, response.text
    return response.json()


def create_transaction(client, category_id, amount_cents, posted_date="2025-05-10", **extra):
    response = client.post("/api/transactions/", json={
        "category_id": category_id,
        "amount_cents": amount_cents,
        "posted_date": posted_date,
        **extra,
    })
    assert response.status_code == 201, response.text
    return response.json()
