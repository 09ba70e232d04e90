# tests/conftest.py
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from rental_quotes.core.config import Settings
from rental_quotes.main import create_app
from rental_quotes.models import User

API = "/api/v1"
DEFAULT_PASSWORD = "secret123"


# -----------------------------
# App & database
# -----------------------------
@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "test.db"


@pytest.fixture
def settings(db_path):
    return Settings(
        jwt_secret="test-secret",
        database_url=f"sqlite+aiosqlite:///{db_path}",
        environment="test",
    )


@pytest.fixture
def client(settings):
    app = create_app(settings)
    # entering the context runs startup, which creates the tables
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def sync_engine(db_path, client):
    """Synchronous engine on the same SQLite file, for seeding and inspection."""
    engine = create_engine(f"sqlite:///{db_path}")
    yield engine
    engine.dispose()


@pytest.fixture
def seed_user(sync_engine):
    def _seed(username, password=DEFAULT_PASSWORD, role="user", is_active=True):
        with Session(sync_engine) as session:
            user = User(username=username, password_hash=password, role=role, is_active=is_active)
            session.add(user)
            session.commit()
            return user.id
    return _seed


# -----------------------------
# Auth helpers
# -----------------------------
def login(client, username, password=DEFAULT_PASSWORD):
    response = client.post(f"{API}/auth/login", json={"username": username, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['data']['token']}"}


@pytest.fixture
def admin_headers(client, seed_user):
    seed_user("admin", role="admin")
    return login(client, "admin")


@pytest.fixture
def user_headers(client, seed_user):
    seed_user("staff", role="user")
    return login(client, "staff")


# -----------------------------
# Catalog helpers
# -----------------------------
def create_category(client, headers, name="Audio", **extra):
    response = client.post(f"{API}/categories/", json={"name": name, **extra}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


def create_equipment(client, headers, category_id, name="Speaker", price="150.00", quantity=10, **extra):
    payload = {
        "name": name,
        "daily_rental_price": price,
        "quantity": quantity,
        "category_id": category_id,
        **extra,
    }
    response = client.post(f"{API}/equipment/", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]
