"""Pytest fixtures for storefront tests.

Every test gets a fresh in-memory SQLite database behind the real FastAPI app.
"""

import os

# Must be set before anything under shared/ is imported
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("ADMIN_EMAIL", "admin@example.com")
os.environ.setdefault("ADMIN_PASSWORD", "admin-pass")
os.environ.setdefault("TRACING_ENABLED", "false")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

import itertools

import pytest
from fastapi.testclient import TestClient

from main import app
from shared.config.database import drop_all, engine

ADMIN_CREDENTIALS = {"email": "admin@example.com", "password": "admin-pass"}

_emails = itertools.count(1)


@pytest.fixture
def client():
    """Test client; the schema is created on startup and dropped afterwards."""
    with TestClient(app) as c:
        yield c
        c.portal.call(drop_all)
        c.portal.call(engine.dispose)


@pytest.fixture
def admin_headers(client):
    response = client.post("/api/user/admin", json=ADMIN_CREDENTIALS)
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def register_user(client):
    """Register an account and return ``(user_id, auth_headers)``."""

    def _register(name="Alice", phone="555-0100", email=None):
        email = email or f"user{next(_emails)}@example.com"
        created = client.post(
            "/api/user/register",
            json={"name": name, "email": email, "password": "password123", "phone": phone},
        )
        assert created.status_code == 201, created.text
        login = client.post("/api/user/login", json={"email": email, "password": "password123"})
        assert login.status_code == 200, login.text
        token = login.json()["access_token"]
        return created.json()["id"], {"Authorization": f"Bearer {token}"}

    return _register


@pytest.fixture
def user(register_user):
    return register_user()


@pytest.fixture
def create_product(client, admin_headers):
    """Create a catalog product as the admin and return its JSON."""

    def _create(name="Desk Lamp", quantity=5, status="published", price=25.0, **extra):
        body = {"name": name, "price": price, "quantity": quantity, "status": status, **extra}
        response = client.post("/api/product/", json=body, headers=admin_headers)
        assert response.status_code == 201, response.text
        return response.json()

    return _create


@pytest.fixture
def get_product(client):
    def _get(product_id):
        response = client.get(f"/api/product/{product_id}")
        assert response.status_code == 200
        return response.json()

    return _get


ADDRESS = {"street": "1 Main St", "city": "Springfield", "zipcode": "12345", "country": "US"}


def order_body(*lines, amount=100.0, address=ADDRESS, **extra):
    return {"items": list(lines), "amount": amount, "address": address, **extra}


@pytest.fixture
def place_order(client):
    """POST /api/order/place for the given headers; returns the raw response."""

    def _place(headers, *lines, **extra):
        return client.post("/api/order/place", json=order_body(*lines, **extra), headers=headers)

    return _place
