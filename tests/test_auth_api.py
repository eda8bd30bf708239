"""Tests for the /api/user endpoints."""

ACCOUNT = {"name": "Alice", "email": "Alice@Example.com", "password": "password123", "phone": "555-0100"}


class TestRegistration:
    def test_register(self, client):
        response = client.post("/api/user/register", json=ACCOUNT)

        assert response.status_code == 201
        user = response.json()
        assert user["name"] == "Alice"
        assert user["email"] == "alice@example.com"
        assert user["isActive"] is True
        assert "password" not in user and "hashedPassword" not in user

    def test_duplicate_email(self, client):
        client.post("/api/user/register", json=ACCOUNT)
        response = client.post("/api/user/register", json={**ACCOUNT, "email": "alice@example.com"})
        assert response.status_code == 409
        assert response.json()["message"] == "Email already registered"

    def test_short_password(self, client):
        response = client.post("/api/user/register", json={**ACCOUNT, "password": "short"})
        assert response.status_code == 422


class TestLogin:
    def test_login_and_me(self, client):
        client.post("/api/user/register", json=ACCOUNT)

        login = client.post("/api/user/login", json={"email": "alice@example.com", "password": "password123"})
        assert login.status_code == 200
        token = login.json()["access_token"]

        me = client.get("/api/user/me", headers={"Authorization": f"Bearer {token}"})
        assert me.status_code == 200
        assert me.json()["phone"] == "555-0100"

    def test_wrong_password(self, client):
        client.post("/api/user/register", json=ACCOUNT)
        response = client.post("/api/user/login", json={"email": "alice@example.com", "password": "nope-nope"})
        assert response.status_code == 401
        assert response.json()["success"] is False

    def test_garbage_token(self, client):
        response = client.get("/api/user/me", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401


class TestAdminLogin:
    def test_admin_login(self, client):
        response = client.post("/api/user/admin", json={"email": "admin@example.com", "password": "admin-pass"})
        assert response.status_code == 200
        assert response.json()["token_type"] == "bearer"

    def test_admin_login_rejects_bad_password(self, client):
        response = client.post("/api/user/admin", json={"email": "admin@example.com", "password": "guess"})
        assert response.status_code == 401

    def test_admin_has_no_profile(self, client, admin_headers):
        assert client.get("/api/user/me", headers=admin_headers).status_code == 403


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "running"


def test_metrics_endpoint(client):
    client.get("/api/product/")
    response = client.get("/metrics")
    assert response.status_code == 200
    assert 'handler="/api/product/"' in response.text
    assert "ecomm_orders_placed_total" in response.text
