"""Tests for the notification listing and mark-read endpoints."""

import pytest


@pytest.fixture
def with_order(client, user, create_product, place_order):
    """Places one order so the user and the admin each have a notification."""
    _, headers = user
    lamp = create_product(quantity=100)
    response = place_order(headers, {"productId": lamp["id"], "name": lamp["name"], "quantity": 1, "price": 25})
    assert response.status_code == 200
    return headers


def listing(client, headers, admin=False):
    path = "/api/order/admin/notifications" if admin else "/api/order/notifications"
    response = client.get(path, headers=headers)
    assert response.status_code == 200
    return response.json()


class TestListing:
    def test_user_sees_only_own_notifications(self, client, with_order, register_user):
        _, other = register_user(name="Bob")

        assert listing(client, with_order)["unreadCount"] == 1
        assert listing(client, other) == {"success": True, "notifications": [], "unreadCount": 0}

    def test_admin_feed(self, client, with_order, admin_headers):
        feed = listing(client, admin_headers, admin=True)

        assert feed["unreadCount"] == 1
        [row] = feed["notifications"]
        assert row["title"] == "New Order"
        assert row["isAdmin"] is True
        assert row["actionUrl"].startswith("/admin/orders/")

    def test_admin_feed_requires_admin(self, client, with_order):
        response = client.get("/api/order/admin/notifications", headers=with_order)
        assert response.status_code == 403

    def test_limit(self, client, user, create_product, place_order):
        _, headers = user
        lamp = create_product(quantity=100)
        for _ in range(3):
            place_order(headers, {"productId": lamp["id"], "name": lamp["name"], "quantity": 1, "price": 25})

        response = client.get("/api/order/notifications", params={"limit": 2}, headers=headers)

        assert len(response.json()["notifications"]) == 2
        assert response.json()["unreadCount"] == 3


class TestMarkRead:
    def test_mark_one_read(self, client, with_order):
        [row] = listing(client, with_order)["notifications"]

        response = client.post(
            "/api/order/notifications/mark-read", json={"notificationId": row["id"]}, headers=with_order
        )

        assert response.status_code == 200
        feed = listing(client, with_order)
        assert feed["unreadCount"] == 0
        assert feed["notifications"][0]["isRead"] is True
        assert feed["notifications"][0]["readAt"] is not None

    def test_cannot_mark_someone_elses_notification(self, client, with_order, register_user):
        [row] = listing(client, with_order)["notifications"]
        _, other = register_user(name="Bob")

        response = client.post(
            "/api/order/notifications/mark-read", json={"notificationId": row["id"]}, headers=other
        )

        assert response.status_code == 404
        assert listing(client, with_order)["unreadCount"] == 1

    def test_mark_all_read_is_scoped_to_caller(self, client, with_order, admin_headers):
        response = client.post("/api/order/notifications/mark-all-read", headers=with_order)

        assert response.status_code == 200
        assert response.json()["updated"] == 1
        assert listing(client, with_order)["unreadCount"] == 0
        assert listing(client, admin_headers, admin=True)["unreadCount"] == 1

    def test_admin_mark_all_read(self, client, with_order, admin_headers):
        client.post("/api/order/notifications/mark-all-read", headers=admin_headers)
        assert listing(client, admin_headers, admin=True)["unreadCount"] == 0
