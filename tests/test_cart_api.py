"""Tests for the /api/cart endpoints."""


def get_cart(client, headers):
    response = client.get("/api/cart/", headers=headers)
    assert response.status_code == 200
    return response.json()["cartData"]


class TestCartLines:
    def test_empty_cart(self, client, user):
        _, headers = user
        assert get_cart(client, headers) == {"products": {}, "deals": {}}

    def test_add_increments_existing_line(self, client, user):
        _, headers = user
        client.post("/api/cart/add", json={"itemId": "1", "quantity": 2}, headers=headers)
        response = client.post("/api/cart/add", json={"itemId": "1"}, headers=headers)

        assert response.status_code == 200
        assert response.json()["cartData"]["products"] == {"1": 3}

    def test_products_and_deals_are_separate(self, client, user):
        _, headers = user
        client.post("/api/cart/add", json={"itemId": "5"}, headers=headers)
        client.post("/api/cart/add", json={"itemId": "5", "itemType": "deal"}, headers=headers)

        assert get_cart(client, headers) == {"products": {"5": 1}, "deals": {"5": 1}}

    def test_update_sets_quantity_and_zero_removes(self, client, user):
        _, headers = user
        client.post("/api/cart/add", json={"itemId": "1", "quantity": 2}, headers=headers)
        client.post("/api/cart/add", json={"itemId": "2"}, headers=headers)

        client.post("/api/cart/update", json={"itemId": "1", "quantity": 7}, headers=headers)
        client.post("/api/cart/update", json={"itemId": "2", "quantity": 0}, headers=headers)

        assert get_cart(client, headers)["products"] == {"1": 7}

    def test_clear(self, client, user):
        _, headers = user
        client.post("/api/cart/add", json={"itemId": "1"}, headers=headers)

        response = client.delete("/api/cart/", headers=headers)

        assert response.status_code == 204
        assert get_cart(client, headers)["products"] == {}

    def test_carts_are_per_user(self, client, register_user):
        _, alice = register_user(name="Alice")
        _, bob = register_user(name="Bob")
        client.post("/api/cart/add", json={"itemId": "1"}, headers=alice)

        assert get_cart(client, bob)["products"] == {}

    def test_requires_login(self, client):
        assert client.get("/api/cart/").status_code == 401


class TestGuestMerge:
    def test_merge_sums_guest_into_server_cart(self, client, user):
        _, headers = user
        client.post("/api/cart/add", json={"itemId": "a", "quantity": 3}, headers=headers)

        response = client.post(
            "/api/cart/merge",
            json={"products": {"a": 1, "b": 2}, "deals": {"d1": 1}},
            headers=headers,
        )

        assert response.status_code == 200
        expected = {"products": {"a": 4, "b": 2}, "deals": {"d1": 1}}
        assert response.json()["cartData"] == expected
        assert get_cart(client, headers) == expected
