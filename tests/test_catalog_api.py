"""Tests for the /api/product and /api/deal endpoints."""


class TestProducts:
    def test_create_requires_admin(self, client, user):
        _, headers = user
        body = {"name": "Desk Lamp", "price": 25}

        assert client.post("/api/product/", json=body).status_code == 401
        assert client.post("/api/product/", json=body, headers=headers).status_code == 403

    def test_create_and_get(self, client, create_product):
        created = create_product(name="Desk Lamp", quantity=4, discountPrice=20.0)

        response = client.get(f"/api/product/{created['id']}")

        assert response.status_code == 200
        product = response.json()
        assert product["name"] == "Desk Lamp"
        assert product["quantity"] == 4
        assert product["discountPrice"] == 20.0
        assert product["totalSales"] == 0
        assert product["status"] == "published"

    def test_negative_stock_is_rejected(self, client, admin_headers):
        response = client.post(
            "/api/product/", json={"name": "Desk Lamp", "price": 25, "quantity": -1}, headers=admin_headers
        )
        assert response.status_code == 422
        assert response.json()["success"] is False

    def test_list_defaults_to_published(self, client, create_product):
        create_product(name="Desk Lamp")
        create_product(name="Prototype", status="draft")

        published = [p["name"] for p in client.get("/api/product/").json()]
        everything = {p["name"] for p in client.get("/api/product/", params={"status": "all"}).json()}

        assert published == ["Desk Lamp"]
        assert everything == {"Desk Lamp", "Prototype"}

    def test_search_by_word(self, client, create_product):
        create_product(name="Desk Lamp")
        create_product(name="Office Chair")

        names = [p["name"] for p in client.get("/api/product/", params={"query": "lamp"}).json()]

        assert names == ["Desk Lamp"]

    def test_search_matches_any_whole_word(self, client, create_product):
        create_product(name="Desk Lamp")
        create_product(name="Office Chair")
        create_product(name="Lampshade")

        names = [p["name"] for p in client.get("/api/product/", params={"query": "CHAIR lamp"}).json()]

        assert sorted(names) == ["Desk Lamp", "Office Chair"]

    def test_partial_update(self, client, admin_headers, create_product):
        created = create_product(name="Desk Lamp", quantity=4)

        response = client.patch(
            f"/api/product/{created['id']}", json={"quantity": 12, "status": "archived"}, headers=admin_headers
        )

        assert response.status_code == 200
        assert response.json()["quantity"] == 12
        assert response.json()["status"] == "archived"
        assert response.json()["name"] == "Desk Lamp"

    def test_missing_product(self, client):
        response = client.get("/api/product/999")
        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Product not found", "error": "NotFound"}


class TestDeals:
    def test_create_and_list(self, client, admin_headers, create_product):
        lamp = create_product(name="Desk Lamp")
        body = {
            "name": "Study Bundle",
            "dealPrice": 40,
            "originalTotal": 55,
            "status": "published",
            "products": [{"productId": lamp["id"], "name": "Desk Lamp", "quantity": 1}],
        }

        created = client.post("/api/deal/", json=body, headers=admin_headers)
        listed = client.get("/api/deal/")

        assert created.status_code == 201
        deal = created.json()
        assert deal["products"] == [{"productId": lamp["id"], "name": "Desk Lamp", "quantity": 1}]
        assert [d["name"] for d in listed.json()] == ["Study Bundle"]
        assert client.get(f"/api/deal/{deal['id']}").json()["dealPrice"] == 40

    def test_missing_deal(self, client):
        assert client.get("/api/deal/123").status_code == 404
