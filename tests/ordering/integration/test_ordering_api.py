"""HTTP tests for the cart and order endpoints."""

from uuid import uuid4

import pytest


@pytest.fixture()
def user_id(client):
    return client.post("/api/auth/register", json={"email": "buyer@example.com", "password": "s3cret-pass"}).json()[
        "userId"
    ]


def _product(client, sku, price=10.0, stock=10):
    payload = {"sku": sku, "name": f"Product {sku}", "price": price, "stockQuantity": stock}
    return client.post("/api/products", json=payload).json()["id"]


def _add(client, user_id, product_id, quantity=1):
    return client.post(f"/api/cart/user/{user_id}/items", json={"productId": product_id, "quantity": quantity})


class TestCartEndpoints:
    def test_empty_cart(self, client, user_id):
        body = client.get(f"/api/cart/user/{user_id}").json()

        assert body["items"] == []
        assert body["totalItems"] == 0
        assert body["totalValue"] == 0.0

    def test_add_same_product_twice(self, client, user_id):
        product_id = _product(client, "MUG-1", price=2.5)
        _add(client, user_id, product_id, 2)

        body = _add(client, user_id, product_id, 1).json()

        assert len(body["items"]) == 1
        assert body["items"][0]["quantity"] == 3
        assert body["items"][0]["subtotal"] == 7.5
        assert body["totalValue"] == 7.5

    def test_count_endpoints_agree_with_detail(self, client, user_id):
        _add(client, user_id, _product(client, "A-1"), 2)
        _add(client, user_id, _product(client, "B-1"), 3)

        detail = client.get(f"/api/cart/user/{user_id}").json()["totalItems"]
        by_path = client.get(f"/api/cart/user/{user_id}/count").json()["count"]
        by_query = client.get("/api/cart/count", params={"userId": user_id}).json()["count"]

        assert detail == by_path == by_query == 5

    @pytest.mark.parametrize("quantity", [0, -1])
    def test_non_positive_quantity_update(self, client, user_id, quantity):
        item_id = _add(client, user_id, _product(client, "MUG-1"), 2).json()["items"][0]["id"]

        response = client.put(f"/api/cart/user/{user_id}/items/{item_id}", params={"quantity": quantity})

        assert response.status_code == 400
        assert response.json()["errors"] == {"quantity": ["Quantity must be at least 1"]}
        assert client.get(f"/api/cart/user/{user_id}").json()["items"][0]["quantity"] == 2

    def test_update_remove_and_clear(self, client, user_id):
        item_id = _add(client, user_id, _product(client, "MUG-1"), 1).json()["items"][0]["id"]
        _add(client, user_id, _product(client, "MUG-2"), 1)

        updated = client.put(f"/api/cart/user/{user_id}/items/{item_id}", params={"quantity": 4}).json()
        assert updated["totalItems"] == 5

        removed = client.delete(f"/api/cart/user/{user_id}/items/{item_id}").json()
        assert removed["totalItems"] == 1

        cleared = client.delete(f"/api/cart/user/{user_id}").json()
        assert cleared["items"] == []
        assert cleared["id"] == removed["id"]

    def test_over_stock_is_400(self, client, user_id):
        response = _add(client, user_id, _product(client, "MUG-1", stock=1), 2)

        assert response.status_code == 400
        assert response.json()["errors"] == {"quantity": ["Insufficient stock. Available: 1"]}


class TestOrderEndpoints:
    def test_place_order(self, client, user_id):
        mug = _product(client, "MUG-1", price=4.0, stock=5)

        response = client.post(
            "/api/orders",
            json={"userId": user_id, "items": [{"productId": mug, "quantity": 2}], "shippingCost": 3.5},
        )

        assert response.status_code == 201
        order = response.json()
        assert order["status"] == "pending"
        assert order["paymentStatus"] == "pending"
        assert order["subtotal"] == 8.0
        assert order["total"] == 11.5
        assert order["itemCount"] == 2
        assert order["orderNumber"].startswith("ORD-")
        assert client.get(f"/api/products/{mug}").json()["stockQuantity"] == 3

    def test_insufficient_stock_leaves_no_trace(self, client, user_id):
        plenty = _product(client, "A-1", stock=10)
        scarce = _product(client, "B-1", stock=1)

        response = client.post(
            "/api/orders",
            json={
                "userId": user_id,
                "items": [{"productId": plenty, "quantity": 2}, {"productId": scarce, "quantity": 5}],
            },
        )

        assert response.status_code == 400
        assert client.get(f"/api/products/{plenty}").json()["stockQuantity"] == 10
        assert client.get("/api/orders/count").json()["count"] == 0

    def test_place_from_cart(self, client, user_id):
        _add(client, user_id, _product(client, "MUG-1", price=5.0), 2)

        order = client.post("/api/orders", json={"userId": user_id}).json()

        assert order["total"] == 10.0
        assert client.get(f"/api/cart/user/{user_id}/count").json()["count"] == 0

    def test_lifecycle(self, client, user_id):
        product_id = _product(client, "MUG-1", stock=3)
        order = client.post("/api/orders", json={"userId": user_id, "items": [{"productId": product_id, "quantity": 1}]})
        order_id = order.json()["id"]

        paid = client.patch(f"/api/orders/{order_id}/payment-status", params={"paymentStatus": "paid"}).json()
        assert paid["status"] == "confirmed"

        assert client.patch(f"/api/orders/{order_id}/status", params={"status": "processing"}).status_code == 200
        assert client.get("/api/orders/count/status/processing").json()["count"] == 1

        cancelled = client.post(f"/api/orders/{order_id}/cancel").json()
        assert cancelled["status"] == "cancelled"
        assert cancelled["cancelledAt"] is not None
        assert client.get(f"/api/products/{product_id}").json()["stockQuantity"] == 3

    def test_invalid_transition_is_400(self, client, user_id):
        product_id = _product(client, "MUG-1")
        order_id = client.post(
            "/api/orders", json={"userId": user_id, "items": [{"productId": product_id, "quantity": 1}]}
        ).json()["id"]

        response = client.patch(f"/api/orders/{order_id}/status", params={"status": "delivered"})

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    def test_queries(self, client, user_id):
        product_id = _product(client, "MUG-1")
        order = client.post(
            "/api/orders", json={"userId": user_id, "items": [{"productId": product_id, "quantity": 1}]}
        ).json()

        assert client.get(f"/api/orders/number/{order['orderNumber']}").json()["id"] == order["id"]
        assert client.get(f"/api/orders/user/{user_id}").json()["totalElements"] == 1
        assert client.get("/api/orders/status/pending").json()["totalElements"] == 1
        assert client.get(f"/api/orders/{uuid4()}").status_code == 404
