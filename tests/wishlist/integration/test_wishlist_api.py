"""HTTP tests for the wishlist endpoints."""

import pytest


@pytest.fixture()
def user_id(client):
    return client.post("/api/auth/register", json={"email": "wisher@example.com", "password": "s3cret-pass"}).json()[
        "userId"
    ]


def _product(client, sku, stock=3):
    payload = {"sku": sku, "name": f"Product {sku}", "price": 9.99, "stockQuantity": stock}
    return client.post("/api/products", json=payload).json()["id"]


def _wish(client, user_id, product_id):
    return client.post("/api/wishlist", json={"userId": user_id, "productId": product_id})


class TestWishlistEndpoints:
    def test_add_and_list(self, client, user_id):
        product_id = _product(client, "BOOK-1")

        response = _wish(client, user_id, product_id)

        assert response.status_code == 201
        assert response.json()["productName"] == "Product BOOK-1"
        assert response.json()["price"] == 9.99
        listed = client.get(f"/api/wishlist/user/{user_id}").json()
        assert [entry["productId"] for entry in listed] == [product_id]
        assert client.get(f"/api/wishlist/user/{user_id}/count").json()["count"] == 1

    def test_duplicate_is_409(self, client, user_id):
        product_id = _product(client, "BOOK-1")
        _wish(client, user_id, product_id)

        assert _wish(client, user_id, product_id).status_code == 409

    def test_check_and_remove_product(self, client, user_id):
        product_id = _product(client, "BOOK-1")
        _wish(client, user_id, product_id)
        url = f"/api/wishlist/user/{user_id}/product/{product_id}"

        assert client.get(url).json()["inWishlist"] is True
        assert client.delete(url).status_code == 204
        assert client.get(url).json()["inWishlist"] is False

    def test_move_to_cart(self, client, user_id):
        product_id = _product(client, "BOOK-1")
        item_id = _wish(client, user_id, product_id).json()["id"]

        cart = client.post(f"/api/wishlist/{item_id}/move-to-cart").json()

        assert cart["totalItems"] == 1
        assert client.get(f"/api/wishlist/user/{user_id}/count").json()["count"] == 0

    def test_paged_and_clear(self, client, user_id):
        for sku in ("A-1", "B-1", "C-1"):
            _wish(client, user_id, _product(client, sku))

        page = client.get(f"/api/wishlist/user/{user_id}/paged", params={"size": 2}).json()
        assert page["totalElements"] == 3
        assert len(page["content"]) == 2

        assert client.delete(f"/api/wishlist/user/{user_id}").json() == {"removed": 3}
