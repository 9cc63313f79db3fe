"""HTTP tests for application-wide behaviour: health, errors and request headers."""

import pytest


class TestRootAndHealth:
    @pytest.mark.fast
    def test_root(self, client):
        body = client.get("/").json()
        assert body["name"] == "Storefront API"
        assert "version" in body

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["database"] == "up"

    def test_health_reports_unavailable_database(self, client, monkeypatch):
        from storefront.domain import storefront

        monkeypatch.setattr(type(storefront.providers["default"]), "is_alive", lambda self: False)

        response = client.get("/health")

        assert response.status_code == 503
        assert response.json()["status"] == "unavailable"


class TestRequestHeaders:
    def test_request_id_is_echoed(self, client):
        response = client.get("/", headers={"X-Request-Id": "req-123"})
        assert response.headers["X-Request-Id"] == "req-123"

    def test_request_id_is_generated(self, client):
        assert client.get("/").headers["X-Request-Id"]

    @pytest.mark.parametrize("header", ["not-a-uuid", "00000000-0000-0000-0000-000000000000"])
    def test_unresolvable_user_header_is_ignored(self, client, header):
        response = client.post(
            "/api/categories", json={"name": "Anonymous Goods"}, headers={"X-User-Id": header}
        )
        assert response.status_code == 201


class TestErrorBody:
    def test_not_found_shape(self, client):
        response = client.get("/api/categories/00000000-0000-0000-0000-000000000001")

        assert response.status_code == 404
        body = response.json()
        assert set(body) == {"error", "message", "errors"}
        assert body["error"] == "not_found"
        assert body["errors"]["category_id"][0] in body["message"]

    def test_invalid_uuid_is_400(self, client):
        response = client.get("/api/products/12345")

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    def test_page_size_bounds(self, client):
        assert client.get("/api/products", params={"size": 0}).status_code == 400
        assert client.get("/api/products", params={"page": -1}).status_code == 400
