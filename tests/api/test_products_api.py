"""API tests for product endpoints."""

from decimal import Decimal

from httpx import AsyncClient


async def _register(client: AsyncClient, code: str = "SKU-1", stock: int = 5) -> dict:
    response = await client.post(
        "/api/products",
        json={"code": code, "name": f"Product {code}", "price": "4.25", "stock": stock},
    )
    assert response.status_code == 201, response.text
    return response.json()


class TestProductsAPI:
    async def test_register(self, client: AsyncClient):
        body = await _register(client)
        assert body["product"]["code"] == "SKU-1"
        assert Decimal(body["product"]["price"]) == Decimal("4.25")
        assert body["log_entry"]["action"] == "product.create"
        assert body["log_entry"]["after_qty"] == 5

    async def test_duplicate_code_conflict(self, client: AsyncClient):
        await _register(client)
        response = await client.post("/api/products", json={"code": "SKU-1", "name": "Again"})
        assert response.status_code == 409
        assert response.json()["error_code"] == "DUPLICATE_PRODUCT_CODE"

    async def test_get_and_list(self, client: AsyncClient):
        created = await _register(client)
        product_id = created["product"]["id"]

        response = await client.get(f"/api/products/{product_id}")
        assert response.status_code == 200
        assert response.json()["stock"] == 5

        listing = (await client.get("/api/products")).json()
        assert listing["total"] == 1
        assert listing["has_more"] is False

    async def test_get_missing(self, client: AsyncClient):
        response = await client.get("/api/products/404")
        assert response.status_code == 404
        assert response.json()["error_code"] == "PRODUCT_NOT_FOUND"

    async def test_adjust(self, client: AsyncClient):
        product_id = (await _register(client))["product"]["id"]
        response = await client.post(
            f"/api/products/{product_id}/adjust", json={"quantity": 2, "note": "count"}
        )
        assert response.status_code == 200
        body = response.json()
        assert body["product"]["stock"] == 2
        assert body["log_entry"]["delta"] == -3

    async def test_adjust_negative(self, client: AsyncClient):
        product_id = (await _register(client))["product"]["id"]
        response = await client.post(f"/api/products/{product_id}/adjust", json={"quantity": -1})
        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    async def test_archive_and_restore(self, client: AsyncClient, admin_headers):
        product_id = (await _register(client))["product"]["id"]

        archived = await client.delete(f"/api/products/{product_id}")
        assert archived.status_code == 200
        assert archived.json()["product"]["is_deleted"] is True

        again = await client.delete(f"/api/products/{product_id}")
        assert again.status_code == 409
        assert again.json()["error_code"] == "PRODUCT_SOFT_DELETED"

        forbidden = await client.post(f"/api/products/{product_id}/restore")
        assert forbidden.status_code == 403

        restored = await client.post(f"/api/products/{product_id}/restore", headers=admin_headers)
        assert restored.status_code == 200
        assert restored.json()["product"]["is_deleted"] is False
