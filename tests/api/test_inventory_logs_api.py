"""API tests for the inventory log endpoint, actor headers and error mapping."""

from httpx import AsyncClient


async def _seed(client: AsyncClient) -> int:
    response = await client.post(
        "/api/products", json={"code": "SKU-1", "name": "Cable", "stock": 6}
    )
    product_id = response.json()["product"]["id"]
    await client.post("/api/sales", json={"lines": [{"product_id": product_id, "quantity": 1}]})
    return product_id


class TestInventoryLogsAPI:
    async def test_newest_first(self, client: AsyncClient):
        product_id = await _seed(client)

        response = await client.get("/api/inventory-logs", params={"product_id": product_id})

        assert response.status_code == 200
        body = response.json()
        assert [e["action"] for e in body["entries"]] == ["sale.create", "product.create"]
        assert body["total"] == 2

    async def test_filter_by_action_and_actor(self, client: AsyncClient):
        await _seed(client)
        body = (
            await client.get(
                "/api/inventory-logs", params={"action": "sale.create", "actor_id": 2}
            )
        ).json()
        assert body["total"] == 1
        assert body["entries"][0]["actor_id"] == 2

    async def test_page_size_capped(self, client: AsyncClient):
        response = await client.get("/api/inventory-logs", params={"limit": 1000})
        assert response.status_code == 400
        assert response.json()["detail"]["field"] == "limit"

    async def test_inverted_date_range(self, client: AsyncClient):
        response = await client.get(
            "/api/inventory-logs",
            params={"date_from": "2024-02-01T00:00:00Z", "date_to": "2024-01-01T00:00:00Z"},
        )
        assert response.status_code == 400

    async def test_mixed_timezone_range(self, client: AsyncClient):
        await _seed(client)

        empty = await client.get(
            "/api/inventory-logs",
            params={"date_from": "2024-01-01T00:00:00", "date_to": "2024-01-02T00:00:00Z"},
        )
        wide = await client.get(
            "/api/inventory-logs",
            params={"date_from": "2000-01-01T00:00:00Z", "date_to": "2100-01-01T00:00:00"},
        )

        assert empty.status_code == 200
        assert empty.json()["total"] == 0
        assert wide.status_code == 200
        assert wide.json()["total"] == 2

    async def test_mixed_timezone_inverted_range(self, client: AsyncClient):
        response = await client.get(
            "/api/inventory-logs",
            params={"date_from": "2024-01-02T00:00:00", "date_to": "2024-01-01T00:00:00Z"},
        )
        assert response.status_code == 400

    async def test_unknown_action(self, client: AsyncClient):
        response = await client.get("/api/inventory-logs", params={"action": "sale.refund"})
        assert response.status_code == 422
        assert response.json()["error_code"] == "VALIDATION_ERROR"


class TestActorHeaders:
    async def test_missing_actor(self, client: AsyncClient):
        response = await client.get("/api/products", headers={"X-Actor-Id": ""})
        assert response.status_code == 401
        assert response.json()["error_code"] == "UNAUTHORIZED"

    async def test_non_integer_actor(self, client: AsyncClient):
        response = await client.get("/api/products", headers={"X-Actor-Id": "alice"})
        assert response.status_code == 401

    async def test_unknown_role(self, client: AsyncClient):
        response = await client.get("/api/products", headers={"X-Actor-Role": "owner"})
        assert response.status_code == 403
        assert response.json()["error_code"] == "FORBIDDEN"

    async def test_actor_recorded_on_log(self, client: AsyncClient):
        await client.post(
            "/api/products",
            json={"code": "SKU-9", "name": "Plug"},
            headers={"X-Actor-Id": "42", "X-Actor-Name": "Dana"},
        )
        body = (await client.get("/api/inventory-logs", params={"actor_id": 42})).json()
        assert body["total"] == 1


class TestErrorMapping:
    async def test_malformed_body(self, client: AsyncClient):
        response = await client.post("/api/sales", json={"lines": "nope"})
        assert response.status_code == 422
        body = response.json()
        assert body["error_code"] == "VALIDATION_ERROR"
        assert "lines" in body["detail"]

    async def test_not_found_has_hint_and_path(self, client: AsyncClient):
        response = await client.get("/api/sales/404")
        assert response.status_code == 404
        body = response.json()
        assert body["error_code"] == "SALE_NOT_FOUND"
        assert body["path"] == "/api/sales/404"
        assert body["hint"]

    async def test_storage_failure_maps_to_database_error(self, client: AsyncClient, monkeypatch):
        from stockledger.application.use_cases.ledger_queries import LedgerQueries
        from stockledger.core.exceptions import DatabaseError

        async def locked(self, log_filter):
            raise DatabaseError("begin", "database is locked")

        monkeypatch.setattr(LedgerQueries, "query_inventory_log", locked)

        response = await client.get("/api/inventory-logs")

        assert response.status_code == 500
        body = response.json()
        assert body["error_code"] == "DATABASE_ERROR"
        assert body["hint"] == "A database operation failed. Check server logs."
