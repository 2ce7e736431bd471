"""
Catalog Backend: HTTP API Tests
================================

What:  End-to-end tests through FastAPI routing, handlers and middleware.
How:   httpx.AsyncClient over ASGITransport; each request uses its own
       session on the per-test SQLite file. Test data is created through
       the API so every write is committed before the next request.
"""

import logging
from decimal import Decimal
from unittest.mock import AsyncMock, patch
from uuid import uuid4

import pytest


async def create_category(client, name="Tools", **extra):
    response = await client.post("/api/categories", json={"name": name, **extra})
    assert response.status_code == 201, response.text
    return response.json()


async def create_product(client, category_id, **overrides):
    payload = {
        "name": "Widget",
        "price": "9.99",
        "stock_quantity": 5,
        "category_id": category_id,
    }
    payload.update(overrides)
    response = await client.post("/api/products", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


class TestHealth:

    @pytest.mark.asyncio
    async def test_health(self, test_client):
        response = await test_client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"

    @pytest.mark.asyncio
    async def test_request_id_echoed(self, test_client):
        response = await test_client.get("/health", headers={"X-Request-ID": "abc-123"})
        assert response.headers["X-Request-ID"] == "abc-123"

    @pytest.mark.asyncio
    async def test_request_id_generated(self, test_client):
        response = await test_client.get("/health")
        assert response.headers["X-Request-ID"]


class TestProductEndpoints:

    @pytest.mark.asyncio
    async def test_create_product(self, test_client):
        category = await create_category(test_client)

        response = await test_client.post(
            "/api/products",
            json={"name": "Widget", "price": "9.99", "stock_quantity": 5, "category_id": category["id"]},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["name"] == "Widget"
        assert body["price"] == "9.99"
        assert body["stock_quantity"] == 5
        assert body["category_id"] == category["id"]
        assert body["description"] is None
        assert body["created_at"]
        assert body["updated_at"] is None
        assert "category" not in body
        assert response.headers["Location"] == f"/api/products/{body['id']}"

    @pytest.mark.asyncio
    async def test_create_invalid_reports_every_field(self, test_client):
        response = await test_client.post(
            "/api/products", json={"name": "", "price": 0, "category_id": str(uuid4())}
        )

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "validation_error"
        assert [e["field"] for e in body["details"]["errors"]] == ["name", "price"]

    @pytest.mark.asyncio
    async def test_oversized_stock_is_bad_request(self, test_client):
        category = await create_category(test_client)
        response = await test_client.post(
            "/api/products",
            json={"name": "W", "price": "1", "stock_quantity": 10**20, "category_id": category["id"]},
        )
        assert response.status_code == 400
        assert [e["field"] for e in response.json()["details"]["errors"]] == ["stock_quantity"]

    @pytest.mark.asyncio
    async def test_oversized_price_is_bad_request(self, test_client):
        category = await create_category(test_client)
        response = await test_client.post(
            "/api/products",
            json={"name": "W", "price": "12345678901234567.89", "category_id": category["id"]},
        )
        assert response.status_code == 400
        assert [e["field"] for e in response.json()["details"]["errors"]] == ["price"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("price", ["99999999.9999", "0.0001", "10.5", "20"])
    async def test_price_reads_back_as_created(self, test_client, price):
        category = await create_category(test_client)
        created = await create_product(test_client, category["id"], price=price)

        response = await test_client.get(f"/api/products/{created['id']}")

        assert created["price"] == price
        assert response.json()["price"] == price

    @pytest.mark.asyncio
    async def test_huge_offset_is_bad_request(self, test_client):
        response = await test_client.get("/api/products", params={"offset": 10**20})
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_create_with_server_field_rejected(self, test_client):
        category = await create_category(test_client)
        response = await test_client.post(
            "/api/products",
            json={"name": "W", "price": "1", "category_id": category["id"], "id": str(uuid4())},
        )
        assert response.status_code == 400
        assert response.json()["details"]["errors"][0]["field"] == "id"

    @pytest.mark.asyncio
    async def test_create_with_unknown_category_conflicts(self, test_client):
        response = await test_client.post(
            "/api/products", json={"name": "W", "price": "1", "category_id": str(uuid4())}
        )
        assert response.status_code == 409
        assert response.json()["error"] == "constraint_violation"

    @pytest.mark.asyncio
    async def test_non_object_body_rejected(self, test_client):
        response = await test_client.post("/api/products", json=["not", "an", "object"])
        assert response.status_code == 400
        assert response.json()["details"]["errors"][0]["field"] == "body"

    @pytest.mark.asyncio
    async def test_get_product(self, test_client):
        category = await create_category(test_client)
        created = await create_product(test_client, category["id"])

        response = await test_client.get(f"/api/products/{created['id']}")

        assert response.status_code == 200
        body = response.json()
        assert body["id"] == created["id"]
        assert Decimal(body["price"]) == Decimal("9.99")

    @pytest.mark.asyncio
    async def test_get_missing_product(self, test_client):
        response = await test_client.get(f"/api/products/{uuid4()}")
        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    @pytest.mark.asyncio
    async def test_malformed_id_is_bad_request(self, test_client):
        response = await test_client.get("/api/products/not-a-uuid")
        assert response.status_code == 400
        assert response.json()["details"]["errors"][0]["field"] == "path.product_id"

    @pytest.mark.asyncio
    async def test_partial_update(self, test_client):
        category = await create_category(test_client)
        created = await create_product(test_client, category["id"], name="A", price="10")

        response = await test_client.put(f"/api/products/{created['id']}", json={"price": 20})

        assert response.status_code == 200
        body = response.json()
        assert body["name"] == "A"
        assert Decimal(body["price"]) == Decimal("20")
        assert body["stock_quantity"] == 5
        assert body["updated_at"] is not None

    @pytest.mark.asyncio
    async def test_update_null_name_rejected(self, test_client):
        category = await create_category(test_client)
        created = await create_product(test_client, category["id"])

        response = await test_client.put(f"/api/products/{created['id']}", json={"name": None})
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_update_missing_product(self, test_client):
        response = await test_client.put(f"/api/products/{uuid4()}", json={"price": "1"})
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_product(self, test_client):
        category = await create_category(test_client)
        created = await create_product(test_client, category["id"])

        response = await test_client.delete(f"/api/products/{created['id']}")
        assert response.status_code == 204

        response = await test_client.get(f"/api/products/{created['id']}")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_list_products(self, test_client):
        tools = await create_category(test_client, "Tools")
        garden = await create_category(test_client, "Garden")
        await create_product(test_client, tools["id"], name="Hammer")
        await create_product(test_client, tools["id"], name="Saw", stock_quantity=0)
        await create_product(test_client, garden["id"], name="Rake")

        response = await test_client.get("/api/products", params={"category_id": tools["id"]})
        assert response.status_code == 200
        assert response.headers["X-Total-Count"] == "2"
        assert {p["name"] for p in response.json()["items"]} == {"Hammer", "Saw"}

        response = await test_client.get("/api/products", params={"in_stock": "false"})
        assert [p["name"] for p in response.json()["items"]] == ["Saw"]

        response = await test_client.get("/api/products", params={"limit": 1})
        body = response.json()
        assert len(body["items"]) == 1
        assert body["total_count"] == 3
        assert body["has_more"] is True

    @pytest.mark.asyncio
    async def test_list_limit_out_of_range(self, test_client):
        response = await test_client.get("/api/products", params={"limit": 0})
        assert response.status_code == 400


class TestCategoryEndpoints:

    @pytest.mark.asyncio
    async def test_create_and_get(self, test_client):
        created = await create_category(test_client, "Tools", description="Hand tools")

        response = await test_client.get(f"/api/categories/{created['id']}")

        assert response.status_code == 200
        body = response.json()
        assert body["name"] == "Tools"
        assert body["description"] == "Hand tools"
        assert body["updated_at"] is None

    @pytest.mark.asyncio
    async def test_duplicate_name_conflicts(self, test_client):
        await create_category(test_client, "Tools")
        response = await test_client.post("/api/categories", json={"name": "Tools"})
        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_empty_name_rejected(self, test_client):
        response = await test_client.post("/api/categories", json={"name": ""})
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_rename(self, test_client):
        created = await create_category(test_client, "Tools")
        response = await test_client.put(f"/api/categories/{created['id']}", json={"name": "Garden"})
        assert response.status_code == 200
        assert response.json()["name"] == "Garden"
        assert response.json()["updated_at"] is not None

    @pytest.mark.asyncio
    async def test_delete_with_products_conflicts(self, test_client):
        category = await create_category(test_client)
        product = await create_product(test_client, category["id"])

        response = await test_client.delete(f"/api/categories/{category['id']}")

        assert response.status_code == 409
        assert response.json()["error"] == "constraint_violation"

        # Nothing was removed
        assert (await test_client.get(f"/api/categories/{category['id']}")).status_code == 200
        assert (await test_client.get(f"/api/products/{product['id']}")).status_code == 200

    @pytest.mark.asyncio
    async def test_delete_empty_category(self, test_client):
        category = await create_category(test_client)

        response = await test_client.delete(f"/api/categories/{category['id']}")
        assert response.status_code == 204

        response = await test_client.get(f"/api/categories/{category['id']}")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_category_products(self, test_client):
        tools = await create_category(test_client, "Tools")
        garden = await create_category(test_client, "Garden")
        await create_product(test_client, tools["id"], name="Hammer")
        await create_product(test_client, garden["id"], name="Rake")

        response = await test_client.get(f"/api/categories/{tools['id']}/products")

        assert response.status_code == 200
        assert response.headers["X-Total-Count"] == "1"
        assert [p["name"] for p in response.json()["items"]] == ["Hammer"]

    @pytest.mark.asyncio
    async def test_products_of_missing_category(self, test_client):
        response = await test_client.get(f"/api/categories/{uuid4()}/products")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_list_categories(self, test_client):
        await create_category(test_client, "Tools")
        await create_category(test_client, "Power tools")
        await create_category(test_client, "Garden")

        response = await test_client.get("/api/categories", params={"name": "tools"})

        assert response.status_code == 200
        assert response.headers["X-Total-Count"] == "2"
        assert {c["name"] for c in response.json()["items"]} == {"Tools", "Power tools"}


class TestObservability:

    @pytest.mark.asyncio
    async def test_unexpected_error_keeps_request_id(self):
        from httpx import ASGITransport, AsyncClient

        from catalog.main import app

        transport = ASGITransport(app=app, raise_app_exceptions=False)
        with patch(
            "catalog.routes.products.product_service.get_product",
            AsyncMock(side_effect=RuntimeError("boom")),
        ):
            async with AsyncClient(transport=transport, base_url="http://test") as client:
                response = await client.get(
                    f"/api/products/{uuid4()}", headers={"X-Request-ID": "req-500"}
                )

        assert response.status_code == 500
        assert response.json()["error"] == "internal_server_error"
        assert response.json()["request_id"] == "req-500"
        assert response.headers["X-Request-ID"] == "req-500"

    @pytest.mark.asyncio
    async def test_access_log_uses_route_template(self, test_client, caplog):
        caplog.set_level(logging.INFO, logger="catalog.access")
        product_id = uuid4()

        await test_client.get(f"/api/products/{product_id}")
        await test_client.get("/api/products")

        lines = [r.getMessage() for r in caplog.records if r.name == "catalog.access"]
        assert any("GET /api/products/{product_id} 404" in line for line in lines)
        assert all(str(product_id) not in line for line in lines)
        assert any("op=list_products total=0" in line for line in lines)

    @pytest.mark.asyncio
    async def test_access_log_records_created_location(self, test_client, caplog):
        caplog.set_level(logging.INFO, logger="catalog.access")

        category = await create_category(test_client)

        records = [r for r in caplog.records if r.name == "catalog.access"]
        assert records[-1].route == "/api/categories"
        assert f"created=/api/categories/{category['id']}" in records[-1].getMessage()
