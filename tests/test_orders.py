# ==============================================================================
# ORDER TESTS
# ==============================================================================
# Listing, ownership and the status transition table
# ==============================================================================

import pytest
from httpx import AsyncClient
from sqlalchemy import func, select

from storefront.core.exceptions import BusinessRuleError
from storefront.core.security import create_access_token
from storefront.domain_models.order import OrderItem, OrderStatus
from storefront.services.order_service import check_transition


async def place_order(client: AsyncClient, headers: dict, product_id: str, address: dict) -> str:
    response = await client.post(
        "/api/checkout/create-order",
        json={
            "items": [{"product_id": product_id, "quantity": 1}],
            "shipping_address": address,
            "payment_method": "stripe",
        },
        headers=headers,
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]["order_id"]


class TestTransitionTable:

    @pytest.mark.parametrize("current,target", [
        ("pending", "processing"),
        ("pending", "cancelled"),
        ("processing", "shipped"),
        ("processing", "refunded"),
        ("shipped", "delivered"),
        ("delivered", "refunded"),
    ])
    def test_allowed(self, current, target):
        assert check_transition(current, target) is True

    @pytest.mark.parametrize("current,target", [
        ("pending", "shipped"),
        ("pending", "delivered"),
        ("shipped", "pending"),
        ("cancelled", "processing"),
        ("refunded", "pending"),
    ])
    def test_rejected(self, current, target):
        with pytest.raises(BusinessRuleError) as exc_info:
            check_transition(current, target)
        assert exc_info.value.details["violated_rule"] == "order_status_transition"

    def test_same_status_is_noop(self):
        assert check_transition(OrderStatus.SHIPPED, "shipped") is False


class TestOrderAccess:

    @pytest.mark.asyncio
    async def test_customer_sees_only_own_orders(
        self, client: AsyncClient, customer, make_product, shipping_address, sample_user_data,
    ):
        product = await make_product(quantity=5)
        order_id = await place_order(client, customer["headers"], product.id, shipping_address)

        other = await client.post(
            "/api/auth/register",
            json={**sample_user_data, "email": "other@example.com"},
        )
        other_headers = {"Authorization": f"Bearer {create_access_token(subject=other.json()['data']['id'])}"}

        listing = await client.get("/api/orders", headers=other_headers)
        assert listing.json()["data"]["total"] == 0

        forbidden = await client.get(f"/api/orders/{order_id}", headers=other_headers)
        assert forbidden.status_code == 403

        own = await client.get("/api/orders", headers=customer["headers"])
        assert [o["id"] for o in own.json()["data"]["items"]] == [order_id]

    @pytest.mark.asyncio
    async def test_admin_filters_by_status(
        self, client: AsyncClient, customer, admin_headers, make_product, shipping_address,
    ):
        product = await make_product(quantity=5)
        first = await place_order(client, customer["headers"], product.id, shipping_address)
        await place_order(client, customer["headers"], product.id, shipping_address)

        await client.patch(
            f"/api/orders/{first}/status", json={"status": "processing"}, headers=admin_headers,
        )

        response = await client.get("/api/orders?status=processing", headers=admin_headers)
        data = response.json()["data"]
        assert data["total"] == 1
        assert data["items"][0]["id"] == first

    @pytest.mark.asyncio
    async def test_filter_by_payment_status(
        self, client: AsyncClient, customer, make_product, shipping_address,
    ):
        product = await make_product(quantity=5)
        order_id = await place_order(client, customer["headers"], product.id, shipping_address)

        pending = await client.get("/api/orders?payment_status=pending", headers=customer["headers"])
        assert [o["id"] for o in pending.json()["data"]["items"]] == [order_id]

        paid = await client.get("/api/orders?payment_status=paid", headers=customer["headers"])
        assert paid.json()["data"]["total"] == 0

    @pytest.mark.asyncio
    async def test_unknown_payment_status_filter(self, client: AsyncClient, customer):
        response = await client.get("/api/orders?payment_status=bogus", headers=customer["headers"])

        assert response.status_code == 400
        assert response.json()["success"] is False

    @pytest.mark.asyncio
    async def test_unknown_order(self, client: AsyncClient, admin_headers):
        response = await client.get("/api/orders/missing", headers=admin_headers)
        assert response.status_code == 404


class TestStatusUpdates:

    @pytest.mark.asyncio
    async def test_full_lifecycle(
        self, client: AsyncClient, customer, admin_headers, make_product, shipping_address,
    ):
        product = await make_product(quantity=5)
        order_id = await place_order(client, customer["headers"], product.id, shipping_address)
        url = f"/api/orders/{order_id}/status"

        response = await client.patch(url, json={"status": "processing"}, headers=admin_headers)
        assert response.json()["data"]["status"] == "processing"

        response = await client.patch(
            url, json={"status": "shipped", "tracking_number": "1Z999"}, headers=admin_headers,
        )
        shipped = response.json()["data"]
        assert shipped["status"] == "shipped"
        assert shipped["tracking_number"] == "1Z999"
        assert shipped["shipped_at"] is not None

        response = await client.patch(url, json={"status": "delivered"}, headers=admin_headers)
        assert response.json()["data"]["delivered_at"] is not None

        tracking = await client.get(f"/api/orders/{order_id}/tracking", headers=customer["headers"])
        assert tracking.json()["data"]["tracking_number"] == "1Z999"
        assert tracking.json()["data"]["status"] == "delivered"

    @pytest.mark.asyncio
    async def test_illegal_transition(
        self, client: AsyncClient, customer, admin_headers, make_product, shipping_address,
    ):
        product = await make_product(quantity=5)
        order_id = await place_order(client, customer["headers"], product.id, shipping_address)

        response = await client.patch(
            f"/api/orders/{order_id}/status", json={"status": "delivered"}, headers=admin_headers,
        )

        assert response.status_code == 400
        assert response.json()["code"] == "BUSINESS_RULE_ERROR"

        order = await client.get(f"/api/orders/{order_id}", headers=admin_headers)
        assert order.json()["data"]["status"] == "pending"

    @pytest.mark.asyncio
    async def test_same_status_appends_notes(
        self, client: AsyncClient, customer, admin_headers, make_product, shipping_address,
    ):
        product = await make_product(quantity=5)
        order_id = await place_order(client, customer["headers"], product.id, shipping_address)

        response = await client.patch(
            f"/api/orders/{order_id}/status",
            json={"status": "pending", "notes": "Called customer"},
            headers=admin_headers,
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["status"] == "pending"
        assert data["notes"] == "Called customer"

    @pytest.mark.asyncio
    async def test_customer_cannot_update_status(
        self, client: AsyncClient, customer, make_product, shipping_address,
    ):
        product = await make_product(quantity=5)
        order_id = await place_order(client, customer["headers"], product.id, shipping_address)

        response = await client.patch(
            f"/api/orders/{order_id}/status", json={"status": "cancelled"}, headers=customer["headers"],
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_bulk_update_reports_failures(
        self, client: AsyncClient, customer, admin_headers, make_product, shipping_address,
    ):
        product = await make_product(quantity=5)
        pending = await place_order(client, customer["headers"], product.id, shipping_address)
        cancelled = await place_order(client, customer["headers"], product.id, shipping_address)
        await client.patch(
            f"/api/orders/{cancelled}/status", json={"status": "cancelled"}, headers=admin_headers,
        )

        response = await client.patch(
            "/api/orders/bulk/status",
            json={"order_ids": [pending, cancelled, "missing"], "status": "processing"},
            headers=admin_headers,
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["updated"] == [pending]
        assert {f["order_id"] for f in data["failed"]} == {cancelled, "missing"}


class TestBulkDelete:

    @pytest.mark.asyncio
    async def test_removes_orders_and_items(
        self, client: AsyncClient, adapter, customer, admin_headers, make_product, shipping_address,
    ):
        product = await make_product(quantity=5)
        doomed = await place_order(client, customer["headers"], product.id, shipping_address)
        kept = await place_order(client, customer["headers"], product.id, shipping_address)

        response = await client.request(
            "DELETE", "/api/orders/bulk", json={"ids": [doomed, "missing"]}, headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json()["data"]["deleted"] == 1
        assert (await client.get(f"/api/orders/{doomed}", headers=admin_headers)).status_code == 404
        assert (await client.get(f"/api/orders/{kept}", headers=admin_headers)).status_code == 200

        async with adapter.session() as session:
            orphans = await session.scalar(
                select(func.count()).select_from(OrderItem).where(OrderItem.order_id == doomed)
            )
        assert orphans == 0

    @pytest.mark.asyncio
    async def test_post_form(
        self, client: AsyncClient, customer, admin_headers, make_product, shipping_address,
    ):
        product = await make_product(quantity=5)
        order_id = await place_order(client, customer["headers"], product.id, shipping_address)

        response = await client.post(
            "/api/orders/bulk/delete", json={"ids": [order_id]}, headers=admin_headers,
        )
        assert response.json()["data"]["deleted"] == 1

    @pytest.mark.asyncio
    async def test_requires_admin(self, client: AsyncClient, customer):
        response = await client.request(
            "DELETE", "/api/orders/bulk", json={"ids": ["x"]}, headers=customer["headers"],
        )
        assert response.status_code == 403
