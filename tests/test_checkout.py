# ==============================================================================
# CHECKOUT TESTS
# ==============================================================================
# Quotes, coupons and transactional order placement
# ==============================================================================

from decimal import Decimal

import pytest
from httpx import AsyncClient
from sqlalchemy import func, select

from storefront.domain_models.order import Order
from storefront.domain_models.product import Product, ProductVariant


async def _stock(adapter, model, id: str) -> int:
    async with adapter.session() as session:
        return (await session.get(model, id)).quantity


async def _order_count(adapter) -> int:
    async with adapter.session() as session:
        return await session.scalar(select(func.count()).select_from(Order))


class TestCalculate:

    @pytest.mark.asyncio
    async def test_quote_breakdown(self, client: AsyncClient, make_product, shipping_address):
        product = await make_product(price=Decimal("20.00"), quantity=5)

        response = await client.post("/api/checkout/calculate", json={
            "items": [{"product_id": product.id, "quantity": 2}],
            "shipping_address": shipping_address,
        })

        assert response.status_code == 200
        data = response.json()["data"]
        assert Decimal(data["subtotal"]) == Decimal("40.00")
        assert Decimal(data["tax_amount"]) == Decimal("3.40")
        assert Decimal(data["shipping_amount"]) == Decimal("5.99")
        assert Decimal(data["total"]) == Decimal("49.39")
        assert data["total_items"] == 2

    @pytest.mark.asyncio
    async def test_quote_free_shipping_over_threshold(
        self, client: AsyncClient, make_product, shipping_address,
    ):
        product = await make_product(price=Decimal("25.00"), quantity=5)

        response = await client.post("/api/checkout/calculate", json={
            "items": [{"product_id": product.id, "quantity": 2}],
            "shipping_address": shipping_address,
        })

        data = response.json()["data"]
        assert Decimal(data["subtotal"]) == Decimal("50.00")
        assert Decimal(data["shipping_amount"]) == Decimal("0.00")
        assert Decimal(data["tax_amount"]) == Decimal("4.25")
        assert Decimal(data["discount_amount"]) == Decimal("0.00")
        assert Decimal(data["total"]) == Decimal("54.25")

    @pytest.mark.asyncio
    async def test_identical_requests_give_identical_quotes(
        self, client: AsyncClient, make_product, shipping_address,
    ):
        product = await make_product(price=Decimal("12.50"), quantity=5)
        payload = {
            "items": [{"product_id": product.id, "quantity": 3}],
            "shipping_address": shipping_address,
        }

        first = await client.post("/api/checkout/calculate", json=payload)
        second = await client.post("/api/checkout/calculate", json=payload)

        assert first.status_code == 200
        assert first.json() == second.json()

    @pytest.mark.asyncio
    async def test_quote_requires_shipping_address(self, client: AsyncClient, make_product):
        product = await make_product(price=Decimal("10.00"), quantity=5)

        response = await client.post("/api/checkout/calculate", json={
            "items": [{"product_id": product.id, "quantity": 1}],
        })

        assert response.status_code == 400
        assert response.json()["success"] is False

    @pytest.mark.asyncio
    async def test_international_surcharge(
        self, client: AsyncClient, make_product, shipping_address,
    ):
        product = await make_product(price=Decimal("10.00"), quantity=5)

        response = await client.post("/api/checkout/calculate", json={
            "items": [{"product_id": product.id, "quantity": 1}],
            "shipping_address": {**shipping_address, "country": "CA"},
        })

        assert Decimal(response.json()["data"]["shipping_amount"]) == Decimal("20.99")

    @pytest.mark.asyncio
    async def test_quote_writes_nothing(
        self, client: AsyncClient, adapter, make_product, shipping_address,
    ):
        product = await make_product(quantity=5)

        await client.post("/api/checkout/calculate", json={
            "items": [{"product_id": product.id, "quantity": 3}],
            "shipping_address": shipping_address,
        })

        assert await _stock(adapter, Product, product.id) == 5
        assert await _order_count(adapter) == 0

    @pytest.mark.asyncio
    async def test_quote_rejects_insufficient_stock(
        self, client: AsyncClient, make_product, shipping_address,
    ):
        product = await make_product(quantity=1)

        response = await client.post("/api/checkout/calculate", json={
            "items": [{"product_id": product.id, "quantity": 2}],
            "shipping_address": shipping_address,
        })

        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "INSUFFICIENT_STOCK"
        assert body["details"]["available"] == 1

    @pytest.mark.asyncio
    async def test_quote_rejects_inactive_product(
        self, client: AsyncClient, make_product, shipping_address,
    ):
        product = await make_product(is_active=False)

        response = await client.post("/api/checkout/calculate", json={
            "items": [{"product_id": product.id, "quantity": 1}],
            "shipping_address": shipping_address,
        })

        assert response.status_code == 400
        assert response.json()["code"] == "PRODUCT_INACTIVE"

    @pytest.mark.asyncio
    async def test_quote_unknown_product(self, client: AsyncClient, shipping_address):
        response = await client.post("/api/checkout/calculate", json={
            "items": [{"product_id": "missing", "quantity": 1}],
            "shipping_address": shipping_address,
        })
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_untracked_product_ignores_stock(
        self, client: AsyncClient, make_product, shipping_address,
    ):
        product = await make_product(quantity=0, track_quantity=False)

        response = await client.post("/api/checkout/calculate", json={
            "items": [{"product_id": product.id, "quantity": 50}],
            "shipping_address": shipping_address,
        })
        assert response.status_code == 200



class TestCouponsAndOptions:

    @pytest.mark.asyncio
    async def test_validate_coupon(self, client: AsyncClient):
        response = await client.post(
            "/api/checkout/validate-coupon", json={"code": "SAVE10", "subtotal": "120"},
        )

        assert response.status_code == 200
        assert Decimal(response.json()["data"]["discount"]) == Decimal("12.00")

    @pytest.mark.asyncio
    async def test_unknown_coupon(self, client: AsyncClient):
        response = await client.post(
            "/api/checkout/validate-coupon", json={"code": "NOPE", "subtotal": "120"},
        )
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_shipping_options(self, client: AsyncClient):
        response = await client.get("/api/checkout/shipping-options")

        ids = [option["id"] for option in response.json()["data"]]
        assert ids == ["standard", "express", "overnight", "free"]


class TestCreateOrder:

    @pytest.mark.asyncio
    async def test_create_order_decrements_stock(
        self, client: AsyncClient, adapter, customer, make_product, shipping_address,
    ):
        product = await make_product(price=Decimal("15.00"), quantity=5)

        response = await client.post(
            "/api/checkout/create-order",
            json={
                "items": [{"product_id": product.id, "quantity": 2}],
                "shipping_address": shipping_address,
                "payment_method": "stripe",
            },
            headers=customer["headers"],
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["order_number"].startswith("ORD-")
        assert data["payment_status"] == "pending"
        assert await _stock(adapter, Product, product.id) == 3

        order = await client.get(f"/api/orders/{data['order_id']}", headers=customer["headers"])
        body = order.json()["data"]
        assert body["user_id"] == customer["id"]
        assert body["status"] == "pending"
        assert body["billing_address"]["zip_code"] == shipping_address["zip_code"]
        assert body["items"][0]["product_name"] == product.name
        assert Decimal(body["total"]) == Decimal(data["total"])

    @pytest.mark.asyncio
    async def test_create_order_requires_auth(self, client: AsyncClient, make_product, shipping_address):
        product = await make_product()

        response = await client.post("/api/checkout/create-order", json={
            "items": [{"product_id": product.id, "quantity": 1}],
            "shipping_address": shipping_address,
            "payment_method": "stripe",
        })
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_failed_decrement_rolls_back_everything(
        self, client: AsyncClient, adapter, customer, make_product, shipping_address,
    ):
        """Each line fits alone, together they exceed stock; nothing may persist."""
        keep = await make_product(quantity=10)
        scarce = await make_product(quantity=3)

        response = await client.post(
            "/api/checkout/create-order",
            json={
                "items": [
                    {"product_id": keep.id, "quantity": 4},
                    {"product_id": scarce.id, "quantity": 2},
                    {"product_id": scarce.id, "quantity": 2},
                ],
                "shipping_address": shipping_address,
                "payment_method": "stripe",
            },
            headers=customer["headers"],
        )

        assert response.status_code == 400
        assert response.json()["code"] == "INSUFFICIENT_STOCK"
        assert await _stock(adapter, Product, keep.id) == 10
        assert await _stock(adapter, Product, scarce.id) == 3
        assert await _order_count(adapter) == 0

    @pytest.mark.asyncio
    async def test_variant_line_uses_variant_stock(
        self, client: AsyncClient, adapter, customer, make_product, shipping_address,
    ):
        product = await make_product(
            sku="TEE",
            price=Decimal("20.00"),
            quantity=100,
            variants=[{"name": "Large", "quantity": 1, "price": "22.00"}],
        )
        variant = product.variants[0]
        assert variant.sku == "TEE-LARGE"

        too_many = await client.post(
            "/api/checkout/create-order",
            json={
                "items": [{"product_id": product.id, "variant_id": variant.id, "quantity": 2}],
                "shipping_address": shipping_address,
                "payment_method": "stripe",
            },
            headers=customer["headers"],
        )
        assert too_many.status_code == 400
        assert too_many.json()["code"] == "INSUFFICIENT_STOCK"

        ok = await client.post(
            "/api/checkout/create-order",
            json={
                "items": [{"product_id": product.id, "variant_id": variant.id, "quantity": 1}],
                "shipping_address": shipping_address,
                "payment_method": "stripe",
            },
            headers=customer["headers"],
        )
        assert ok.status_code == 201
        assert await _stock(adapter, ProductVariant, variant.id) == 0
        assert await _stock(adapter, Product, product.id) == 100

    @pytest.mark.asyncio
    async def test_variant_of_other_product(
        self, client: AsyncClient, customer, make_product, shipping_address,
    ):
        with_variant = await make_product(variants=[{"name": "Red", "quantity": 5}])
        other = await make_product()

        response = await client.post(
            "/api/checkout/create-order",
            json={
                "items": [{
                    "product_id": other.id,
                    "variant_id": with_variant.variants[0].id,
                    "quantity": 1,
                }],
                "shipping_address": shipping_address,
                "payment_method": "stripe",
            },
            headers=customer["headers"],
        )
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_disabled_payment_method(
        self, client: AsyncClient, adapter, customer, make_product, shipping_address,
    ):
        product = await make_product(quantity=5)

        response = await client.post(
            "/api/checkout/create-order",
            json={
                "items": [{"product_id": product.id, "quantity": 1}],
                "shipping_address": shipping_address,
                "payment_method": "paypal",
            },
            headers=customer["headers"],
        )

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"
        assert await _stock(adapter, Product, product.id) == 5

    @pytest.mark.asyncio
    async def test_order_clears_cart(
        self, client: AsyncClient, customer, make_product, shipping_address,
    ):
        product = await make_product(quantity=5)
        await client.post(
            "/api/cart/items",
            json={"product_id": product.id, "quantity": 1},
            headers=customer["headers"],
        )

        response = await client.post(
            "/api/checkout/create-order",
            json={
                "items": [{"product_id": product.id, "quantity": 1}],
                "shipping_address": shipping_address,
                "payment_method": "stripe",
            },
            headers=customer["headers"],
        )
        assert response.status_code == 201

        count = await client.get("/api/cart/count", headers=customer["headers"])
        assert count.json()["data"]["count"] == 0


class TestGuestOrder:

    @pytest.mark.asyncio
    async def test_guest_order(
        self, client: AsyncClient, adapter, admin_headers, make_product, shipping_address,
    ):
        product = await make_product(quantity=2)

        response = await client.post("/api/checkout/guest", json={
            "items": [{"product_id": product.id, "quantity": 2}],
            "shipping_address": shipping_address,
            "payment_method": "cash_on_delivery",
            "notes": "Leave at the door",
            "customer_email": "guest@example.com",
            "customer_name": "Grace Guest",
        })

        assert response.status_code == 201
        order_id = response.json()["data"]["order_id"]
        assert await _stock(adapter, Product, product.id) == 0

        order = (await client.get(f"/api/orders/{order_id}", headers=admin_headers)).json()["data"]
        assert order["user_id"] is None
        assert order["shipping_address"]["email"] == "guest@example.com"
        assert order["notes"] == (
            "Leave at the door\n\n[Guest Order] Customer: Grace Guest (guest@example.com)"
        )
