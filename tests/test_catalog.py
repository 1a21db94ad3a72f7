# ==============================================================================
# CATALOG TESTS
# ==============================================================================
# Categories (tree, cycles, soft delete) and products (SKUs, search, variants)
# ==============================================================================

from decimal import Decimal

import pytest
from httpx import AsyncClient


async def create_category(client: AsyncClient, headers: dict, **fields) -> dict:
    response = await client.post("/api/categories", json=fields, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


class TestCategories:

    @pytest.mark.asyncio
    async def test_create_requires_admin(self, client: AsyncClient, customer):
        response = await client.post(
            "/api/categories", json={"name": "Shoes"}, headers=customer["headers"],
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_slug_generated_and_deduplicated(self, client: AsyncClient, admin_headers):
        first = await create_category(client, admin_headers, name="Summer Sale!")
        second = await create_category(client, admin_headers, name="Summer Sale")

        assert first["slug"] == "summer-sale"
        assert second["slug"] == "summer-sale-2"

        by_slug = await client.get("/api/categories/slug/summer-sale-2")
        assert by_slug.json()["data"]["id"] == second["id"]

    @pytest.mark.asyncio
    async def test_explicit_slug_conflict(self, client: AsyncClient, admin_headers):
        await create_category(client, admin_headers, name="Hats", slug="hats")

        response = await client.post(
            "/api/categories", json={"name": "Caps", "slug": "hats"}, headers=admin_headers,
        )
        assert response.status_code == 400
        assert response.json()["code"] == "CONFLICT"

    @pytest.mark.asyncio
    async def test_tree(self, client: AsyncClient, admin_headers):
        root = await create_category(client, admin_headers, name="Clothing")
        child = await create_category(client, admin_headers, name="Shirts", parent_id=root["id"])
        await create_category(client, admin_headers, name="Polos", parent_id=child["id"])

        response = await client.get("/api/categories?tree=true")

        roots = response.json()["data"]
        assert [node["name"] for node in roots] == ["Clothing"]
        assert roots[0]["children"][0]["name"] == "Shirts"
        assert roots[0]["children"][0]["children"][0]["name"] == "Polos"

    @pytest.mark.asyncio
    async def test_cycle_rejected(self, client: AsyncClient, admin_headers):
        root = await create_category(client, admin_headers, name="Root")
        child = await create_category(client, admin_headers, name="Child", parent_id=root["id"])
        grandchild = await create_category(client, admin_headers, name="Grandchild", parent_id=child["id"])

        response = await client.put(
            f"/api/categories/{root['id']}",
            json={"parent_id": grandchild["id"]},
            headers=admin_headers,
        )
        assert response.status_code == 400
        assert response.json()["details"]["violated_rule"] == "category_cycle"

        response = await client.put(
            f"/api/categories/{root['id']}", json={"parent_id": root["id"]}, headers=admin_headers,
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_unknown_parent(self, client: AsyncClient, admin_headers):
        response = await client.post(
            "/api/categories", json={"name": "Lost", "parent_id": "missing"}, headers=admin_headers,
        )
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_in_use_needs_force(self, client: AsyncClient, admin_headers):
        parent = await create_category(client, admin_headers, name="Parent")
        middle = await create_category(client, admin_headers, name="Middle", parent_id=parent["id"])
        leaf = await create_category(client, admin_headers, name="Leaf", parent_id=middle["id"])

        refused = await client.delete(f"/api/categories/{middle['id']}", headers=admin_headers)
        assert refused.status_code == 400

        forced = await client.delete(
            f"/api/categories/{middle['id']}?force=true", headers=admin_headers,
        )
        assert forced.status_code == 200

        moved = (await client.get(f"/api/categories/{leaf['id']}")).json()["data"]
        assert moved["parent_id"] == parent["id"]

        active = (await client.get("/api/categories")).json()["data"]
        assert middle["id"] not in {c["id"] for c in active}

        everything = (await client.get("/api/categories?include_inactive=true")).json()["data"]
        assert middle["id"] in {c["id"] for c in everything}

    @pytest.mark.asyncio
    async def test_category_products(self, client: AsyncClient, admin_headers, make_product):
        category = await create_category(client, admin_headers, name="Garden")
        await make_product(name="Hose", category_id=category["id"])
        await make_product(name="Rake", category_id=category["id"])
        await make_product(name="Old Spade", category_id=category["id"], is_active=False)
        await make_product(name="Elsewhere")

        response = await client.get(
            f"/api/categories/{category['id']}/products?sort_by=name&sort_order=asc&page_size=1",
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["category"]["slug"] == "garden"
        assert data["products"]["total"] == 2
        assert data["products"]["pages"] == 2
        assert [p["name"] for p in data["products"]["items"]] == ["Hose"]

    @pytest.mark.asyncio
    async def test_category_products_unknown_category(self, client: AsyncClient):
        response = await client.get("/api/categories/missing/products")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_bulk_delete_needs_cascade_for_subcategories(self, client: AsyncClient, admin_headers):
        parent = await create_category(client, admin_headers, name="Outdoor")
        child = await create_category(client, admin_headers, name="Camping", parent_id=parent["id"])
        grandchild = await create_category(client, admin_headers, name="Tents", parent_id=child["id"])

        refused = await client.request(
            "DELETE", "/api/categories/bulk", json={"ids": [parent["id"]]}, headers=admin_headers,
        )
        assert refused.status_code == 400

        response = await client.request(
            "DELETE",
            "/api/categories/bulk",
            json={"ids": [parent["id"]], "cascade": True},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json()["data"]["deleted"] == 3
        active = {c["id"] for c in (await client.get("/api/categories")).json()["data"]}
        assert active.isdisjoint({parent["id"], child["id"], grandchild["id"]})

    @pytest.mark.asyncio
    async def test_bulk_delete_with_products_needs_force(
        self, client: AsyncClient, admin_headers, make_product,
    ):
        stocked = await create_category(client, admin_headers, name="Stocked")
        empty = await create_category(client, admin_headers, name="Empty")
        await make_product(category_id=stocked["id"])
        ids = [stocked["id"], empty["id"]]

        refused = await client.post("/api/categories/bulk", json={"ids": ids}, headers=admin_headers)
        assert refused.status_code == 400
        assert refused.json()["code"] == "CONFLICT"

        forced = await client.post(
            "/api/categories/bulk", json={"ids": ids, "force": True}, headers=admin_headers,
        )
        assert forced.json()["data"]["deleted"] == 2

    @pytest.mark.asyncio
    async def test_bulk_delete_requires_admin(self, client: AsyncClient, customer):
        response = await client.request(
            "DELETE", "/api/categories/bulk", json={"ids": ["x"]}, headers=customer["headers"],
        )
        assert response.status_code == 403


class TestProducts:

    @pytest.mark.asyncio
    async def test_create_with_images_and_variants(self, client: AsyncClient, admin_headers):
        response = await client.post(
            "/api/products",
            json={
                "name": "Trail Shoe",
                "sku": "trail-1",
                "price": "89.00",
                "quantity": 12,
                "images": [
                    {"url": "https://cdn.example.com/a.jpg", "sort_order": 1},
                    {"url": "https://cdn.example.com/b.jpg", "sort_order": 0, "is_primary": True},
                ],
                "variants": [{"name": "Size 42", "quantity": 3}],
            },
            headers=admin_headers,
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["sku"] == "TRAIL-1"
        assert data["slug"] == "trail-shoe"
        assert data["in_stock"] is True
        assert [img["url"] for img in data["images"]] == [
            "https://cdn.example.com/b.jpg",
            "https://cdn.example.com/a.jpg",
        ]
        assert data["variants"][0]["sku"] == "TRAIL-1-SIZE-42"

        by_slug = await client.get("/api/products/trail-shoe")
        assert by_slug.json()["data"]["id"] == data["id"]

    @pytest.mark.asyncio
    async def test_duplicate_sku(self, client: AsyncClient, admin_headers, make_product):
        await make_product(sku="DUP-1")

        response = await client.post(
            "/api/products",
            json={"name": "Another", "sku": "dup-1", "price": "1.00"},
            headers=admin_headers,
        )
        assert response.status_code == 400
        assert response.json()["code"] == "CONFLICT"

    @pytest.mark.asyncio
    async def test_variant_sku_cannot_reuse_product_sku(self, client: AsyncClient, admin_headers, make_product):
        taken = await make_product(sku="TAKEN")
        product = await make_product()

        response = await client.post(
            f"/api/products/{product.id}/variants",
            json={"name": "Blue", "sku": taken.sku},
            headers=admin_headers,
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_search_filters(self, client: AsyncClient, admin_headers, make_product):
        category = await create_category(client, admin_headers, name="Kitchen")
        await make_product(name="Copper Kettle", price=Decimal("40"), category_id=category["id"])
        await make_product(name="Steel Kettle", price=Decimal("25"))
        await make_product(name="Copper Pan", price=Decimal("60"), is_active=False)

        by_text = (await client.get("/api/products?search=kettle")).json()["data"]
        assert by_text["total"] == 2

        by_category = (await client.get(f"/api/products?category={category['id']}")).json()["data"]
        assert [p["name"] for p in by_category["items"]] == ["Copper Kettle"]

        by_price = (await client.get("/api/products?min_price=30&sort_by=price&sort_order=asc")).json()["data"]
        assert [p["name"] for p in by_price["items"]] == ["Copper Kettle"]

        inactive = (await client.get("/api/products?is_active=false")).json()["data"]
        assert [p["name"] for p in inactive["items"]] == ["Copper Pan"]

    @pytest.mark.asyncio
    async def test_soft_delete(self, client: AsyncClient, admin_headers, make_product):
        product = await make_product()

        response = await client.delete(f"/api/products/{product.id}", headers=admin_headers)
        assert response.status_code == 200

        detail = await client.get(f"/api/products/{product.id}")
        assert detail.json()["data"]["is_active"] is False

    @pytest.mark.asyncio
    async def test_update_variant_stock(self, client: AsyncClient, admin_headers, make_product):
        product = await make_product(variants=[{"name": "Small", "quantity": 1}])
        variant = product.variants[0]

        response = await client.put(
            f"/api/products/{product.id}/variants/{variant.id}",
            json={"quantity": 9, "price": "11.50"},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json()["data"]["quantity"] == 9

        variants = (await client.get(f"/api/products/{product.id}/variants")).json()["data"]
        assert Decimal(variants[0]["price"]) == Decimal("11.50")

    @pytest.mark.asyncio
    async def test_unknown_category_rejected(self, client: AsyncClient, admin_headers):
        response = await client.post(
            "/api/products",
            json={"name": "Orphan", "sku": "ORPH", "price": "1.00", "category_id": "missing"},
            headers=admin_headers,
        )
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_featured_lists_flagged_first(self, client: AsyncClient, make_product):
        await make_product(name="Plain")
        flagged = await make_product(name="Spotlight", is_featured=True)
        await make_product(name="Hidden", is_featured=True, is_active=False)

        response = await client.get("/api/products/featured?limit=5")

        assert response.status_code == 200
        names = [p["name"] for p in response.json()["data"]]
        assert names[0] == flagged.name
        assert "Hidden" not in names
        assert len(names) == 2

    @pytest.mark.asyncio
    async def test_related_shares_category(self, client: AsyncClient, admin_headers, make_product):
        category = await create_category(client, admin_headers, name="Lamps")
        product = await make_product(name="Desk Lamp", category_id=category["id"])
        await make_product(name="Floor Lamp", category_id=category["id"])
        await make_product(name="Broken Lamp", category_id=category["id"], is_active=False)
        await make_product(name="Rug")

        response = await client.get(f"/api/products/related/{product.id}")

        assert [p["name"] for p in response.json()["data"]] == ["Floor Lamp"]

    @pytest.mark.asyncio
    async def test_related_without_category(self, client: AsyncClient, make_product):
        product = await make_product()

        response = await client.get(f"/api/products/related/{product.id}")

        assert response.status_code == 200
        assert response.json()["data"] == []

    @pytest.mark.asyncio
    async def test_related_unknown_product(self, client: AsyncClient):
        response = await client.get("/api/products/related/missing")
        assert response.status_code == 404
