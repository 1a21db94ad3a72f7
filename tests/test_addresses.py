# ==============================================================================
# ADDRESS TESTS
# ==============================================================================

import pytest
from httpx import AsyncClient


async def save(client: AsyncClient, headers: dict, address: dict, **extra) -> dict:
    response = await client.post("/api/addresses", json={**address, **extra}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


class TestAddresses:

    @pytest.mark.asyncio
    async def test_requires_auth(self, client: AsyncClient):
        response = await client.get("/api/addresses")
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_create_and_list(self, client: AsyncClient, customer, shipping_address):
        saved = await save(client, customer["headers"], shipping_address, country="us")

        assert saved["country"] == "US"
        assert saved["type"] == "shipping"
        assert saved["user_id"] == customer["id"]

        listing = await client.get("/api/addresses", headers=customer["headers"])
        assert [a["id"] for a in listing.json()["data"]] == [saved["id"]]

    @pytest.mark.asyncio
    async def test_one_default_per_type(self, client: AsyncClient, customer, shipping_address):
        headers = customer["headers"]
        first = await save(client, headers, shipping_address, is_default=True)
        billing = await save(client, headers, shipping_address, type="billing", is_default=True)
        second = await save(client, headers, shipping_address, city="Chicago")

        response = await client.post(f"/api/addresses/{second['id']}/default", headers=headers)
        assert response.json()["data"]["is_default"] is True

        listing = {a["id"]: a for a in (await client.get("/api/addresses", headers=headers)).json()["data"]}
        assert listing[first["id"]]["is_default"] is False
        assert listing[second["id"]]["is_default"] is True
        assert listing[billing["id"]]["is_default"] is True

    @pytest.mark.asyncio
    async def test_update_and_delete(self, client: AsyncClient, customer, shipping_address):
        headers = customer["headers"]
        saved = await save(client, headers, shipping_address)

        updated = await client.put(
            f"/api/addresses/{saved['id']}", json={"city": "Peoria"}, headers=headers,
        )
        assert updated.json()["data"]["city"] == "Peoria"

        deleted = await client.delete(f"/api/addresses/{saved['id']}", headers=headers)
        assert deleted.status_code == 200

        missing = await client.get(f"/api/addresses/{saved['id']}", headers=headers)
        assert missing.status_code == 404

    @pytest.mark.asyncio
    async def test_other_users_address_hidden(
        self, client: AsyncClient, customer, shipping_address, sample_user_data,
    ):
        saved = await save(client, customer["headers"], shipping_address)

        await client.post("/api/auth/register", json={**sample_user_data, "email": "nosy@example.com"})
        login = await client.post(
            "/api/auth/login/json",
            json={"email": "nosy@example.com", "password": sample_user_data["password"]},
        )
        token = login.json()["data"]["tokens"]["access_token"]

        response = await client.get(
            f"/api/addresses/{saved['id']}", headers={"Authorization": f"Bearer {token}"},
        )
        assert response.status_code == 404
