# ==============================================================================
# AUTH ENDPOINT TESTS
# ==============================================================================
# Tests for authentication endpoints: register, login, refresh, roles
# ==============================================================================

import pytest
from httpx import AsyncClient

from storefront.core.security import Role, verify_access_token


class TestAuthRegister:
    """Tests for user registration endpoint."""

    @pytest.mark.asyncio
    async def test_register_success(self, client: AsyncClient, sample_user_data: dict):
        response = await client.post("/api/auth/register", json=sample_user_data)

        assert response.status_code == 201
        data = response.json()

        assert data["success"] is True
        assert data["data"]["email"] == sample_user_data["email"]
        assert data["data"]["role"] == "customer"
        assert "hashed_password" not in data["data"]

    @pytest.mark.asyncio
    async def test_register_duplicate_email(self, client: AsyncClient, sample_user_data: dict):
        response1 = await client.post("/api/auth/register", json=sample_user_data)
        assert response1.status_code == 201

        response2 = await client.post("/api/auth/register", json=sample_user_data)
        assert response2.status_code == 400
        assert response2.json()["code"] == "CONFLICT"

    @pytest.mark.asyncio
    async def test_register_weak_password(self, client: AsyncClient):
        data = {
            "email": "weak@example.com",
            "password": "alllowercase1",
            "full_name": "Weak Password",
        }
        response = await client.post("/api/auth/register", json=data)
        assert response.status_code == 400


class TestAuthLogin:
    """Tests for login and token refresh."""

    @pytest.mark.asyncio
    async def test_login_json_success(self, client: AsyncClient, sample_user_data: dict):
        await client.post("/api/auth/register", json=sample_user_data)

        response = await client.post(
            "/api/auth/login/json",
            json={"email": sample_user_data["email"], "password": sample_user_data["password"]},
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["user"]["email"] == sample_user_data["email"]

        claims = verify_access_token(data["tokens"]["access_token"])
        assert claims["sub"] == data["user"]["id"]
        assert claims["role"] == Role.CUSTOMER

    @pytest.mark.asyncio
    async def test_login_form_returns_bare_tokens(self, client: AsyncClient, sample_user_data: dict):
        await client.post("/api/auth/register", json=sample_user_data)

        response = await client.post(
            "/api/auth/login",
            data={"username": sample_user_data["email"], "password": sample_user_data["password"]},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["token_type"] == "bearer"
        assert data["access_token"]

    @pytest.mark.asyncio
    async def test_login_wrong_password(self, client: AsyncClient, sample_user_data: dict):
        await client.post("/api/auth/register", json=sample_user_data)

        response = await client.post(
            "/api/auth/login/json",
            json={"email": sample_user_data["email"], "password": "WrongPass123!"},
        )

        assert response.status_code == 401
        assert response.json()["success"] is False

    @pytest.mark.asyncio
    async def test_refresh_issues_new_pair(self, client: AsyncClient, sample_user_data: dict):
        await client.post("/api/auth/register", json=sample_user_data)
        login = await client.post(
            "/api/auth/login/json",
            json={"email": sample_user_data["email"], "password": sample_user_data["password"]},
        )
        tokens = login.json()["data"]["tokens"]

        response = await client.post(
            "/api/auth/refresh", json={"refresh_token": tokens["refresh_token"]},
        )

        assert response.status_code == 200
        assert response.json()["data"]["access_token"]

    @pytest.mark.asyncio
    async def test_refresh_rejects_access_token(self, client: AsyncClient, sample_user_data: dict):
        await client.post("/api/auth/register", json=sample_user_data)
        login = await client.post(
            "/api/auth/login/json",
            json={"email": sample_user_data["email"], "password": sample_user_data["password"]},
        )
        tokens = login.json()["data"]["tokens"]

        response = await client.post(
            "/api/auth/refresh", json={"refresh_token": tokens["access_token"]},
        )
        assert response.status_code == 401


class TestRoles:
    """Admin routes check the token's role claim."""

    @pytest.mark.asyncio
    async def test_me(self, client: AsyncClient, customer: dict):
        response = await client.get("/api/users/me", headers=customer["headers"])

        assert response.status_code == 200
        assert response.json()["data"]["id"] == customer["id"]

    @pytest.mark.asyncio
    async def test_update_me(self, client: AsyncClient, customer: dict):
        response = await client.put(
            "/api/users/me", json={"full_name": "Renamed"}, headers=customer["headers"],
        )

        assert response.status_code == 200
        assert response.json()["data"]["full_name"] == "Renamed"

    @pytest.mark.asyncio
    async def test_customer_cannot_list_users(self, client: AsyncClient, customer: dict):
        response = await client.get("/api/users", headers=customer["headers"])

        assert response.status_code == 403
        assert response.json()["code"] == "AUTHORIZATION_ERROR"

    @pytest.mark.asyncio
    async def test_admin_lists_users(self, client: AsyncClient, customer: dict, admin_headers: dict):
        response = await client.get("/api/users", headers=admin_headers)

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["total"] >= 1

    @pytest.mark.asyncio
    async def test_invalid_token(self, client: AsyncClient):
        response = await client.get("/api/users/me", headers={"Authorization": "Bearer junk"})
        assert response.status_code == 401


class TestAdminBootstrap:

    @pytest.mark.asyncio
    async def test_ensure_admin_is_idempotent(self, adapter):
        from storefront.services.user_service import UserService

        service = UserService(adapter)
        first = await service.ensure_admin("Boss@Example.com", "AdminPass123!")
        second = await service.ensure_admin("boss@example.com", "AdminPass123!")

        assert first is not None
        assert second is None

        result = await service.authenticate("boss@example.com", "AdminPass123!")
        assert verify_access_token(result["tokens"].access_token)["role"] == Role.ADMIN


class TestPasswordChange:

    @pytest.mark.asyncio
    async def test_change_password(self, client: AsyncClient, customer: dict):
        response = await client.put(
            "/api/auth/password",
            json={"current_password": customer["password"], "new_password": "Fresher456"},
            headers=customer["headers"],
        )
        assert response.status_code == 200

        old = await client.post(
            "/api/auth/login/json",
            json={"email": customer["email"], "password": customer["password"]},
        )
        assert old.status_code == 401

        new = await client.post(
            "/api/auth/login/json",
            json={"email": customer["email"], "password": "Fresher456"},
        )
        assert new.status_code == 200

    @pytest.mark.asyncio
    async def test_wrong_current_password(self, client: AsyncClient, customer: dict):
        response = await client.put(
            "/api/auth/password",
            json={"current_password": "NotMine123", "new_password": "Fresher456"},
            headers=customer["headers"],
        )

        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "VALIDATION_ERROR"
        assert body["details"][0]["field"] == "current_password"

    @pytest.mark.asyncio
    async def test_weak_new_password(self, client: AsyncClient, customer: dict):
        response = await client.put(
            "/api/auth/password",
            json={"current_password": customer["password"], "new_password": "alllowercase"},
            headers=customer["headers"],
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_requires_auth(self, client: AsyncClient):
        response = await client.put(
            "/api/auth/password",
            json={"current_password": "Whatever1", "new_password": "Fresher456"},
        )
        assert response.status_code == 401


class TestBulkUserDelete:

    @pytest.mark.asyncio
    async def test_deactivates_customers_only(
        self, client: AsyncClient, adapter, customer: dict, admin_headers: dict,
    ):
        from storefront.services.user_service import UserService

        admin_id = await UserService(adapter).ensure_admin("chief@example.com", "AdminPass123!")

        response = await client.request(
            "DELETE",
            "/api/users/bulk",
            json={"ids": [customer["id"], admin_id]},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json()["data"]["deleted"] == 1

        login = await client.post(
            "/api/auth/login/json",
            json={"email": customer["email"], "password": customer["password"]},
        )
        assert login.status_code == 401

        admin_login = await client.post(
            "/api/auth/login/json",
            json={"email": "chief@example.com", "password": "AdminPass123!"},
        )
        assert admin_login.status_code == 200

    @pytest.mark.asyncio
    async def test_post_form(self, client: AsyncClient, customer: dict, admin_headers: dict):
        response = await client.post(
            "/api/users/bulk/delete", json={"ids": [customer["id"]]}, headers=admin_headers,
        )
        assert response.json()["data"]["deleted"] == 1

    @pytest.mark.asyncio
    async def test_requires_admin(self, client: AsyncClient, customer: dict):
        response = await client.request(
            "DELETE", "/api/users/bulk", json={"ids": [customer["id"]]}, headers=customer["headers"],
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_empty_ids_rejected(self, client: AsyncClient, admin_headers: dict):
        response = await client.request(
            "DELETE", "/api/users/bulk", json={"ids": []}, headers=admin_headers,
        )
        assert response.status_code == 400
