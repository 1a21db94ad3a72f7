# ==============================================================================
# CONFTEST - Pytest Fixtures and Configuration
# ==============================================================================
# Shared fixtures for all tests
# ==============================================================================

from __future__ import annotations

import os
from decimal import Decimal
from typing import AsyncGenerator, Awaitable, Callable, Dict
from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Set test environment before importing the application
os.environ["ENVIRONMENT"] = "development"
os.environ["DEBUG"] = "false"
os.environ["DATABASE_TYPE"] = "sqlite"
os.environ["SQLITE_URL"] = "sqlite+aiosqlite:///./test_app.db"
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-only-32chars!"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SEED_DEFAULT_SETTINGS"] = "true"
os.environ["LOG_LEVEL"] = "WARNING"

TEST_DB_PATH = "./test_app.db"


def _remove_test_db() -> None:
    if os.path.exists(TEST_DB_PATH):
        try:
            os.remove(TEST_DB_PATH)
        except OSError:
            pass


# ==============================================================================
# DATABASE FIXTURES
# ==============================================================================

@pytest_asyncio.fixture
async def adapter():
    """
    Fresh SQLite database with default store settings seeded.

    Yields the connected adapter; services under test are built on it.
    """
    from storefront.database.factory import DatabaseFactory
    from storefront.main import bootstrap
    from storefront.services.settings_service import settings_manager

    DatabaseFactory.reset()
    _remove_test_db()
    settings_manager.clear_cache()

    db = await DatabaseFactory.initialize()
    await bootstrap()

    yield db

    await DatabaseFactory.shutdown()
    DatabaseFactory.reset()
    settings_manager.clear_cache()
    _remove_test_db()


# ==============================================================================
# HTTP CLIENT FIXTURES
# ==============================================================================

@pytest_asyncio.fixture
async def client(adapter) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client bound to the application."""
    from storefront.main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport,
        base_url="http://test",
        timeout=30.0,
    ) as async_client:
        yield async_client


@pytest.fixture
def admin_headers() -> Dict[str, str]:
    """Bearer header for a token carrying the admin role."""
    from storefront.core.security import Role, create_access_token

    token = create_access_token(subject=f"admin-{uuid4().hex[:8]}", role=Role.ADMIN)
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def customer(client: AsyncClient, sample_user_data: dict) -> dict:
    """
    Registered customer.

    Returns:
        ``{"id", "email", "password", "headers"}``
    """
    from storefront.core.security import create_access_token

    response = await client.post("/api/auth/register", json=sample_user_data)
    assert response.status_code == 201, f"Failed to register: {response.text}"

    user_id = response.json()["data"]["id"]
    token = create_access_token(subject=user_id)
    return {
        "id": user_id,
        "email": sample_user_data["email"],
        "password": sample_user_data["password"],
        "headers": {"Authorization": f"Bearer {token}"},
    }


# ==============================================================================
# CATALOG FIXTURES
# ==============================================================================

@pytest.fixture
def make_product(adapter) -> Callable[..., Awaitable]:
    """
    Factory creating products through the catalog service.

    Example:
        >>> product = await make_product(price="19.99", quantity=3)
    """
    from storefront.schemas.product import ProductCreate
    from storefront.services.product_service import ProductService

    service = ProductService(adapter)

    async def _make(**overrides):
        data = {
            "name": f"Product {uuid4().hex[:6]}",
            "sku": f"SKU-{uuid4().hex[:8]}",
            "price": Decimal("10.00"),
            "quantity": 10,
        }
        data.update(overrides)
        return await service.create(ProductCreate(**data))

    return _make


# ==============================================================================
# HELPER FIXTURES
# ==============================================================================

@pytest.fixture
def sample_user_data() -> dict:
    """Generate sample user registration data."""
    return {
        "email": f"user_{uuid4().hex[:8]}@example.com",
        "password": "SecurePass123!",
        "full_name": "Sample User",
    }


@pytest.fixture
def shipping_address() -> dict:
    return {
        "first_name": "Ada",
        "last_name": "Lovelace",
        "address1": "1 Analytical Way",
        "city": "Springfield",
        "state": "IL",
        "zip_code": "62701",
        "country": "US",
    }
