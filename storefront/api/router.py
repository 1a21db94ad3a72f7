# ==============================================================================
# MAIN API ROUTER - Route Aggregation
# ==============================================================================
# Combines every resource router under the API prefix
# ==============================================================================

from __future__ import annotations

from fastapi import APIRouter

from storefront.core.settings import settings
from storefront.api.v1 import (
    addresses_router,
    auth_router,
    cart_router,
    categories_router,
    checkout_router,
    orders_router,
    products_router,
    settings_router,
    shipping_router,
    users_router,
)

# Create main API router
api_router = APIRouter()

for router in (
    auth_router,
    users_router,
    addresses_router,
    categories_router,
    products_router,
    cart_router,
    checkout_router,
    orders_router,
    settings_router,
    shipping_router,
):
    api_router.include_router(router, prefix=settings.API_PREFIX)
