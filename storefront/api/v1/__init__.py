# ==============================================================================
# API V1 ENDPOINTS PACKAGE
# ==============================================================================

"""
API Endpoints
=============

Route modules, one per resource, mounted under ``settings.API_PREFIX``.
"""

from storefront.api.v1.addresses import router as addresses_router
from storefront.api.v1.auth import router as auth_router
from storefront.api.v1.cart import router as cart_router
from storefront.api.v1.categories import router as categories_router
from storefront.api.v1.checkout import router as checkout_router
from storefront.api.v1.orders import router as orders_router
from storefront.api.v1.products import router as products_router
from storefront.api.v1.settings import router as settings_router
from storefront.api.v1.shipping import router as shipping_router
from storefront.api.v1.users import router as users_router

__all__ = [
    "addresses_router",
    "auth_router",
    "cart_router",
    "categories_router",
    "checkout_router",
    "orders_router",
    "products_router",
    "settings_router",
    "shipping_router",
    "users_router",
]
