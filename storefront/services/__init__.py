# ==============================================================================
# SERVICES PACKAGE INITIALIZATION
# ==============================================================================

"""
Service Layer
=============

Business logic for the storefront:
- BaseService: Generic service with common operations
- UserService: Registration, authentication and admin bootstrap
- SettingsManager: Cached key/value store configuration
- CategoryService / ProductService: Catalog management
- CartService: User and session carts
- CheckoutService: Quotes and transactional order creation
- OrderService: Order history and status transitions
- AddressService: Customer address book
- ShippingService: Shipping configuration and rate quotes
"""

from storefront.services.address_service import AddressService
from storefront.services.base_service import BaseService
from storefront.services.cart_service import CartOwner, CartService
from storefront.services.category_service import CategoryService
from storefront.services.checkout_service import CheckoutService
from storefront.services.order_service import OrderService
from storefront.services.product_service import ProductService
from storefront.services.settings_service import SettingsManager, settings_manager
from storefront.services.shipping_service import ShippingService
from storefront.services.user_service import UserService

__all__ = [
    "AddressService",
    "BaseService",
    "CartOwner",
    "CartService",
    "CategoryService",
    "CheckoutService",
    "OrderService",
    "ProductService",
    "SettingsManager",
    "settings_manager",
    "ShippingService",
    "UserService",
]
