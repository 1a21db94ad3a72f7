# ==============================================================================
# DOMAIN MODELS PACKAGE INITIALIZATION
# ==============================================================================

"""
Domain Models
=============

SQLAlchemy ORM models for database entities:
- User / Address: Accounts and saved addresses
- Category / Product / ProductVariant / ProductImage: Catalog
- CartItem: Per-user or per-session cart lines
- Order / OrderItem: Placed orders and their snapshots
- Setting: Store configuration key/value pairs
- Shipping*: Zones, methods, rates and rules for the shipping engine
"""

from storefront.domain_models.base import SQLBase, TimestampMixin
from storefront.domain_models.user import User, UserRole
from storefront.domain_models.address import Address, AddressType
from storefront.domain_models.category import Category
from storefront.domain_models.product import Product, ProductImage, ProductVariant
from storefront.domain_models.cart import CartItem
from storefront.domain_models.order import Order, OrderItem, OrderStatus, PaymentStatus
from storefront.domain_models.setting import Setting
from storefront.domain_models.shipping import (
    ShippingMethod,
    ShippingRate,
    ShippingRule,
    ShippingZone,
)

__all__ = [
    "SQLBase",
    "TimestampMixin",
    "User",
    "UserRole",
    "Address",
    "AddressType",
    "Category",
    "Product",
    "ProductImage",
    "ProductVariant",
    "CartItem",
    "Order",
    "OrderItem",
    "OrderStatus",
    "PaymentStatus",
    "Setting",
    "ShippingMethod",
    "ShippingRate",
    "ShippingRule",
    "ShippingZone",
]
