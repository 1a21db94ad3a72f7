# ==============================================================================
# APPLICATION CONSTANTS - Centralized Configuration Values
# ==============================================================================
# Immutable constants used throughout the application
# Organized by category for easy maintenance
# ==============================================================================

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, Final, FrozenSet, List, Mapping


# ==============================================================================
# API CONSTANTS
# ==============================================================================

class APIConstants:
    """API-related constants."""

    # Pagination defaults
    DEFAULT_PAGE_SIZE: Final[int] = 20
    MAX_PAGE_SIZE: Final[int] = 100

    # Request headers
    SESSION_ID_HEADER: Final[str] = "X-Session-ID"
    REQUEST_ID_HEADER: Final[str] = "X-Request-ID"


# ==============================================================================
# DATABASE CONSTANTS
# ==============================================================================

class DatabaseConstants:
    """Collection/table names registered with the adapter."""

    USERS_COLLECTION: Final[str] = "users"
    ADDRESSES_COLLECTION: Final[str] = "addresses"
    CATEGORIES_COLLECTION: Final[str] = "categories"
    PRODUCTS_COLLECTION: Final[str] = "products"
    PRODUCT_VARIANTS_COLLECTION: Final[str] = "product_variants"
    PRODUCT_IMAGES_COLLECTION: Final[str] = "product_images"
    CART_ITEMS_COLLECTION: Final[str] = "cart_items"
    ORDERS_COLLECTION: Final[str] = "orders"
    ORDER_ITEMS_COLLECTION: Final[str] = "order_items"
    SETTINGS_COLLECTION: Final[str] = "settings"
    SHIPPING_METHODS_COLLECTION: Final[str] = "shipping_methods"
    SHIPPING_ZONES_COLLECTION: Final[str] = "shipping_zones"
    SHIPPING_RATES_COLLECTION: Final[str] = "shipping_rates"
    SHIPPING_RULES_COLLECTION: Final[str] = "shipping_rules"


# ==============================================================================
# ORDER CONSTANTS
# ==============================================================================

class OrderConstants:
    """Order numbering and status lifecycle."""

    ORDER_NUMBER_PREFIX: Final[str] = "ORD"
    ORDER_NUMBER_DIGITS: Final[int] = 6
    ORDER_NUMBER_ATTEMPTS: Final[int] = 5

    STATUS_PENDING: Final[str] = "pending"
    STATUS_PROCESSING: Final[str] = "processing"
    STATUS_SHIPPED: Final[str] = "shipped"
    STATUS_DELIVERED: Final[str] = "delivered"
    STATUS_CANCELLED: Final[str] = "cancelled"
    STATUS_REFUNDED: Final[str] = "refunded"

    # Allowed next states per current state; cancelled and refunded are terminal
    STATUS_TRANSITIONS: Final[Mapping[str, FrozenSet[str]]] = {
        STATUS_PENDING: frozenset({STATUS_PROCESSING, STATUS_CANCELLED}),
        STATUS_PROCESSING: frozenset({STATUS_SHIPPED, STATUS_CANCELLED, STATUS_REFUNDED}),
        STATUS_SHIPPED: frozenset({STATUS_DELIVERED, STATUS_REFUNDED}),
        STATUS_DELIVERED: frozenset({STATUS_REFUNDED}),
        STATUS_CANCELLED: frozenset(),
        STATUS_REFUNDED: frozenset(),
    }

    GUEST_NOTE_TEMPLATE: Final[str] = "[Guest Order] Customer: {name} ({email})"


# ==============================================================================
# CHECKOUT CONSTANTS
# ==============================================================================

class CheckoutConstants:
    """Fixed parameters of the checkout shipping formula."""

    DEFAULT_ITEM_WEIGHT_KG: Final[Decimal] = Decimal("0.5")
    WEIGHT_SURCHARGE_THRESHOLD_KG: Final[Decimal] = Decimal("5")
    WEIGHT_SURCHARGE_PER_KG: Final[Decimal] = Decimal("2")
    DOMESTIC_COUNTRY: Final[str] = "US"
    INTERNATIONAL_SURCHARGE: Final[Decimal] = Decimal("15.00")
    DEFAULT_CURRENCY: Final[str] = "USD"

    SHIPPING_OPTIONS: Final[List[Dict[str, Any]]] = [
        {
            "id": "standard",
            "name": "Standard Shipping",
            "description": "5-7 business days",
            "price": Decimal("10.00"),
            "estimated_days": "5-7",
        },
        {
            "id": "express",
            "name": "Express Shipping",
            "description": "2-3 business days",
            "price": Decimal("25.00"),
            "estimated_days": "2-3",
        },
        {
            "id": "overnight",
            "name": "Overnight Shipping",
            "description": "Next business day",
            "price": Decimal("50.00"),
            "estimated_days": "1",
        },
        {
            "id": "free",
            "name": "Free Shipping",
            "description": "7-10 business days (orders over $100)",
            "price": Decimal("0.00"),
            "estimated_days": "7-10",
            "min_order_amount": Decimal("100.00"),
        },
    ]

    COUPONS: Final[Mapping[str, Mapping[str, Any]]] = {
        "SAVE10": {
            "type": "percentage",
            "value": Decimal("10"),
            "min_order_amount": Decimal("50"),
            "max_discount": Decimal("100"),
            "description": "10% off orders over $50",
        },
        "FREESHIP": {
            "type": "shipping",
            "value": Decimal("100"),
            "min_order_amount": Decimal("0"),
            "max_discount": Decimal("25"),
            "description": "Free shipping on any order",
        },
        "WELCOME20": {
            "type": "percentage",
            "value": Decimal("20"),
            "min_order_amount": Decimal("100"),
            "max_discount": Decimal("50"),
            "description": "20% off for new customers (orders over $100)",
        },
    }


# ==============================================================================
# STORE SETTINGS DEFAULTS
# ==============================================================================

class SettingKeys:
    """Well-known store setting keys."""

    STORE_NAME: Final[str] = "store_name"
    CURRENCY: Final[str] = "currency"
    TAX_ENABLED: Final[str] = "tax_enabled"
    TAX_RATE: Final[str] = "tax_rate"
    FREE_SHIPPING_THRESHOLD: Final[str] = "free_shipping_threshold"
    FLAT_RATE: Final[str] = "flat_rate"
    PAYMENT_ENABLED_SUFFIX: Final[str] = "_enabled"


DEFAULT_STORE_SETTINGS: Final[List[Dict[str, Any]]] = [
    # General
    {"key": "store_name", "value": "My Store", "category": "general",
     "description": "Store name", "is_public": True},
    {"key": "store_email", "value": "store@example.com", "category": "general",
     "description": "Store contact email", "is_public": True},
    {"key": "currency", "value": "USD", "category": "general",
     "description": "Store currency", "is_public": True},
    # Payment
    {"key": "stripe_enabled", "value": True, "category": "payment",
     "description": "Enable card payments"},
    {"key": "paypal_enabled", "value": False, "category": "payment",
     "description": "Enable PayPal payments"},
    {"key": "cash_on_delivery_enabled", "value": True, "category": "payment",
     "description": "Enable cash on delivery"},
    # Shipping
    {"key": "free_shipping_threshold", "value": 50, "category": "shipping",
     "description": "Free shipping threshold amount"},
    {"key": "flat_rate", "value": 5.99, "category": "shipping",
     "description": "Flat rate shipping cost"},
    {"key": "weight_based", "value": False, "category": "shipping",
     "description": "Enable weight-based shipping"},
    {"key": "shipping_zones", "value": ["US", "CA", "MX"], "category": "shipping",
     "description": "Available shipping zones"},
    # Tax
    {"key": "tax_enabled", "value": True, "category": "tax",
     "description": "Enable tax calculation"},
    {"key": "tax_rate", "value": 8.5, "category": "tax",
     "description": "Default tax rate percentage"},
    {"key": "include_in_price", "value": False, "category": "tax",
     "description": "Include tax in product prices"},
    {"key": "exempt_categories", "value": [], "category": "tax",
     "description": "Tax exempt categories"},
    # Security
    {"key": "max_login_attempts", "value": 5, "category": "security",
     "description": "Maximum login attempts"},
    {"key": "session_timeout", "value": 24, "category": "security",
     "description": "Session timeout in hours"},
    # Media
    {"key": "max_file_size", "value": 5, "category": "media",
     "description": "Maximum file size in MB"},
    {"key": "allowed_types", "value": ["image/jpeg", "image/png", "image/webp", "image/gif"],
     "category": "media", "description": "Allowed file types"},
    {"key": "image_quality", "value": 85, "category": "media",
     "description": "Image compression quality"},
    {"key": "thumbnail_size", "value": 300, "category": "media",
     "description": "Thumbnail size in pixels"},
    {"key": "watermark", "value": False, "category": "media",
     "description": "Enable watermark on images"},
]


# ==============================================================================
# ERROR MESSAGES
# ==============================================================================

class ErrorMessages:
    """Standardized error messages."""

    # Authentication
    INVALID_CREDENTIALS: Final[str] = "Invalid email or password"
    ACCOUNT_DISABLED: Final[str] = "Account is disabled"
    UNAUTHORIZED: Final[str] = "Not authenticated"

    # Authorization
    ADMIN_REQUIRED: Final[str] = "Admin access required"
    ORDER_FORBIDDEN: Final[str] = "You do not have access to this order"

    # Resources
    USER_NOT_FOUND: Final[str] = "User not found"
    PRODUCT_NOT_FOUND: Final[str] = "Product not found"
    VARIANT_NOT_FOUND: Final[str] = "Product variant not found"
    CATEGORY_NOT_FOUND: Final[str] = "Category not found"
    CART_ITEM_NOT_FOUND: Final[str] = "Cart item not found"
    ORDER_NOT_FOUND: Final[str] = "Order not found"
    ADDRESS_NOT_FOUND: Final[str] = "Address not found"
    SETTING_NOT_FOUND: Final[str] = "Setting not found"
    COUPON_NOT_FOUND: Final[str] = "Invalid coupon code"
    WRONG_CURRENT_PASSWORD: Final[str] = "Current password is incorrect"

    # Cart
    CART_OWNER_REQUIRED: Final[str] = "Authentication or X-Session-ID header required"


# ==============================================================================
# SUCCESS MESSAGES
# ==============================================================================

class SuccessMessages:
    """Standardized success messages."""

    CREATED: Final[str] = "Resource created successfully"
    UPDATED: Final[str] = "Resource updated successfully"
    DELETED: Final[str] = "Resource deleted successfully"

    LOGIN_SUCCESS: Final[str] = "Login successful"
    PASSWORD_CHANGED: Final[str] = "Password changed successfully"
    USER_REGISTERED: Final[str] = "User registered successfully"

    ORDER_PLACED: Final[str] = "Order created successfully"
    ORDER_STATUS_UPDATED: Final[str] = "Order status updated successfully"

    CART_ITEM_ADDED: Final[str] = "Item added to cart"
    CART_CLEARED: Final[str] = "Cart cleared"
    CART_MERGED: Final[str] = "Cart merged successfully"

    SETTINGS_INITIALIZED: Final[str] = "Default settings initialized"
    SETTINGS_IMPORTED: Final[str] = "Settings imported successfully"
