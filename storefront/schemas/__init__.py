# ==============================================================================
# SCHEMAS PACKAGE INITIALIZATION
# ==============================================================================

"""
Pydantic Schemas
================

Request/Response validation schemas for API endpoints:
- Base: Response envelope and pagination
- User / Address: Accounts and saved addresses
- Category / Product: Catalog
- Cart / Checkout / Order: Purchase flow
- Setting: Store configuration
- Shipping: Rule engine configuration and quotes
"""

from storefront.schemas.base import (
    APIResponse,
    BaseSchema,
    HealthResponse,
    MessageResponse,
    PaginatedResponse,
    TimestampSchema,
)
from storefront.schemas.user import (
    TokenResponse,
    UserCreate,
    UserLogin,
    UserResponse,
    UserUpdate,
)

__all__ = [
    "APIResponse",
    "BaseSchema",
    "HealthResponse",
    "MessageResponse",
    "PaginatedResponse",
    "TimestampSchema",
    "TokenResponse",
    "UserCreate",
    "UserLogin",
    "UserResponse",
    "UserUpdate",
]
