# ==============================================================================
# CART SCHEMAS - Shopping Cart
# ==============================================================================

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import Field

from storefront.schemas.base import BaseSchema


class CartItemAdd(BaseSchema):
    product_id: str
    variant_id: Optional[str] = None
    quantity: int = Field(1, ge=1)
    attributes: Optional[Dict[str, Any]] = None


class CartItemUpdate(BaseSchema):
    quantity: int = Field(..., ge=1)


class CartMergeRequest(BaseSchema):
    session_id: str = Field(..., min_length=1, max_length=128)


class CartProductInfo(BaseSchema):
    """Subset of the product shown next to a cart line."""

    id: str
    name: str
    slug: str
    sku: str
    price: Decimal
    is_active: bool
    in_stock: bool
    image: Optional[str] = None


class CartVariantInfo(BaseSchema):
    id: str
    name: str
    sku: str
    price: Optional[Decimal] = None
    quantity: int


class CartItemResponse(BaseSchema):
    id: str
    product_id: str
    variant_id: Optional[str] = None
    quantity: int
    price: Decimal
    total: Decimal
    attributes: Optional[Dict[str, Any]] = None
    product: Optional[CartProductInfo] = None
    variant: Optional[CartVariantInfo] = None


class CartResponse(BaseSchema):
    items: List[CartItemResponse] = Field(default_factory=list)
    total: Decimal = Decimal("0")
    item_count: int = 0


class CartCountResponse(BaseSchema):
    count: int
