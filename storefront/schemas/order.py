# ==============================================================================
# ORDER SCHEMAS - E-commerce Orders
# ==============================================================================
# Request/Response schemas for order management
# ==============================================================================

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Literal, Optional

from pydantic import Field

from storefront.domain_models.order import OrderStatus, PaymentStatus
from storefront.schemas.base import BaseSchema, TimestampSchema

OrderStatusValue = Literal[
    "pending", "processing", "shipped", "delivered", "cancelled", "refunded",
]
PaymentStatusValue = Literal["pending", "paid", "failed", "refunded"]


class OrderItemResponse(TimestampSchema):
    """Schema for order item response."""

    id: str = Field(
        ...,
        description="Order item unique identifier",
    )
    order_id: str
    product_id: str
    variant_id: Optional[str] = None
    product_name: str = Field(
        ...,
        description="Product name at order time",
    )
    variant_name: Optional[str] = None
    sku: Optional[str] = None
    quantity: int = Field(
        ...,
        description="Ordered quantity",
    )
    price: Decimal = Field(
        ...,
        description="Unit price at order time",
    )
    total: Decimal = Field(
        ...,
        description="Line item total",
    )
    weight: Optional[Decimal] = None
    attributes: Optional[Dict[str, Any]] = None


class OrderResponse(TimestampSchema):
    """Schema for order response."""

    id: str
    user_id: Optional[str] = None
    order_number: str = Field(
        ...,
        description="Human-readable order number",
    )
    status: OrderStatus
    payment_status: PaymentStatus
    payment_method: Optional[str] = None
    currency: str
    subtotal: Decimal
    tax_amount: Decimal
    shipping_amount: Decimal
    discount_amount: Decimal
    total: Decimal
    shipping_address: Dict[str, Any]
    billing_address: Optional[Dict[str, Any]] = None
    notes: Optional[str] = None
    tracking_number: Optional[str] = None
    shipped_at: Optional[datetime] = None
    delivered_at: Optional[datetime] = None
    items: List[OrderItemResponse] = Field(default_factory=list)


class OrderStatusUpdate(BaseSchema):
    """Admin status change; ``tracking_number`` applies when shipping."""

    status: OrderStatusValue
    tracking_number: Optional[str] = Field(None, max_length=100)
    notes: Optional[str] = Field(None, max_length=2000)


class BulkStatusUpdate(BaseSchema):
    order_ids: List[str] = Field(..., min_length=1)
    status: OrderStatusValue


class BulkStatusFailure(BaseSchema):
    order_id: str
    reason: str


class BulkStatusResult(BaseSchema):
    updated: List[str] = Field(default_factory=list)
    failed: List[BulkStatusFailure] = Field(default_factory=list)


class OrderTracking(BaseSchema):
    order_number: str
    status: OrderStatus
    tracking_number: Optional[str] = None
    shipped_at: Optional[datetime] = None
    delivered_at: Optional[datetime] = None
