# ==============================================================================
# CHECKOUT SCHEMAS - Quotes, Order Placement, Coupons
# ==============================================================================

from __future__ import annotations

from decimal import Decimal
from typing import List, Optional

from pydantic import EmailStr, Field

from storefront.schemas.address import AddressSnapshot
from storefront.schemas.base import BaseSchema


class CheckoutLine(BaseSchema):
    """One requested line: a product, optionally a variant, and a quantity."""

    product_id: str
    variant_id: Optional[str] = None
    quantity: int = Field(..., ge=1)


class CalculateRequest(BaseSchema):
    items: List[CheckoutLine] = Field(..., min_length=1)
    shipping_address: AddressSnapshot
    coupon_code: Optional[str] = None


class QuoteLine(BaseSchema):
    product_id: str
    variant_id: Optional[str] = None
    quantity: int
    price: Decimal
    total: Decimal
    product_name: str
    variant_name: Optional[str] = None
    sku: Optional[str] = None
    weight: Optional[Decimal] = None
    image: Optional[str] = None


class QuoteResponse(BaseSchema):
    """Priced checkout breakdown; identical input yields identical output."""

    items: List[QuoteLine]
    subtotal: Decimal
    tax_amount: Decimal
    shipping_amount: Decimal
    discount_amount: Decimal
    total: Decimal
    total_items: int
    currency: str
    tax_rate: Decimal


class CreateOrderRequest(BaseSchema):
    items: List[CheckoutLine] = Field(..., min_length=1)
    shipping_address: AddressSnapshot
    billing_address: Optional[AddressSnapshot] = None
    payment_method: str = Field(..., min_length=1, max_length=50)
    notes: Optional[str] = Field(None, max_length=2000)
    clear_cart: bool = True


class GuestOrderRequest(CreateOrderRequest):
    customer_email: EmailStr
    customer_name: str = Field(..., min_length=1, max_length=255)
    clear_cart: bool = False


class OrderPlacedResponse(BaseSchema):
    order_id: str
    order_number: str
    total: Decimal
    payment_status: str
    payment_method: str


class ShippingOption(BaseSchema):
    id: str
    name: str
    description: str
    price: Decimal
    estimated_days: str
    min_order_amount: Optional[Decimal] = None


class CouponRequest(BaseSchema):
    code: str = Field(..., min_length=1, max_length=50)
    subtotal: Decimal = Field(..., ge=0)


class CouponResponse(BaseSchema):
    code: str
    type: str
    value: Decimal
    discount: Decimal
    description: str
