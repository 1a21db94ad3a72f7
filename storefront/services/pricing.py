# ==============================================================================
# PRICING - Checkout Total Calculator
# ==============================================================================
# Pure arithmetic over priced lines and store settings; no I/O
# ==============================================================================

"""
Checkout arithmetic.

All amounts are ``Decimal`` and rounded half-up to cents once per
component, so ``total == subtotal + tax + shipping - discount`` holds
exactly on the rounded values.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence

from storefront.core.constants import CheckoutConstants as CC, ErrorMessages
from storefront.core.exceptions import NotFoundError, ValidationError
from storefront.utils.helpers import quantize_money

ZERO = Decimal("0")


@dataclass(frozen=True)
class PricingConfig:
    """Store settings that drive tax and shipping."""

    tax_enabled: bool = False
    tax_rate: Decimal = ZERO
    free_shipping_threshold: Decimal = ZERO
    flat_rate: Decimal = ZERO
    currency: str = CC.DEFAULT_CURRENCY


@dataclass
class PricedLine:
    """One validated checkout line with its unit price and snapshot data."""

    product_id: str
    quantity: int
    price: Decimal
    product_name: str
    variant_id: Optional[str] = None
    variant_name: Optional[str] = None
    sku: Optional[str] = None
    weight: Optional[Decimal] = None
    image: Optional[str] = None
    attributes: Optional[Dict[str, Any]] = None
    track_quantity: bool = False

    @property
    def total(self) -> Decimal:
        return quantize_money(self.price * self.quantity)

    @property
    def display_name(self) -> str:
        if self.variant_name:
            return f"{self.product_name} ({self.variant_name})"
        return self.product_name

    def to_dict(self) -> Dict[str, Any]:
        return {
            "product_id": self.product_id,
            "variant_id": self.variant_id,
            "quantity": self.quantity,
            "price": quantize_money(self.price),
            "total": self.total,
            "product_name": self.product_name,
            "variant_name": self.variant_name,
            "sku": self.sku,
            "weight": self.weight,
            "image": self.image,
        }


@dataclass
class Quote:
    lines: List[PricedLine]
    subtotal: Decimal
    tax_amount: Decimal
    shipping_amount: Decimal
    discount_amount: Decimal
    total: Decimal
    currency: str
    tax_rate: Decimal
    total_items: int = field(default=0)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "items": [line.to_dict() for line in self.lines],
            "subtotal": self.subtotal,
            "tax_amount": self.tax_amount,
            "shipping_amount": self.shipping_amount,
            "discount_amount": self.discount_amount,
            "total": self.total,
            "total_items": self.total_items,
            "currency": self.currency,
            "tax_rate": self.tax_rate,
        }


# ==============================================================================
# COMPONENTS
# ==============================================================================

def total_weight(lines: Sequence[PricedLine]) -> Decimal:
    """Sum of unit weight x quantity; lines without a weight count 0.5 kg per unit."""
    weight = ZERO
    for line in lines:
        unit = line.weight if line.weight is not None else CC.DEFAULT_ITEM_WEIGHT_KG
        weight += Decimal(str(unit)) * line.quantity
    return weight


def calculate_shipping(
    subtotal: Decimal,
    weight: Decimal,
    country: Optional[str],
    config: PricingConfig,
) -> Decimal:
    """
    Shipping for a cart.

    Free when ``subtotal`` reaches the threshold (inclusive). Otherwise
    the flat rate, plus 2.00 per kg above 5 kg, plus 15.00 outside the US.
    """
    if subtotal >= config.free_shipping_threshold:
        return quantize_money(ZERO)

    shipping = config.flat_rate
    if weight > CC.WEIGHT_SURCHARGE_THRESHOLD_KG:
        shipping += (weight - CC.WEIGHT_SURCHARGE_THRESHOLD_KG) * CC.WEIGHT_SURCHARGE_PER_KG
    if country and country.upper() != CC.DOMESTIC_COUNTRY:
        shipping += CC.INTERNATIONAL_SURCHARGE
    return quantize_money(shipping)


def calculate_tax(subtotal: Decimal, config: PricingConfig) -> Decimal:
    if not config.tax_enabled:
        return quantize_money(ZERO)
    return quantize_money(subtotal * config.tax_rate / Decimal("100"))


def build_quote(
    lines: List[PricedLine],
    config: PricingConfig,
    country: Optional[str] = None,
    discount: Decimal = ZERO,
) -> Quote:
    """Price validated lines into a full checkout breakdown."""
    subtotal = quantize_money(sum((line.total for line in lines), ZERO))
    shipping = calculate_shipping(subtotal, total_weight(lines), country, config)
    tax = calculate_tax(subtotal, config)
    discount = quantize_money(discount)

    return Quote(
        lines=lines,
        subtotal=subtotal,
        tax_amount=tax,
        shipping_amount=shipping,
        discount_amount=discount,
        total=quantize_money(subtotal + tax + shipping - discount),
        currency=config.currency,
        tax_rate=config.tax_rate if config.tax_enabled else ZERO,
        total_items=sum(line.quantity for line in lines),
    )


# ==============================================================================
# COUPONS
# ==============================================================================

def evaluate_coupon(code: str, subtotal: Decimal) -> Dict[str, Any]:
    """
    Check a coupon code against the built-in coupon table.

    Raises:
        NotFoundError: Unknown code
        ValidationError: Subtotal below the coupon minimum
    """
    code = code.strip().upper()
    coupon = CC.COUPONS.get(code)
    if coupon is None:
        raise NotFoundError(
            message=ErrorMessages.COUPON_NOT_FOUND,
            resource_type="coupon",
            resource_id=code,
        )

    minimum = coupon["min_order_amount"]
    if subtotal < minimum:
        raise ValidationError(
            message=f"Minimum order amount of {quantize_money(minimum)} required for this coupon",
            errors=[{"field": "subtotal", "message": f"must be at least {quantize_money(minimum)}"}],
        )

    if coupon["type"] == "percentage":
        discount = min(subtotal * coupon["value"] / Decimal("100"), coupon["max_discount"])
    else:
        discount = min(coupon["value"], coupon["max_discount"])

    return {
        "code": code,
        "type": coupon["type"],
        "value": coupon["value"],
        "discount": quantize_money(discount),
        "description": coupon["description"],
    }
