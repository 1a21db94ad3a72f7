# ==============================================================================
# SHIPPING SCHEMAS - Methods, Zones, Rates, Rules and Quotes
# ==============================================================================

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List, Literal, Optional

from pydantic import Field, field_validator

from storefront.domain_models.shipping import (
    RuleAction,
    RuleCondition,
    RuleOperator,
    ShippingMethodType,
)
from storefront.schemas.base import BaseSchema, TimestampSchema

MethodType = Literal["flat_rate", "free", "weight_based", "price_based"]
ConditionValue = Literal["order_total", "order_weight", "product_count", "category", "product"]
OperatorValue = Literal[
    "equals",
    "greater_than",
    "less_than",
    "greater_than_or_equal",
    "less_than_or_equal",
    "contains",
    "not_contains",
]
ActionValue = Literal[
    "free_shipping",
    "discount_amount",
    "discount_percentage",
    "surcharge_amount",
    "surcharge_percentage",
    "hide_method",
]


# ==============================================================================
# METHODS
# ==============================================================================

class ShippingMethodCreate(BaseSchema):
    name: str = Field(..., min_length=1, max_length=255)
    code: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    type: MethodType = "flat_rate"
    settings: Optional[Dict[str, Any]] = None
    is_active: bool = True
    sort_order: int = 0


class ShippingMethodUpdate(BaseSchema):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    code: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    type: Optional[MethodType] = None
    settings: Optional[Dict[str, Any]] = None
    is_active: Optional[bool] = None
    sort_order: Optional[int] = None


class ShippingMethodResponse(TimestampSchema):
    id: str
    name: str
    code: str
    description: Optional[str] = None
    type: ShippingMethodType
    settings: Optional[Dict[str, Any]] = None
    is_active: bool
    sort_order: int


# ==============================================================================
# ZONES
# ==============================================================================

class ShippingZoneCreate(BaseSchema):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    countries: List[str] = Field(..., min_length=1)
    states: List[str] = Field(default_factory=list)
    zip_codes: List[str] = Field(default_factory=list)
    is_active: bool = True

    @field_validator("countries")
    @classmethod
    def normalize_countries(cls, v: List[str]) -> List[str]:
        return [c.upper() for c in v]


class ShippingZoneUpdate(BaseSchema):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    countries: Optional[List[str]] = None
    states: Optional[List[str]] = None
    zip_codes: Optional[List[str]] = None
    is_active: Optional[bool] = None


class ShippingZoneResponse(TimestampSchema):
    id: str
    name: str
    description: Optional[str] = None
    countries: List[str]
    states: Optional[List[str]] = None
    zip_codes: Optional[List[str]] = None
    is_active: bool


# ==============================================================================
# RATES
# ==============================================================================

class ShippingRateCreate(BaseSchema):
    method_id: str
    zone_id: str
    name: str = Field(..., min_length=1, max_length=255)
    cost: Decimal = Field(Decimal("0.00"), ge=0)
    min_order_amount: Optional[Decimal] = Field(None, ge=0)
    max_order_amount: Optional[Decimal] = Field(None, ge=0)
    min_weight: Optional[Decimal] = Field(None, ge=0)
    max_weight: Optional[Decimal] = Field(None, ge=0)
    delivery_time: Optional[str] = Field(None, max_length=100)
    is_active: bool = True
    sort_order: int = 0


class ShippingRateUpdate(BaseSchema):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    cost: Optional[Decimal] = Field(None, ge=0)
    min_order_amount: Optional[Decimal] = Field(None, ge=0)
    max_order_amount: Optional[Decimal] = Field(None, ge=0)
    min_weight: Optional[Decimal] = Field(None, ge=0)
    max_weight: Optional[Decimal] = Field(None, ge=0)
    delivery_time: Optional[str] = Field(None, max_length=100)
    is_active: Optional[bool] = None
    sort_order: Optional[int] = None


class ShippingRateResponse(ShippingRateCreate, TimestampSchema):
    id: str


# ==============================================================================
# RULES
# ==============================================================================

class ShippingRuleCreate(BaseSchema):
    name: str = Field(..., min_length=1, max_length=255)
    condition: ConditionValue
    operator: OperatorValue
    value: str = Field(..., max_length=255)
    action: ActionValue
    action_value: Optional[Decimal] = None
    method_code: Optional[str] = Field(None, max_length=100)
    is_active: bool = True
    priority: int = 0


class ShippingRuleUpdate(BaseSchema):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    condition: Optional[ConditionValue] = None
    operator: Optional[OperatorValue] = None
    value: Optional[str] = Field(None, max_length=255)
    action: Optional[ActionValue] = None
    action_value: Optional[Decimal] = None
    method_code: Optional[str] = Field(None, max_length=100)
    is_active: Optional[bool] = None
    priority: Optional[int] = None


class ShippingRuleResponse(TimestampSchema):
    id: str
    name: str
    condition: RuleCondition
    operator: RuleOperator
    value: str
    action: RuleAction
    action_value: Optional[Decimal] = None
    method_code: Optional[str] = None
    is_active: bool
    priority: int


# ==============================================================================
# QUOTES
# ==============================================================================

class ShippingQuoteItem(BaseSchema):
    product_id: str
    quantity: int = Field(1, ge=1)
    price: Optional[Decimal] = Field(None, ge=0)
    weight: Optional[Decimal] = Field(None, ge=0)
    category_id: Optional[str] = None


class ShippingQuoteAddress(BaseSchema):
    country: str = Field(..., min_length=2, max_length=2)
    state: Optional[str] = None
    zip_code: Optional[str] = None

    @field_validator("country")
    @classmethod
    def normalize_country(cls, v: str) -> str:
        return v.upper()


class ShippingQuoteRequest(BaseSchema):
    """``subtotal``/``weight`` are derived from ``items`` when omitted."""

    items: List[ShippingQuoteItem] = Field(default_factory=list)
    subtotal: Optional[Decimal] = Field(None, ge=0)
    weight: Optional[Decimal] = Field(None, ge=0)
    address: ShippingQuoteAddress


class ShippingQuoteOption(BaseSchema):
    rate_id: str
    method_id: str
    method_code: str
    method_name: str
    name: str
    cost: Decimal
    delivery_time: Optional[str] = None
    zone_id: str
