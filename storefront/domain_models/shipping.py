# ==============================================================================
# SHIPPING MODELS - Zones, Methods, Rates and Rules
# ==============================================================================
# Persistent configuration for the shipping rule engine
# ==============================================================================

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List, Optional
import enum

from sqlalchemy import (
    JSON,
    Boolean,
    ForeignKey,
    Integer,
    String,
    Text,
    Enum as SQLEnum,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from storefront.domain_models.base import Money, SQLBase, TimestampMixin, Weight


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class ShippingMethodType(str, enum.Enum):
    FLAT_RATE = "flat_rate"
    FREE = "free"
    WEIGHT_BASED = "weight_based"
    PRICE_BASED = "price_based"


class RuleCondition(str, enum.Enum):
    ORDER_TOTAL = "order_total"
    ORDER_WEIGHT = "order_weight"
    PRODUCT_COUNT = "product_count"
    CATEGORY = "category"
    PRODUCT = "product"


class RuleOperator(str, enum.Enum):
    EQUALS = "equals"
    GREATER_THAN = "greater_than"
    LESS_THAN = "less_than"
    GREATER_THAN_OR_EQUAL = "greater_than_or_equal"
    LESS_THAN_OR_EQUAL = "less_than_or_equal"
    CONTAINS = "contains"
    NOT_CONTAINS = "not_contains"


class RuleAction(str, enum.Enum):
    FREE_SHIPPING = "free_shipping"
    DISCOUNT_AMOUNT = "discount_amount"
    DISCOUNT_PERCENTAGE = "discount_percentage"
    SURCHARGE_AMOUNT = "surcharge_amount"
    SURCHARGE_PERCENTAGE = "surcharge_percentage"
    HIDE_METHOD = "hide_method"


class ShippingMethod(SQLBase, TimestampMixin):
    """
    A carrier service offered to customers.

    ``settings`` holds method-specific parameters: ``cost_per_kg`` for
    weight-based methods, ``cost_percentage`` for price-based ones.
    """

    __tablename__ = "shipping_methods"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    code: Mapped[str] = mapped_column(String(100), unique=True, index=True, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    type: Mapped[ShippingMethodType] = mapped_column(
        SQLEnum(ShippingMethodType, values_callable=_enum_values),
        default=ShippingMethodType.FLAT_RATE,
        nullable=False,
    )
    settings: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    sort_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    rates: Mapped[List["ShippingRate"]] = relationship(
        "ShippingRate",
        back_populates="method",
        cascade="all, delete-orphan",
    )


class ShippingZone(SQLBase, TimestampMixin):
    """
    Geographic zone. ``countries`` is required; ``states`` and
    ``zip_codes`` narrow it further when non-empty. Zip patterns may
    use ``*`` as a wildcard.
    """

    __tablename__ = "shipping_zones"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    countries: Mapped[List[str]] = mapped_column(JSON, nullable=False)
    states: Mapped[Optional[List[str]]] = mapped_column(JSON, nullable=True)
    zip_codes: Mapped[Optional[List[str]]] = mapped_column(JSON, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    rates: Mapped[List["ShippingRate"]] = relationship(
        "ShippingRate",
        back_populates="zone",
        cascade="all, delete-orphan",
    )


class ShippingRate(SQLBase, TimestampMixin):
    """Price of one method within one zone, with optional amount/weight bands."""

    __tablename__ = "shipping_rates"

    method_id: Mapped[str] = mapped_column(
        ForeignKey("shipping_methods.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    zone_id: Mapped[str] = mapped_column(
        ForeignKey("shipping_zones.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    cost: Mapped[Decimal] = mapped_column(Money, default=Decimal("0.00"), nullable=False)
    min_order_amount: Mapped[Optional[Decimal]] = mapped_column(Money, nullable=True)
    max_order_amount: Mapped[Optional[Decimal]] = mapped_column(Money, nullable=True)
    min_weight: Mapped[Optional[Decimal]] = mapped_column(Weight, nullable=True)
    max_weight: Mapped[Optional[Decimal]] = mapped_column(Weight, nullable=True)
    delivery_time: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    sort_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    method: Mapped["ShippingMethod"] = relationship(
        "ShippingMethod",
        back_populates="rates",
        lazy="joined",
    )
    zone: Mapped["ShippingZone"] = relationship(
        "ShippingZone",
        back_populates="rates",
    )


class ShippingRule(SQLBase, TimestampMixin):
    """
    Condition/action rule applied to every candidate rate.

    Rules run in ``priority`` descending order. ``value`` is compared
    against the condition subject using ``operator``; ``action_value``
    parameterises the action; ``method_code`` names the method removed
    by ``hide_method``.
    """

    __tablename__ = "shipping_rules"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    condition: Mapped[RuleCondition] = mapped_column(
        SQLEnum(RuleCondition, values_callable=_enum_values),
        nullable=False,
    )
    operator: Mapped[RuleOperator] = mapped_column(
        SQLEnum(RuleOperator, values_callable=_enum_values),
        nullable=False,
    )
    value: Mapped[str] = mapped_column(String(255), nullable=False)
    action: Mapped[RuleAction] = mapped_column(
        SQLEnum(RuleAction, values_callable=_enum_values),
        nullable=False,
    )
    action_value: Mapped[Optional[Decimal]] = mapped_column(Money, nullable=True)
    method_code: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    priority: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
