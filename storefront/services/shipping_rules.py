# ==============================================================================
# SHIPPING RULES - Zone Matching, Rate Costing and Rule Actions
# ==============================================================================
# Pure functions over plain dataclasses; the service layer loads rows
# from the database and hands them in
# ==============================================================================

"""
Shipping rate engine.

``quote`` runs the whole pipeline:

1. keep zones whose countries, states and zip patterns match the address
2. cost every active rate (with an active method) of those zones that
   passes its order amount / weight bands
3. apply active rules, highest priority first, to the candidate list
4. sort candidates by cost
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

from storefront.domain_models.shipping import (
    RuleAction,
    RuleCondition,
    RuleOperator,
    ShippingMethodType,
)
from storefront.utils.helpers import quantize_money

ZERO = Decimal("0")
HUNDRED = Decimal("100")


# ==============================================================================
# INPUT TYPES
# ==============================================================================

@dataclass(frozen=True)
class Destination:
    country: str
    state: Optional[str] = None
    zip_code: Optional[str] = None


@dataclass(frozen=True)
class OrderProfile:
    """What the rules look at: money, weight and the lines themselves."""

    subtotal: Decimal
    weight: Decimal
    product_ids: Sequence[str] = ()
    category_ids: Sequence[str] = ()
    item_count: int = 0


@dataclass(frozen=True)
class ZoneSpec:
    id: str
    countries: Sequence[str]
    states: Sequence[str] = ()
    zip_codes: Sequence[str] = ()
    is_active: bool = True


@dataclass(frozen=True)
class MethodSpec:
    id: str
    code: str
    name: str
    type: ShippingMethodType = ShippingMethodType.FLAT_RATE
    settings: Dict[str, Any] = field(default_factory=dict)
    is_active: bool = True


@dataclass(frozen=True)
class RateSpec:
    id: str
    zone_id: str
    method: MethodSpec
    name: str
    cost: Decimal
    min_order_amount: Optional[Decimal] = None
    max_order_amount: Optional[Decimal] = None
    min_weight: Optional[Decimal] = None
    max_weight: Optional[Decimal] = None
    delivery_time: Optional[str] = None
    is_active: bool = True
    sort_order: int = 0


@dataclass(frozen=True)
class RuleSpec:
    id: str
    condition: RuleCondition
    operator: RuleOperator
    value: str
    action: RuleAction
    action_value: Optional[Decimal] = None
    method_code: Optional[str] = None
    priority: int = 0
    is_active: bool = True


@dataclass
class Candidate:
    """A priced shipping option; rules mutate ``cost`` and ``name`` in place."""

    rate_id: str
    method_id: str
    method_code: str
    method_name: str
    name: str
    cost: Decimal
    zone_id: str
    delivery_time: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rate_id": self.rate_id,
            "method_id": self.method_id,
            "method_code": self.method_code,
            "method_name": self.method_name,
            "name": self.name,
            "cost": quantize_money(self.cost),
            "delivery_time": self.delivery_time,
            "zone_id": self.zone_id,
        }


# ==============================================================================
# ZONES
# ==============================================================================

def zip_matches(pattern: str, zip_code: Optional[str]) -> bool:
    """
    Match a zip code against a pattern where ``*`` stands for any run of characters.

    Example:
        >>> zip_matches("90*", "90210")
        True
    """
    if zip_code is None:
        return False
    if "*" not in pattern:
        return pattern == zip_code
    regex = ".*".join(re.escape(part) for part in pattern.split("*"))
    return re.fullmatch(regex, zip_code) is not None


def zone_matches(zone: ZoneSpec, destination: Destination) -> bool:
    if not zone.is_active:
        return False
    if destination.country.upper() not in {c.upper() for c in zone.countries}:
        return False
    if zone.states and destination.state not in zone.states:
        return False
    if zone.zip_codes and not any(zip_matches(p, destination.zip_code) for p in zone.zip_codes):
        return False
    return True


def matching_zones(zones: Iterable[ZoneSpec], destination: Destination) -> List[ZoneSpec]:
    return [zone for zone in zones if zone_matches(zone, destination)]


# ==============================================================================
# RATES
# ==============================================================================

def within_bands(rate: RateSpec, order: OrderProfile) -> bool:
    if rate.min_order_amount is not None and order.subtotal < rate.min_order_amount:
        return False
    if rate.max_order_amount is not None and order.subtotal > rate.max_order_amount:
        return False
    if rate.min_weight is not None and order.weight < rate.min_weight:
        return False
    if rate.max_weight is not None and order.weight > rate.max_weight:
        return False
    return True


def _setting(method: MethodSpec, key: str) -> Optional[Decimal]:
    value = (method.settings or {}).get(key)
    if value in (None, ""):
        return None
    return Decimal(str(value))


def rate_cost(rate: RateSpec, order: OrderProfile) -> Decimal:
    """
    Cost of one rate for an order.

    Weight-based methods charge ``weight * cost_per_kg``; price-based
    methods charge ``subtotal * cost_percentage / 100``; everything else
    uses the rate's own cost. Never negative.
    """
    cost = Decimal(rate.cost)
    method_type = ShippingMethodType(rate.method.type)

    if method_type == ShippingMethodType.WEIGHT_BASED:
        per_kg = _setting(rate.method, "cost_per_kg")
        if per_kg is not None:
            cost = order.weight * per_kg
    elif method_type == ShippingMethodType.PRICE_BASED:
        percentage = _setting(rate.method, "cost_percentage")
        if percentage is not None:
            cost = order.subtotal * percentage / HUNDRED

    return max(ZERO, cost)


def price_rates(
    rates: Iterable[RateSpec],
    zone_ids: Iterable[str],
    order: OrderProfile,
) -> List[Candidate]:
    """Cost every usable rate of the given zones, in ``sort_order``."""
    zone_ids = set(zone_ids)
    usable = [
        rate for rate in rates
        if rate.zone_id in zone_ids and rate.is_active and rate.method.is_active
    ]
    usable.sort(key=lambda r: r.sort_order)

    return [
        Candidate(
            rate_id=rate.id,
            method_id=rate.method.id,
            method_code=rate.method.code,
            method_name=rate.method.name,
            name=rate.name,
            cost=rate_cost(rate, order),
            zone_id=rate.zone_id,
            delivery_time=rate.delivery_time,
        )
        for rate in usable
        if within_bands(rate, order)
    ]


# ==============================================================================
# RULES
# ==============================================================================

def _as_decimal(value: str) -> Optional[Decimal]:
    try:
        return Decimal(str(value).strip())
    except ArithmeticError:
        return None


def compare(actual: Union[Decimal, int, Sequence[str]], operator: RuleOperator, expected: str) -> bool:
    """
    Evaluate ``actual <operator> expected``.

    List subjects (product and category IDs) support ``equals``/``contains``
    as membership and ``not_contains`` as its negation; numeric operators
    never match a list.
    """
    operator = RuleOperator(operator)

    if isinstance(actual, (list, tuple)):
        if operator in (RuleOperator.EQUALS, RuleOperator.CONTAINS):
            return expected in actual
        if operator == RuleOperator.NOT_CONTAINS:
            return expected not in actual
        return False

    if operator == RuleOperator.CONTAINS:
        return expected in str(actual)
    if operator == RuleOperator.NOT_CONTAINS:
        return expected not in str(actual)

    target = _as_decimal(expected)
    if target is None:
        return False
    value = Decimal(actual)

    if operator == RuleOperator.EQUALS:
        return value == target
    if operator == RuleOperator.GREATER_THAN:
        return value > target
    if operator == RuleOperator.LESS_THAN:
        return value < target
    if operator == RuleOperator.GREATER_THAN_OR_EQUAL:
        return value >= target
    if operator == RuleOperator.LESS_THAN_OR_EQUAL:
        return value <= target
    return False


def rule_applies(rule: RuleSpec, order: OrderProfile) -> bool:
    condition = RuleCondition(rule.condition)
    subjects = {
        RuleCondition.ORDER_TOTAL: order.subtotal,
        RuleCondition.ORDER_WEIGHT: order.weight,
        RuleCondition.PRODUCT_COUNT: order.item_count,
        RuleCondition.CATEGORY: list(order.category_ids),
        RuleCondition.PRODUCT: list(order.product_ids),
    }
    return compare(subjects[condition], rule.operator, rule.value)


def apply_rule(rule: RuleSpec, candidates: List[Candidate]) -> List[Candidate]:
    """Apply one rule's action to every candidate. ``hide_method`` filters the list."""
    action = RuleAction(rule.action)
    amount = Decimal(rule.action_value) if rule.action_value is not None else ZERO

    if action == RuleAction.HIDE_METHOD:
        code = rule.method_code or rule.value
        return [c for c in candidates if c.method_code != code]

    for candidate in candidates:
        if action == RuleAction.FREE_SHIPPING:
            candidate.cost = ZERO
            candidate.name = f"{candidate.name} (Free)"
        elif action == RuleAction.DISCOUNT_AMOUNT:
            candidate.cost = max(ZERO, candidate.cost - amount)
        elif action == RuleAction.DISCOUNT_PERCENTAGE:
            candidate.cost = max(ZERO, candidate.cost * (1 - amount / HUNDRED))
        elif action == RuleAction.SURCHARGE_AMOUNT:
            candidate.cost = candidate.cost + amount
        elif action == RuleAction.SURCHARGE_PERCENTAGE:
            candidate.cost = candidate.cost * (1 + amount / HUNDRED)
    return candidates


def apply_rules(rules: Iterable[RuleSpec], candidates: List[Candidate], order: OrderProfile) -> List[Candidate]:
    active = sorted((r for r in rules if r.is_active), key=lambda r: r.priority, reverse=True)
    for rule in active:
        if rule_applies(rule, order):
            candidates = apply_rule(rule, candidates)
    return candidates


# ==============================================================================
# PIPELINE
# ==============================================================================

def quote(
    destination: Destination,
    order: OrderProfile,
    zones: Iterable[ZoneSpec],
    rates: Iterable[RateSpec],
    rules: Iterable[RuleSpec],
) -> List[Candidate]:
    """Available shipping options for ``order`` at ``destination``, cheapest first."""
    zone_ids = [zone.id for zone in matching_zones(zones, destination)]
    if not zone_ids:
        return []

    candidates = price_rates(rates, zone_ids, order)
    candidates = apply_rules(rules, candidates, order)

    for candidate in candidates:
        candidate.cost = quantize_money(candidate.cost)
    return sorted(candidates, key=lambda c: c.cost)
