# ==============================================================================
# SHIPPING RULES TESTS
# ==============================================================================
# Zone matching, rate costing, rule actions and the quote pipeline
# ==============================================================================

from decimal import Decimal

import pytest

from storefront.domain_models.shipping import (
    RuleAction,
    RuleCondition,
    RuleOperator,
    ShippingMethodType,
)
from storefront.services.shipping_rules import (
    Candidate,
    Destination,
    MethodSpec,
    OrderProfile,
    RateSpec,
    RuleSpec,
    ZoneSpec,
    apply_rule,
    apply_rules,
    compare,
    quote,
    rate_cost,
    zip_matches,
    zone_matches,
)

STANDARD = MethodSpec(id="m1", code="standard", name="Standard")
EXPRESS = MethodSpec(id="m2", code="express", name="Express")
ORDER = OrderProfile(
    subtotal=Decimal("80"),
    weight=Decimal("3"),
    product_ids=["p1", "p2"],
    category_ids=["c1"],
    item_count=4,
)


def candidate(cost: str, code: str = "standard") -> Candidate:
    return Candidate(
        rate_id=f"r-{code}",
        method_id=f"m-{code}",
        method_code=code,
        method_name=code.title(),
        name=code.title(),
        cost=Decimal(cost),
        zone_id="z1",
    )


def rule(action: RuleAction, action_value=None, **overrides) -> RuleSpec:
    fields = {
        "id": "rule",
        "condition": RuleCondition.ORDER_TOTAL,
        "operator": RuleOperator.GREATER_THAN,
        "value": "0",
        "action": action,
        "action_value": Decimal(action_value) if action_value is not None else None,
    }
    fields.update(overrides)
    return RuleSpec(**fields)


class TestZones:

    @pytest.mark.parametrize("pattern,zip_code,expected", [
        ("90210", "90210", True),
        ("90*", "90210", True),
        ("90*", "91210", False),
        ("*10", "90210", True),
        ("9*1*", "90210", True),
        ("90*", "a90210", False),
        ("90*", None, False),
    ])
    def test_zip_patterns(self, pattern, zip_code, expected):
        assert zip_matches(pattern, zip_code) is expected

    def test_country_is_case_insensitive(self):
        zone = ZoneSpec(id="z", countries=["us"])
        assert zone_matches(zone, Destination(country="US"))

    def test_state_and_zip_restrictions(self):
        zone = ZoneSpec(id="z", countries=["US"], states=["CA"], zip_codes=["90*"])

        assert zone_matches(zone, Destination("US", "CA", "90001"))
        assert not zone_matches(zone, Destination("US", "NY", "90001"))
        assert not zone_matches(zone, Destination("US", "CA", "10001"))

    def test_inactive_zone_never_matches(self):
        zone = ZoneSpec(id="z", countries=["US"], is_active=False)
        assert not zone_matches(zone, Destination("US"))


class TestRateCost:

    def test_flat_rate_uses_rate_cost(self):
        rate = RateSpec(id="r", zone_id="z", method=STANDARD, name="Std", cost=Decimal("7.50"))
        assert rate_cost(rate, ORDER) == Decimal("7.50")

    def test_weight_based(self):
        method = MethodSpec(
            id="m", code="kg", name="By weight",
            type=ShippingMethodType.WEIGHT_BASED, settings={"cost_per_kg": "2.5"},
        )
        rate = RateSpec(id="r", zone_id="z", method=method, name="Kg", cost=Decimal("99"))

        assert rate_cost(rate, ORDER) == Decimal("7.5")

    def test_price_based(self):
        method = MethodSpec(
            id="m", code="pct", name="Percent",
            type=ShippingMethodType.PRICE_BASED, settings={"cost_percentage": 10},
        )
        rate = RateSpec(id="r", zone_id="z", method=method, name="Pct", cost=Decimal("0"))

        assert rate_cost(rate, ORDER) == Decimal("8")

    def test_never_negative(self):
        rate = RateSpec(id="r", zone_id="z", method=STANDARD, name="Std", cost=Decimal("-3"))
        assert rate_cost(rate, ORDER) == Decimal("0")


class TestCompare:

    def test_numeric_operators(self):
        assert compare(Decimal("80"), RuleOperator.GREATER_THAN, "50")
        assert compare(Decimal("80"), RuleOperator.LESS_THAN_OR_EQUAL, "80")
        assert not compare(Decimal("80"), RuleOperator.LESS_THAN, "80")
        assert compare(4, RuleOperator.EQUALS, "4")

    def test_non_numeric_expected_never_matches(self):
        assert not compare(Decimal("80"), RuleOperator.GREATER_THAN, "lots")

    def test_list_membership(self):
        assert compare(["c1", "c2"], RuleOperator.CONTAINS, "c1")
        assert compare(["c1"], RuleOperator.EQUALS, "c1")
        assert compare(["c1"], RuleOperator.NOT_CONTAINS, "c9")
        assert not compare(["c1"], RuleOperator.GREATER_THAN, "0")


class TestRuleActions:

    def test_free_shipping(self):
        result = apply_rule(rule(RuleAction.FREE_SHIPPING), [candidate("9.99")])

        assert result[0].cost == Decimal("0")
        assert result[0].name == "Standard (Free)"

    def test_discount_amount_floors_at_zero(self):
        result = apply_rule(rule(RuleAction.DISCOUNT_AMOUNT, "15"), [candidate("9.99")])
        assert result[0].cost == Decimal("0")

    def test_percentage_adjustments(self):
        discounted = apply_rule(rule(RuleAction.DISCOUNT_PERCENTAGE, "25"), [candidate("20")])
        assert discounted[0].cost == Decimal("15")

        surcharged = apply_rule(rule(RuleAction.SURCHARGE_PERCENTAGE, "10"), [candidate("20")])
        assert surcharged[0].cost == Decimal("22")

    def test_hide_method_by_code(self):
        candidates = [candidate("5", "standard"), candidate("15", "express")]

        result = apply_rule(rule(RuleAction.HIDE_METHOD, method_code="express"), candidates)

        assert [c.method_code for c in result] == ["standard"]

    def test_priority_order(self):
        # Surcharge runs first, then the discount removes a flat 5
        rules = [
            rule(RuleAction.DISCOUNT_AMOUNT, "5", id="low", priority=1),
            rule(RuleAction.SURCHARGE_PERCENTAGE, "50", id="high", priority=10),
        ]

        result = apply_rules(rules, [candidate("10")], ORDER)

        assert result[0].cost == Decimal("10")

    def test_inactive_and_unmatched_rules_skipped(self):
        rules = [
            rule(RuleAction.FREE_SHIPPING, is_active=False),
            rule(RuleAction.FREE_SHIPPING, id="heavy", condition=RuleCondition.ORDER_WEIGHT, value="10"),
        ]

        result = apply_rules(rules, [candidate("10")], ORDER)

        assert result[0].cost == Decimal("10")

    def test_category_condition(self):
        free_for_c1 = rule(
            RuleAction.FREE_SHIPPING,
            condition=RuleCondition.CATEGORY,
            operator=RuleOperator.CONTAINS,
            value="c1",
        )
        result = apply_rules([free_for_c1], [candidate("10")], ORDER)
        assert result[0].cost == Decimal("0")


class TestQuote:

    ZONES = [
        ZoneSpec(id="domestic", countries=["US"]),
        ZoneSpec(id="west", countries=["US"], states=["CA"]),
    ]

    def rates(self):
        return [
            RateSpec(id="r1", zone_id="domestic", method=EXPRESS, name="Express", cost=Decimal("19.999")),
            RateSpec(id="r2", zone_id="domestic", method=STANDARD, name="Standard", cost=Decimal("6")),
            RateSpec(
                id="r3", zone_id="west", method=STANDARD, name="West Coast", cost=Decimal("4"),
                max_weight=Decimal("1"),
            ),
            RateSpec(
                id="r4", zone_id="domestic", method=MethodSpec(
                    id="m3", code="legacy", name="Legacy", is_active=False,
                ), name="Legacy", cost=Decimal("1"),
            ),
        ]

    def test_sorted_cheapest_first_and_rounded(self):
        options = quote(Destination("US", "NY"), ORDER, self.ZONES, self.rates(), [])

        assert [o.rate_id for o in options] == ["r2", "r1"]
        assert options[1].cost == Decimal("20.00")

    def test_weight_band_excludes_rate(self):
        options = quote(Destination("US", "CA"), ORDER, self.ZONES, self.rates(), [])
        assert "r3" not in {o.rate_id for o in options}

        light = OrderProfile(subtotal=Decimal("10"), weight=Decimal("0.5"))
        options = quote(Destination("US", "CA"), light, self.ZONES, self.rates(), [])
        assert options[0].rate_id == "r3"

    def test_no_zone_no_options(self):
        assert quote(Destination("FR"), ORDER, self.ZONES, self.rates(), []) == []

    def test_rules_reorder_results(self):
        discount_express = rule(
            RuleAction.DISCOUNT_AMOUNT, "18", id="promo",
        )
        hide_standard = rule(
            RuleAction.HIDE_METHOD, id="hide", method_code="standard",
        )

        options = quote(
            Destination("US", "NY"), ORDER, self.ZONES, self.rates(), [discount_express, hide_standard],
        )

        assert [o.method_code for o in options] == ["express"]
        assert options[0].cost == Decimal("2.00")
