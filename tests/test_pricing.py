# ==============================================================================
# PRICING TESTS
# ==============================================================================
# Checkout arithmetic: shipping formula, tax, coupons and helpers
# ==============================================================================

import re
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from storefront.core.exceptions import NotFoundError, ValidationError
from storefront.services.pricing import (
    PricedLine,
    PricingConfig,
    build_quote,
    calculate_shipping,
    calculate_tax,
    evaluate_coupon,
    total_weight,
)
from storefront.utils.helpers import generate_order_number, quantize_money, slugify

CONFIG = PricingConfig(
    tax_enabled=True,
    tax_rate=Decimal("8.5"),
    free_shipping_threshold=Decimal("50"),
    flat_rate=Decimal("5.99"),
)


def line(price: str, quantity: int = 1, weight=None) -> PricedLine:
    return PricedLine(
        product_id="p1",
        quantity=quantity,
        price=Decimal(price),
        product_name="Widget",
        weight=Decimal(weight) if weight is not None else None,
    )


class TestShipping:

    def test_free_at_threshold(self):
        assert calculate_shipping(Decimal("50.00"), Decimal("1"), "US", CONFIG) == Decimal("0.00")

    def test_flat_rate_below_threshold(self):
        assert calculate_shipping(Decimal("49.99"), Decimal("1"), "US", CONFIG) == Decimal("5.99")

    def test_weight_surcharge_above_five_kg(self):
        # 5.99 + (7.5 - 5) * 2
        assert calculate_shipping(Decimal("20"), Decimal("7.5"), "US", CONFIG) == Decimal("10.99")

    def test_international_surcharge(self):
        assert calculate_shipping(Decimal("20"), Decimal("1"), "ca", CONFIG) == Decimal("20.99")

    def test_missing_weight_counts_half_kilo(self):
        lines = [line("1.00", quantity=4), line("1.00", quantity=1, weight="2")]
        assert total_weight(lines) == Decimal("4.0")


class TestTax:

    def test_tax_rounded_half_up(self):
        assert calculate_tax(Decimal("10.00"), CONFIG) == Decimal("0.85")
        assert calculate_tax(Decimal("0.30"), CONFIG) == Decimal("0.03")

    def test_tax_disabled(self):
        config = PricingConfig(tax_enabled=False, tax_rate=Decimal("8.5"))
        assert calculate_tax(Decimal("100"), config) == Decimal("0.00")


class TestQuote:

    def test_breakdown(self):
        quote = build_quote([line("12.50", quantity=2), line("3.33", quantity=3)], CONFIG, "US")

        assert quote.subtotal == Decimal("34.99")
        assert quote.tax_amount == Decimal("2.97")
        assert quote.shipping_amount == Decimal("5.99")
        assert quote.discount_amount == Decimal("0.00")
        assert quote.total == Decimal("43.95")
        assert quote.total_items == 5
        assert quote.currency == "USD"

    def test_tax_rate_zero_when_disabled(self):
        config = PricingConfig(tax_enabled=False, tax_rate=Decimal("8.5"))
        quote = build_quote([line("60")], config)

        assert quote.tax_rate == Decimal("0")
        assert quote.total == Decimal("60.00")


class TestCoupons:

    def test_percentage_coupon(self):
        result = evaluate_coupon("save10", Decimal("80"))

        assert result["code"] == "SAVE10"
        assert result["discount"] == Decimal("8.00")

    def test_percentage_coupon_capped(self):
        result = evaluate_coupon("WELCOME20", Decimal("1000"))
        assert result["discount"] == Decimal("50.00")

    def test_minimum_not_met(self):
        with pytest.raises(ValidationError):
            evaluate_coupon("SAVE10", Decimal("49.99"))

    def test_unknown_code(self):
        with pytest.raises(NotFoundError):
            evaluate_coupon("BOGUS", Decimal("100"))


class TestHelpers:

    def test_quantize_money(self):
        assert quantize_money("2.345") == Decimal("2.35")
        assert quantize_money(Decimal("2.344")) == Decimal("2.34")

    def test_order_number_format(self):
        number = generate_order_number(datetime(2024, 3, 9, tzinfo=timezone.utc))
        assert re.fullmatch(r"ORD-20240309-\d{6}", number)

    def test_slugify(self):
        assert slugify("Blue Shirt (XL)") == "blue-shirt-xl"
        assert slugify("***") == "item"
