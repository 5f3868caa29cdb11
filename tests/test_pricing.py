from decimal import Decimal

import pytest

from storefront.domain.pricing import (
    CouponKind,
    Discount,
    PricingConfig,
    ShippingMethod,
    ShippingRule,
    SnapshotLine,
    coupon_discount,
    price_order,
)
from storefront.utils.money import from_cents, to_cents


def line(product_id, price, quantity, name="item"):
    return SnapshotLine(product_id=product_id, name=name, unit_price_cents=to_cents(price), quantity=quantity)


@pytest.fixture
def config():
    return PricingConfig(
        tax_rate=Decimal("0.08"),
        shipping={
            ShippingMethod.STANDARD: ShippingRule(flat_cents=999, free_over_cents=10000),
            ShippingMethod.EXPRESS: ShippingRule(flat_cents=1999),
        },
    )


def test_two_units_flat_shipping(flat_pricing):
    result = price_order([line(1, "20.00", 2)], flat_pricing)

    assert from_cents(result.subtotal_cents) == Decimal("40.00")
    assert from_cents(result.tax_cents) == Decimal("3.20")
    assert from_cents(result.shipping_cents) == Decimal("5.00")
    assert from_cents(result.total_cents) == Decimal("48.20")
    assert result.discount_cents == 0
    assert result.coupon_code is None


def test_percentage_coupon_taxes_discounted_subtotal(flat_pricing):
    discount = Discount(code="SAVE10", amount_cents=coupon_discount(CouponKind.PERCENTAGE, 10, 4000))
    result = price_order([line(1, "20.00", 2)], flat_pricing, discount=discount)

    assert result.discount_cents == 400
    assert from_cents(result.discounted_subtotal_cents) == Decimal("36.00")
    assert from_cents(result.tax_cents) == Decimal("2.88")
    assert from_cents(result.total_cents) == Decimal("43.88")
    assert result.coupon_code == "SAVE10"


def test_tax_rounds_once_on_the_whole_order(flat_pricing):
    # 3 x 1.05 taxed per line would be 3 x 0.08 = 0.24
    lines = [line(i, "1.05", 1) for i in (1, 2, 3)]
    result = price_order(lines, flat_pricing)

    assert result.subtotal_cents == 315
    assert result.tax_cents == 25


def test_subtotal_is_exact_sum_of_lines(flat_pricing):
    lines = [line(1, "19.99", 3), line(2, "0.01", 7), line(3, "123.45", 1)]
    result = price_order(lines, flat_pricing)

    assert result.subtotal_cents == 1999 * 3 + 7 + 12345


def test_total_is_sum_of_components(config):
    lines = [line(1, "12.34", 3), line(2, "7.77", 2)]
    result = price_order(lines, config, discount=Discount("FLAT5", 500))

    assert result.total_cents == (
        result.subtotal_cents - result.discount_cents + result.tax_cents + result.shipping_cents
    )


@pytest.mark.parametrize(
    "price, expected_shipping",
    [
        ("99.99", 999),
        ("100.00", 0),
        ("150.00", 0),
    ],
)
def test_standard_shipping_free_from_threshold(config, price, expected_shipping):
    result = price_order([line(1, price, 1)], config)
    assert result.shipping_cents == expected_shipping


def test_free_shipping_threshold_applies_after_discount(config):
    result = price_order([line(1, "110.00", 1)], config, discount=Discount("BIG", 2000))
    assert result.shipping_cents == 999


def test_express_shipping_is_never_free(config):
    result = price_order([line(1, "500.00", 1)], config, shipping_method=ShippingMethod.EXPRESS)
    assert result.shipping_cents == 1999


def test_unknown_shipping_method_for_config(flat_pricing):
    with pytest.raises(ValueError):
        price_order([line(1, "1.00", 1)], flat_pricing, shipping_method=ShippingMethod.EXPRESS)


def test_discount_is_capped_at_subtotal(flat_pricing):
    result = price_order([line(1, "3.00", 1)], flat_pricing, discount=Discount("HUGE", 10000))

    assert result.discount_cents == 300
    assert result.tax_cents == 0
    assert result.total_cents == 500


def test_pricing_requires_lines(flat_pricing):
    with pytest.raises(ValueError):
        price_order([], flat_pricing)


def test_pricing_rejects_zero_quantity(flat_pricing):
    with pytest.raises(ValueError):
        price_order([line(1, "1.00", 0)], flat_pricing)


@pytest.mark.parametrize(
    "kind, value, subtotal, expected",
    [
        (CouponKind.PERCENTAGE, 10, 4000, 400),
        (CouponKind.PERCENTAGE, 10, 1005, 101),  # 100.5 rounds half-up
        (CouponKind.PERCENTAGE, 150, 1000, 1000),
        (CouponKind.FIXED, 500, 4000, 500),
        (CouponKind.FIXED, 500, 300, 300),
        (CouponKind.FIXED, 0, 300, 0),
    ],
)
def test_coupon_discount(kind, value, subtotal, expected):
    assert coupon_discount(kind, value, subtotal) == expected


def test_pricing_from_settings():
    config = PricingConfig.from_settings()

    assert config.tax_rate == Decimal("0.08")
    assert config.shipping[ShippingMethod.STANDARD] == ShippingRule(flat_cents=999, free_over_cents=10000)
    assert config.shipping[ShippingMethod.EXPRESS] == ShippingRule(flat_cents=1999)
