# storefront/domain/pricing.py
"""Order pricing.

Everything here is a pure function of its inputs and works in integer cents:
subtotal is an exact sum of ``unit_price * quantity``, the only rounding
happens when a rate (tax, percentage coupon) is applied.
"""
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

from storefront.utils import settings
from storefront.utils.money import percent_of, to_cents


class ShippingMethod(str, Enum):
    STANDARD = "standard"
    EXPRESS = "express"


class CouponKind(str, Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


@dataclass(frozen=True)
class SnapshotLine:
    product_id: int
    name: str
    unit_price_cents: int
    quantity: int

    @property
    def line_subtotal_cents(self) -> int:
        return self.unit_price_cents * self.quantity


@dataclass(frozen=True)
class ShippingRule:
    flat_cents: int
    free_over_cents: int | None = None

    def cost(self, subtotal_cents: int) -> int:
        if self.free_over_cents is not None and subtotal_cents >= self.free_over_cents:
            return 0
        return self.flat_cents


@dataclass(frozen=True)
class PricingConfig:
    tax_rate: Decimal
    shipping: dict[ShippingMethod, ShippingRule] = field(default_factory=dict)

    @classmethod
    def from_settings(cls) -> "PricingConfig":
        threshold = (settings.FREE_SHIPPING_THRESHOLD or "").strip()
        return cls(
            tax_rate=settings.TAX_RATE,
            shipping={
                ShippingMethod.STANDARD: ShippingRule(
                    flat_cents=to_cents(settings.SHIPPING_STANDARD),
                    free_over_cents=to_cents(threshold) if threshold else None,
                ),
                ShippingMethod.EXPRESS: ShippingRule(
                    flat_cents=to_cents(settings.SHIPPING_EXPRESS),
                ),
            },
        )


@dataclass(frozen=True)
class Discount:
    code: str
    amount_cents: int


@dataclass(frozen=True)
class PriceBreakdown:
    subtotal_cents: int
    discount_cents: int
    tax_cents: int
    shipping_cents: int
    total_cents: int
    coupon_code: str | None = None

    @property
    def discounted_subtotal_cents(self) -> int:
        return self.subtotal_cents - self.discount_cents


def subtotal_of(lines) -> int:
    return sum(line.line_subtotal_cents for line in lines)


def coupon_discount(kind: CouponKind, value: int, subtotal_cents: int) -> int:
    """Discount in cents for a coupon, never more than the subtotal.

    ``value`` is a whole percent for percentage coupons and cents for fixed ones.
    """
    kind = CouponKind(kind)
    if value <= 0 or subtotal_cents <= 0:
        return 0
    if kind is CouponKind.PERCENTAGE:
        amount = percent_of(subtotal_cents, Decimal(min(value, 100)) / Decimal(100))
    else:
        amount = value
    return min(amount, subtotal_cents)


def price_order(
    lines,
    config: PricingConfig,
    discount: Discount | None = None,
    shipping_method: ShippingMethod = ShippingMethod.STANDARD,
) -> PriceBreakdown:
    lines = list(lines)
    if not lines:
        raise ValueError("pricing needs at least one line")
    for line in lines:
        if line.quantity < 1:
            raise ValueError(f"quantity must be positive for product {line.product_id}")
        if line.unit_price_cents < 0:
            raise ValueError(f"negative price for product {line.product_id}")

    subtotal = subtotal_of(lines)
    discount_cents = min(discount.amount_cents, subtotal) if discount else 0
    if discount_cents < 0:
        raise ValueError("negative discount")

    discounted = subtotal - discount_cents
    tax = percent_of(discounted, config.tax_rate)

    rule = config.shipping.get(ShippingMethod(shipping_method))
    if rule is None:
        raise ValueError(f"No shipping rule configured for {shipping_method}")
    shipping = rule.cost(discounted)

    total = discounted + tax + shipping
    if min(tax, shipping, total) < 0:
        raise ValueError("negative amount in price breakdown")

    return PriceBreakdown(
        subtotal_cents=subtotal,
        discount_cents=discount_cents,
        tax_cents=tax,
        shipping_cents=shipping,
        total_cents=total,
        coupon_code=discount.code if discount_cents else None,
    )
