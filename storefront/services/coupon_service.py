# storefront/services/coupon_service.py
from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from storefront.data.models.coupon import CouponModel
from storefront.domain.errors import InvalidCoupon, StorefrontError
from storefront.domain.pricing import CouponKind, Discount, coupon_discount
from storefront.domain.serializers import as_utc, coupon_dict
from storefront.repos.coupon_repo import CouponRepo
from storefront.utils.logging import get_logger
from storefront.utils.money import from_cents, to_cents

logger = get_logger(__name__)


@dataclass(frozen=True)
class AppliedCoupon:
    coupon_id: int
    discount: Discount


class CouponService:
    def __init__(self, db: Session):
        self.repo = CouponRepo(db)

    def resolve(self, code: str, subtotal_cents: int, now: datetime | None = None) -> AppliedCoupon:
        """
        Validate a coupon against a cart subtotal and compute its discount.
        Does not consume a usage, that happens inside the checkout unit of work.
        """
        now = now or datetime.now(timezone.utc)
        coupon = self.repo.find_by_code(code or "")

        if coupon is None or not coupon.is_active:
            raise InvalidCoupon("Invalid coupon code", reason="INVALID_COUPON")

        expires_at = as_utc(coupon.expires_at)
        if expires_at is not None and expires_at < now:
            raise InvalidCoupon("Coupon has expired", reason="COUPON_EXPIRED")

        if coupon.max_usages is not None and coupon.usage_count >= coupon.max_usages:
            raise InvalidCoupon("Coupon has reached its usage limit", reason="COUPON_LIMIT_REACHED")

        if coupon.min_order_cents is not None and subtotal_cents < coupon.min_order_cents:
            raise InvalidCoupon(
                f"Minimum order amount of {from_cents(coupon.min_order_cents)} required",
                reason="MIN_ORDER_NOT_MET",
            )

        amount = coupon_discount(CouponKind(coupon.kind), coupon.value, subtotal_cents)
        logger.info(f"Coupon {coupon.code} resolves to {amount} cents off {subtotal_cents}")
        return AppliedCoupon(coupon_id=coupon.id, discount=Discount(code=coupon.code, amount_cents=amount))

    def consume(self, applied: AppliedCoupon):
        if not self.repo.consume_usage(applied.coupon_id):
            raise InvalidCoupon("Coupon has reached its usage limit", reason="COUPON_LIMIT_REACHED")

    def create_coupon(self, payload) -> dict:
        code = payload.code.strip().upper()
        if self.repo.find_by_code(code):
            raise StorefrontError("Coupon code already exists")

        kind = CouponKind(payload.kind)
        if kind is CouponKind.PERCENTAGE:
            if payload.value != payload.value.to_integral_value() or payload.value > 100:
                raise StorefrontError("Percentage must be a whole number between 1 and 100")
            value = int(payload.value)
        else:
            value = to_cents(payload.value)

        coupon = self.repo.create_coupon(
            CouponModel(
                code=code,
                kind=kind.value,
                value=value,
                min_order_cents=to_cents(payload.min_order_amount) if payload.min_order_amount is not None else None,
                max_usages=payload.max_usages,
                is_active=payload.is_active,
                expires_at=as_utc(payload.expires_at).astimezone(timezone.utc) if payload.expires_at else None,
            )
        )
        logger.info(f"Coupon {coupon.code} created")
        return coupon_dict(coupon)
