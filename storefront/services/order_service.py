# storefront/services/order_service.py
from dataclasses import dataclass
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from storefront.data.models.order import OrderItemModel, OrderModel
from storefront.data.unit_of_work import UnitOfWork
from storefront.domain.errors import InvalidCoupon, StockChanged
from storefront.domain.pricing import (
    PriceBreakdown,
    PricingConfig,
    ShippingMethod,
    SnapshotLine,
    price_order,
    subtotal_of,
)
from storefront.domain.serializers import order_dict
from storefront.domain.status import OrderStatus, PaymentStatus
from storefront.repos.cart_repo import CartRepo
from storefront.repos.order_repo import OrderRepo
from storefront.repos.product_repo import ProductRepo
from storefront.services.cart_service import CartService
from storefront.services.coupon_service import AppliedCoupon, CouponService
from storefront.services.notification_service import NotificationService
from storefront.utils import settings
from storefront.utils.logging import get_logger
from storefront.utils.money import from_cents
from storefront.utils.retry import db_retry

logger = get_logger(__name__)


@dataclass(frozen=True)
class CheckoutDetails:
    shipping_address: dict
    billing_address: dict
    payment_method: str
    shipping_method: ShippingMethod = ShippingMethod.STANDARD
    notes: str | None = None


class OrderService:
    """
    Checkout: cart snapshot -> pricing -> one atomic write of the order.

    The order header, its items, the stock decrements, the coupon usage and
    the cart clean-up are committed together or not at all.
    """

    def __init__(
        self,
        db: Session,
        pricing: PricingConfig | None = None,
        coupon_policy: str | None = None,
        notifications: NotificationService | None = None,
    ):
        self.db = db
        self.repo = OrderRepo(db)
        self.products = ProductRepo(db)
        self.carts = CartRepo(db)
        self.cart_service = CartService(db)
        self.coupons = CouponService(db)
        self.pricing = pricing or PricingConfig.from_settings()
        self.coupon_policy = coupon_policy or settings.COUPON_POLICY
        self.notifications = notifications or NotificationService()

    def place_order(self, user_id: int, payload) -> Dict[str, Any]:
        """
        Use case: create an order from the caller's cart.

        1. snapshot the cart (EmptyCart / ProductUnavailable)
        2. resolve the coupon, if any, according to the coupon policy
        3. price the snapshot
        4. persist atomically (StockChanged / InvalidCoupon roll everything back)
        """
        lines = self.cart_service.snapshot(user_id)
        applied = self._resolve_coupon(payload.coupon_code, subtotal_of(lines))
        shipping_method = ShippingMethod(payload.shipping_method)

        details = CheckoutDetails(
            shipping_address=payload.shipping_address.model_dump(by_alias=True),
            billing_address=payload.billing_address.model_dump(by_alias=True),
            payment_method=payload.payment_method,
            shipping_method=shipping_method,
            notes=payload.notes,
        )
        pricing = price_order(
            lines,
            self.pricing,
            discount=applied.discount if applied else None,
            shipping_method=shipping_method,
        )
        try:
            order = self.persist(user_id, lines, pricing, details, applied)
        except InvalidCoupon as e:
            # usage limit reached between resolve and commit
            if applied is None or self.coupon_policy != "ignore":
                raise
            logger.info(f"Ignoring coupon {applied.discount.code!r} ({e.reason}), checking out without discount")
            pricing = price_order(lines, self.pricing, shipping_method=shipping_method)
            order = self.persist(user_id, lines, pricing, details)

        self.notifications.order_placed(user_id, order["id"], str(order["total"]))
        return order

    def _resolve_coupon(self, code: str | None, subtotal_cents: int) -> AppliedCoupon | None:
        if not code:
            return None
        try:
            return self.coupons.resolve(code, subtotal_cents)
        except InvalidCoupon as e:
            if self.coupon_policy != "ignore":
                raise
            logger.info(f"Ignoring coupon {code!r} ({e.reason}), checking out without discount")
            return None

    @db_retry()
    def persist(
        self,
        user_id: int,
        lines: List[SnapshotLine],
        pricing: PriceBreakdown,
        details: CheckoutDetails,
        applied: AppliedCoupon | None = None,
    ) -> Dict[str, Any]:
        with UnitOfWork(self.db, name=f"checkout user={user_id}"):
            self._recheck_stock(lines)

            order = OrderModel(
                user_id=user_id,
                status=OrderStatus.PENDING.value,
                payment_status=PaymentStatus.PENDING.value,
                subtotal_cents=pricing.subtotal_cents,
                discount_cents=pricing.discount_cents,
                coupon_code=pricing.coupon_code,
                tax_cents=pricing.tax_cents,
                shipping_cents=pricing.shipping_cents,
                total_cents=pricing.total_cents,
                shipping_method=details.shipping_method.value,
                shipping_address=details.shipping_address,
                billing_address=details.billing_address,
                payment_method=details.payment_method,
                notes=details.notes,
                items=[
                    OrderItemModel(
                        product_id=line.product_id,
                        name=line.name,
                        price_cents=line.unit_price_cents,
                        quantity=line.quantity,
                    )
                    for line in lines
                ],
            )
            self.repo.insert_order(order)

            for line in lines:
                if not self.products.update_product_stock(line.product_id, -line.quantity):
                    raise StockChanged(
                        "Stock changed while placing the order",
                        details=[{"productId": line.product_id, "requested": line.quantity}],
                    )

            if applied is not None and pricing.discount_cents:
                self.coupons.consume(applied)

            cleared = self.carts.clear(user_id)
            order_id = order.id

        logger.info(
            f"Order {order_id} created for user {user_id}: {len(lines)} item(s), "
            f"total {from_cents(pricing.total_cents)}, {cleared} cart line(s) cleared"
        )
        return order_dict(self.repo.find_order_by_id(order_id))

    def _recheck_stock(self, lines: List[SnapshotLine]):
        current = self.products.lock_products(line.product_id for line in lines)
        changed = []
        for line in lines:
            product = current.get(line.product_id)
            available = product.stock if product is not None else 0
            if product is None or product.status != "active" or available < line.quantity:
                changed.append({
                    "productId": line.product_id,
                    "name": line.name,
                    "requested": line.quantity,
                    "available": available,
                })
        if changed:
            raise StockChanged("Stock changed since the cart was read", details=changed)
