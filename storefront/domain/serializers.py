# storefront/domain/serializers.py
"""Row -> plain dict, the shape the response models in ``schemas`` validate."""
from datetime import datetime, timezone
from typing import Any, Dict

from storefront.data.models.coupon import CouponModel
from storefront.data.models.order import OrderModel
from storefront.data.models.product import ProductModel
from storefront.domain.pricing import CouponKind
from storefront.utils.money import from_cents


def as_utc(dt: datetime | None) -> datetime | None:
    # sqlite hands back naive datetimes, they were written as UTC
    if dt is not None and dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def order_dict(order: OrderModel) -> Dict[str, Any]:
    return {
        "id": order.id,
        "user_id": order.user_id,
        "status": order.status,
        "subtotal": from_cents(order.subtotal_cents),
        "discount": from_cents(order.discount_cents),
        "coupon_code": order.coupon_code,
        "tax": from_cents(order.tax_cents),
        "shipping": from_cents(order.shipping_cents),
        "total": from_cents(order.total_cents),
        "shipping_method": order.shipping_method,
        "shipping_address": order.shipping_address,
        "billing_address": order.billing_address,
        "payment_method": order.payment_method,
        "payment_status": order.payment_status,
        "notes": order.notes,
        "created_at": order.created_at,
        "updated_at": order.updated_at,
        "items": [
            {
                "id": i.id,
                "product_id": i.product_id,
                "name": i.name,
                "price": from_cents(i.price_cents),
                "quantity": i.quantity,
            }
            for i in order.items
        ],
    }


def product_dict(p: ProductModel) -> Dict[str, Any]:
    return {
        "id": p.id,
        "name": p.name,
        "price": from_cents(p.price_cents),
        "stock": p.stock,
        "status": p.status,
    }


def coupon_dict(c: CouponModel) -> dict:
    fixed = c.kind == CouponKind.FIXED.value
    return {
        "id": c.id,
        "code": c.code,
        "kind": c.kind,
        "value": from_cents(c.value) if fixed else c.value,
        "min_order_amount": from_cents(c.min_order_cents) if c.min_order_cents is not None else None,
        "max_usages": c.max_usages,
        "usage_count": c.usage_count,
        "is_active": c.is_active,
        "expires_at": as_utc(c.expires_at),
    }
