from sqlalchemy import Column, Integer, ForeignKey, String, DateTime, JSON, Text
from sqlalchemy.orm import relationship
from datetime import datetime, timezone

from storefront.data.database import Base


def _now():
    return datetime.now(timezone.utc)


class OrderModel(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    status = Column(String(16), nullable=False, default="pending", index=True)  # OrderStatus

    # money in cents, total = subtotal - discount + tax + shipping
    subtotal_cents = Column(Integer, nullable=False)
    discount_cents = Column(Integer, nullable=False, default=0)
    tax_cents = Column(Integer, nullable=False)
    shipping_cents = Column(Integer, nullable=False)
    total_cents = Column(Integer, nullable=False)
    coupon_code = Column(String(64), nullable=True)

    shipping_method = Column(String(16), nullable=False, default="standard")
    shipping_address = Column(JSON, nullable=False)
    billing_address = Column(JSON, nullable=False)
    payment_method = Column(String(32), nullable=False)
    payment_status = Column(String(16), nullable=False, default="pending")  # PaymentStatus
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_now, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_now, onupdate=_now)

    items = relationship(
        "OrderItemModel",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItemModel.id",
    )


class OrderItemModel(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)

    # copied at purchase time, never follows later product edits
    name = Column(String(255), nullable=False)
    price_cents = Column(Integer, nullable=False)
    quantity = Column(Integer, nullable=False)

    order = relationship("OrderModel", back_populates="items")
