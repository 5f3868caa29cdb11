# storefront/data/models/coupon.py
from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, Integer, String

from storefront.data.database import Base


class CouponModel(Base):
    __tablename__ = "coupons"

    id = Column(Integer, primary_key=True)
    code = Column(String(64), nullable=False, unique=True, index=True)  # stored upper-case

    kind = Column(String(16), nullable=False, default="percentage")  # percentage, fixed
    value = Column(Integer, nullable=False)  # whole percent or cents, depending on kind

    min_order_cents = Column(Integer, nullable=True)
    max_usages = Column(Integer, nullable=True)
    usage_count = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    expires_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
