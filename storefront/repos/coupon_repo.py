# storefront/repos/coupon_repo.py
from sqlalchemy import func, or_, select, update
from sqlalchemy.orm import Session

from storefront.data.models.coupon import CouponModel


class CouponRepo:
    def __init__(self, db: Session):
        self.db = db

    def find_by_code(self, code: str) -> CouponModel | None:
        stmt = select(CouponModel).where(func.upper(CouponModel.code) == code.strip().upper())
        return self.db.execute(stmt).scalar_one_or_none()

    def create_coupon(self, coupon: CouponModel) -> CouponModel:
        self.db.add(coupon)
        self.db.commit()
        self.db.refresh(coupon)
        return coupon

    def consume_usage(self, coupon_id: int) -> bool:
        # conditional increment, no-op once max_usages is reached
        stmt = (
            update(CouponModel)
            .where(
                CouponModel.id == coupon_id,
                CouponModel.is_active.is_(True),
                or_(
                    CouponModel.max_usages.is_(None),
                    CouponModel.usage_count < CouponModel.max_usages,
                ),
            )
            .values(usage_count=CouponModel.usage_count + 1)
            .execution_options(synchronize_session=False)
        )
        return self.db.execute(stmt).rowcount == 1
