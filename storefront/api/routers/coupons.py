# storefront/api/routers/coupons.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.api.deps import get_current_user, require_admin
from storefront.api.errors import to_http
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.errors import StorefrontError
from storefront.domain.schemas import CouponApplyIn, CouponApplyOut, CouponCreate, CouponOut
from storefront.services.cart_service import CartService
from storefront.services.coupon_service import CouponService
from storefront.utils.money import from_cents

router = APIRouter(prefix="/coupons", tags=["coupons"])


@router.post("/apply", response_model=CouponApplyOut)
def apply_coupon(
    payload: CouponApplyIn,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Preview a coupon against the caller's cart. Usage is only consumed
    when an order is placed with it.
    """
    try:
        subtotal = CartService(db).cart_subtotal_cents(user.id)
        applied = CouponService(db).resolve(payload.code, subtotal)
    except StorefrontError as e:
        raise to_http(e)
    return {
        "code": applied.discount.code,
        "discount": from_cents(applied.discount.amount_cents),
        "subtotal": from_cents(subtotal),
    }


@router.post("", response_model=CouponOut, status_code=201, dependencies=[Depends(require_admin)])
def create_coupon(payload: CouponCreate, db: Session = Depends(get_db)):
    try:
        return CouponService(db).create_coupon(payload)
    except StorefrontError as e:
        raise to_http(e)
