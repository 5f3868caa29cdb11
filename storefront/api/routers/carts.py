# storefront/api/routers/carts.py
from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from storefront.api.deps import get_current_user
from storefront.api.errors import to_http
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.errors import StorefrontError
from storefront.domain.schemas import (
    CartItemIn,
    CartItemOut,
    CartItemUpdate,
    CartOut,
)
from storefront.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["cart"])


def get_service(db: Session):
    return CartService(db)


@router.get("", response_model=CartOut)
def get_cart(
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return get_service(db).get_cart(user.id)


@router.post("", response_model=CartItemOut, status_code=201)
def add_item(
    payload: CartItemIn,
    response: Response,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        line, created = svc.add_item(user.id, payload.product_id, payload.quantity)
    except StorefrontError as e:
        raise to_http(e)
    if not created:
        response.status_code = 200
    return line


@router.put("/{item_id}", response_model=CartItemOut)
def update_item(
    item_id: int,
    payload: CartItemUpdate,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.update_item(user.id, item_id, payload.quantity)
    except StorefrontError as e:
        raise to_http(e)


@router.delete("/{item_id}", status_code=204)
def remove_item(
    item_id: int,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        svc.remove_item(user.id, item_id)
    except StorefrontError as e:
        raise to_http(e)


@router.delete("", status_code=204)
def clear_cart(
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    get_service(db).clear(user.id)
