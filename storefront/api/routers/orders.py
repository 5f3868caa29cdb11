# storefront/api/routers/orders.py
from typing import Literal

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from storefront.api.deps import get_current_user, require_admin
from storefront.api.errors import to_http
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.errors import StorefrontError
from storefront.domain.schemas import OrderCreate, OrderOut, OrderPage, OrderStatusUpdate
from storefront.domain.status import OrderStatus
from storefront.services.order_lifecycle import OrderLifecycle
from storefront.services.order_service import OrderService
from storefront.utils.settings import DEFAULT_PAGE_SIZE

router = APIRouter(prefix="/orders", tags=["orders"])

SortField = Literal["createdAt", "total"]
SortDirection = Literal["asc", "desc"]


@router.post("", response_model=OrderOut, status_code=201)
def create_order(
    payload: OrderCreate,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Checkout the caller's cart into a new pending order.
    Nothing is written unless the whole order goes through.
    """
    svc = OrderService(db)
    try:
        return svc.place_order(user.id, payload)
    except StorefrontError as e:
        raise to_http(e)


@router.get("", response_model=OrderPage)
def list_orders(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1),
    status: OrderStatus | None = None,
    sort: SortField = "createdAt",
    order: SortDirection = "desc",
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return OrderLifecycle(db).list_for_user(
        user.id, status=status, page=page, limit=limit, sort=sort, direction=order
    )


# admin routes are declared before /{order_id} so "admin" is never parsed as an id
@router.get("/admin", response_model=OrderPage)
def list_all_orders(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1),
    status: OrderStatus | None = None,
    sort: SortField = "createdAt",
    order: SortDirection = "desc",
    admin: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return OrderLifecycle(db).list_all(status=status, page=page, limit=limit, sort=sort, direction=order)


@router.put("/admin/{order_id}/status", response_model=OrderOut)
def update_order_status(
    order_id: int,
    payload: OrderStatusUpdate,
    admin: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    try:
        return OrderLifecycle(db).transition(order_id, payload.status, admin.id, admin=True)
    except StorefrontError as e:
        raise to_http(e)


@router.get("/{order_id}", response_model=OrderOut)
def get_order(
    order_id: int,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        return OrderLifecycle(db).get_order(order_id, user.id, admin=user.is_admin)
    except StorefrontError as e:
        raise to_http(e)


@router.put("/{order_id}/cancel", response_model=OrderOut)
def cancel_order(
    order_id: int,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        return OrderLifecycle(db).cancel(order_id, user.id)
    except StorefrontError as e:
        raise to_http(e)
