# storefront/services/order_lifecycle.py
from typing import Any, Dict

from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel
from storefront.data.unit_of_work import UnitOfWork
from storefront.domain.errors import (
    Forbidden,
    IllegalTransition,
    NotCancellable,
    NotFound,
    StatusConflict,
)
from storefront.domain.serializers import order_dict
from storefront.domain.status import (
    CANCELLABLE,
    OrderStatus,
    PaymentStatus,
    is_legal_payment_transition,
    is_legal_transition,
)
from storefront.repos.order_repo import OrderRepo
from storefront.repos.product_repo import ProductRepo
from storefront.services.notification_service import NotificationService
from storefront.utils import settings
from storefront.utils.logging import get_logger
from storefront.utils.paging import page_window, paginated
from storefront.utils.retry import status_retry

logger = get_logger(__name__)


class OrderLifecycle:
    """
    Status state machine and order queries.

    Every status write is a conditional update on the status that was read,
    a lost race is retried from a fresh read (StatusConflict once retries
    run out). Cancellation restores stock in the same transaction.
    """

    def __init__(self, db: Session, notifications: NotificationService | None = None):
        self.db = db
        self.repo = OrderRepo(db)
        self.products = ProductRepo(db)
        self.notifications = notifications or NotificationService()

    # queries
    def get_order(self, order_id: int, user_id: int, admin: bool = False) -> Dict[str, Any]:
        return order_dict(self.load_owned(order_id, user_id, admin))

    def list_for_user(
        self,
        user_id: int,
        status: str | None = None,
        page: int = 1,
        limit: int = settings.DEFAULT_PAGE_SIZE,
        sort: str = "createdAt",
        direction: str = "desc",
    ) -> Dict[str, Any]:
        return self._list(user_id, status, page, limit, sort, direction)

    def list_all(
        self,
        status: str | None = None,
        page: int = 1,
        limit: int = settings.DEFAULT_PAGE_SIZE,
        sort: str = "createdAt",
        direction: str = "desc",
    ) -> Dict[str, Any]:
        return self._list(None, status, page, limit, sort, direction)

    def _list(self, user_id, status, page, limit, sort, direction) -> Dict[str, Any]:
        page, limit = page_window(page, limit)
        rows, total = self.repo.list_orders(
            user_id=user_id,
            status=OrderStatus(status).value if status else None,
            offset=(page - 1) * limit,
            limit=limit,
            sort=sort,
            direction=direction,
        )
        return paginated([order_dict(o) for o in rows], page, limit, total)

    # commands
    def transition(self, order_id: int, target, user_id: int, admin: bool = False) -> Dict[str, Any]:
        """Move an order to ``target``. Only the single next step is validated."""
        target = OrderStatus(target)
        if target is OrderStatus.CANCELLED:
            return self.cancel(order_id, user_id, admin=admin)
        return self._transition(order_id, target, user_id, admin)

    @status_retry()
    def _transition(self, order_id: int, target: OrderStatus, user_id: int, admin: bool) -> Dict[str, Any]:
        order = self.load_owned(order_id, user_id, admin)
        current = OrderStatus(order.status)

        if not is_legal_transition(current, target):
            raise IllegalTransition(
                f"Cannot move order from {current.value} to {target.value}",
                details={"from": current.value, "to": target.value},
            )

        with UnitOfWork(self.db, name=f"transition order={order_id}"):
            rowcount = self.repo.update_order_status(order_id, current.value, {"status": target.value})
            if rowcount == 0:
                raise StatusConflict(f"Order {order_id} changed status concurrently")

        logger.info(f"Order {order_id}: {current.value} -> {target.value}")
        self.notifications.order_status_changed(order.user_id, order_id, current.value, target.value)
        return order_dict(self.repo.find_order_by_id(order_id))

    @status_retry()
    def cancel(self, order_id: int, user_id: int, admin: bool = False) -> Dict[str, Any]:
        order = self.load_owned(order_id, user_id, admin)
        current = OrderStatus(order.status)

        if current not in CANCELLABLE:
            raise NotCancellable(
                f"Order in status {current.value} cannot be cancelled",
                details={"status": current.value},
            )

        new_data = {"status": OrderStatus.CANCELLED.value}
        payment = PaymentStatus(order.payment_status)
        if is_legal_payment_transition(payment, PaymentStatus.REFUNDED):
            new_data["payment_status"] = PaymentStatus.REFUNDED.value

        items = [(i.product_id, i.quantity) for i in order.items]
        with UnitOfWork(self.db, name=f"cancel order={order_id}"):
            if self.repo.update_order_status(order_id, current.value, new_data) == 0:
                raise StatusConflict(f"Order {order_id} changed status concurrently")
            for product_id, quantity in items:
                if not self.products.update_product_stock(product_id, quantity):
                    logger.warning(
                        f"Order {order_id}: product {product_id} no longer exists, "
                        f"{quantity} unit(s) not restocked"
                    )

        logger.info(f"Order {order_id} cancelled from {current.value}, {len(items)} line(s) restocked")
        self.notifications.order_status_changed(
            order.user_id, order_id, current.value, OrderStatus.CANCELLED.value
        )
        return order_dict(self.repo.find_order_by_id(order_id))

    def load_owned(self, order_id: int, user_id: int, admin: bool) -> OrderModel:
        order = self.repo.find_order_by_id(order_id)
        if order is None:
            raise NotFound("Order not found")
        if not admin and order.user_id != user_id:
            raise Forbidden("You do not have access to this order")
        return order
