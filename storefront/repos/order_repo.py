# storefront/repos/order_repo.py
from datetime import datetime, timezone

from sqlalchemy import asc, desc, func, select, update
from sqlalchemy.orm import Session, selectinload

from storefront.data.models.order import OrderModel

SORT_COLUMNS = {
    "createdAt": OrderModel.created_at,
    "total": OrderModel.total_cents,
}


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def insert_order(self, order: OrderModel) -> OrderModel:
        self.db.add(order)
        self.db.flush()
        return order

    def find_order_by_id(self, order_id: int) -> OrderModel | None:
        stmt = (
            select(OrderModel)
            .options(selectinload(OrderModel.items))
            .where(OrderModel.id == order_id)
            .execution_options(populate_existing=True)
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def list_orders(
        self,
        user_id: int | None = None,
        status: str | None = None,
        offset: int = 0,
        limit: int = 10,
        sort: str = "createdAt",
        direction: str = "desc",
    ) -> tuple[list[OrderModel], int]:
        base = select(OrderModel)
        if user_id is not None:
            base = base.where(OrderModel.user_id == user_id)
        if status:
            base = base.where(OrderModel.status == status)

        total = self.db.execute(select(func.count()).select_from(base.subquery())).scalar_one()

        order_fn = asc if direction == "asc" else desc
        column = SORT_COLUMNS.get(sort, OrderModel.created_at)
        stmt = (
            base.options(selectinload(OrderModel.items))
            .order_by(order_fn(column), order_fn(OrderModel.id))
            .offset(offset)
            .limit(limit)
        )
        return list(self.db.execute(stmt).scalars().all()), total

    def update_order_status(self, order_id: int, expected: str, new_data: dict) -> int:
        """
        Conditional update keyed on the status the caller read,
        UPDATE orders SET ... WHERE id = :id AND status = :expected.
        Returns rowcount, 0 means somebody else moved the order first.
        """
        stmt = (
            update(OrderModel)
            .where(OrderModel.id == order_id, OrderModel.status == expected)
            .values(**new_data, updated_at=datetime.now(timezone.utc))
            .execution_options(synchronize_session=False)
        )
        return self.db.execute(stmt).rowcount

    def update_payment_status(self, order_id: int, expected_status: str, expected_payment: str, new_data: dict) -> int:
        """
        Payment writes are keyed on both the order status and the payment
        status that were read, so a concurrent cancel makes this a no-op.
        """
        stmt = (
            update(OrderModel)
            .where(
                OrderModel.id == order_id,
                OrderModel.status == expected_status,
                OrderModel.payment_status == expected_payment,
            )
            .values(**new_data, updated_at=datetime.now(timezone.utc))
            .execution_options(synchronize_session=False)
        )
        return self.db.execute(stmt).rowcount
