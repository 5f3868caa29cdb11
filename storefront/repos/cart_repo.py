# storefront/repos/cart_repo.py
from sqlalchemy import delete, select
from sqlalchemy.orm import Session, joinedload

from storefront.data.models.cart_item import CartItemModel


class CartRepo:
    def __init__(self, db: Session):
        self.db = db

    def find_cart_lines(self, user_id: int) -> list[CartItemModel]:
        """Cart lines of a user with their product loaded (None if it is gone)."""
        stmt = (
            select(CartItemModel)
            .options(joinedload(CartItemModel.product))
            .where(CartItemModel.user_id == user_id)
            .order_by(CartItemModel.id)
        )
        return list(self.db.execute(stmt).scalars().all())

    def get_line(self, user_id: int, item_id: int) -> CartItemModel | None:
        stmt = select(CartItemModel).where(
            CartItemModel.id == item_id,
            CartItemModel.user_id == user_id,
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def get_line_for_product(self, user_id: int, product_id: int) -> CartItemModel | None:
        stmt = select(CartItemModel).where(
            CartItemModel.user_id == user_id,
            CartItemModel.product_id == product_id,
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def add_line(self, line: CartItemModel) -> CartItemModel:
        self.db.add(line)
        self.db.flush()
        return line

    def delete_line(self, line: CartItemModel):
        self.db.delete(line)
        self.db.flush()

    def clear(self, user_id: int) -> int:
        result = self.db.execute(
            delete(CartItemModel)
            .where(CartItemModel.user_id == user_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def commit(self):
        self.db.commit()
