# storefront/repos/product_repo.py
from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from storefront.data.models.product import ProductModel


class ProductRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_product(self, product_id: int) -> ProductModel | None:
        return self.db.get(ProductModel, product_id)

    def list_active(self, offset: int, limit: int) -> tuple[list[ProductModel], int]:
        base = select(ProductModel).where(ProductModel.status == "active")
        total = self.db.execute(select(func.count()).select_from(base.subquery())).scalar_one()
        rows = self.db.execute(base.order_by(ProductModel.id).offset(offset).limit(limit)).scalars().all()
        return list(rows), total

    def create_product(self, product: ProductModel) -> ProductModel:
        self.db.add(product)
        self.db.commit()
        self.db.refresh(product)
        return product

    def update_product(self, product: ProductModel, new_data: dict) -> ProductModel:
        for key, value in new_data.items():
            setattr(product, key, value)
        self.db.commit()
        self.db.refresh(product)
        return product

    def lock_products(self, product_ids) -> dict[int, ProductModel]:
        """Re-read products for update. Row locks where the backend has them."""
        stmt = (
            select(ProductModel)
            .where(ProductModel.id.in_(list(product_ids)))
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return {p.id: p for p in self.db.execute(stmt).scalars().all()}

    def update_product_stock(self, product_id: int, delta: int) -> bool:
        """
        Atomically shift stock by ``delta``.

        A decrement only applies while enough stock is left
        (UPDATE ... WHERE stock >= n), so it can never go negative.
        Returns False when no row was changed.
        """
        stmt = update(ProductModel).where(ProductModel.id == product_id)
        if delta < 0:
            stmt = stmt.where(ProductModel.stock >= -delta)
        stmt = stmt.values(stock=ProductModel.stock + delta).execution_options(
            synchronize_session=False
        )
        return self.db.execute(stmt).rowcount == 1
