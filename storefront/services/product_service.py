# storefront/services/product_service.py
from typing import Any, Dict

from sqlalchemy.orm import Session

from storefront.data.models.product import ProductModel
from storefront.domain.errors import NotFound
from storefront.domain.serializers import product_dict
from storefront.repos.product_repo import ProductRepo
from storefront.utils.logging import get_logger
from storefront.utils.money import to_cents
from storefront.utils.paging import page_window, paginated

logger = get_logger(__name__)


class ProductService:
    def __init__(self, db: Session):
        self.repo = ProductRepo(db)

    def get_product(self, product_id: int) -> Dict[str, Any]:
        product = self.repo.get_product(product_id)
        if not product:
            raise NotFound("Product not found")
        return product_dict(product)

    def list_products(self, page: int, limit: int) -> Dict[str, Any]:
        page, limit = page_window(page, limit)
        rows, total = self.repo.list_active((page - 1) * limit, limit)
        return paginated([product_dict(p) for p in rows], page, limit, total)

    def create_product(self, payload) -> Dict[str, Any]:
        product = self.repo.create_product(
            ProductModel(
                name=payload.name,
                price_cents=to_cents(payload.price),
                stock=payload.stock,
                status=payload.status,
            )
        )
        logger.info(f"Product {product.id} created: {product.name}")
        return product_dict(product)

    def update_product(self, product_id: int, payload) -> Dict[str, Any]:
        product = self.repo.get_product(product_id)
        if not product:
            raise NotFound("Product not found")

        new_data = payload.model_dump(exclude_unset=True, exclude_none=True)
        if "price" in new_data:
            new_data["price_cents"] = to_cents(new_data.pop("price"))

        product = self.repo.update_product(product, new_data)
        logger.info(f"Product {product_id} updated: {sorted(new_data)}")
        return product_dict(product)

    def deactivate_product(self, product_id: int):
        # order items keep referencing the row, so it is hidden rather than deleted
        product = self.repo.get_product(product_id)
        if not product:
            raise NotFound("Product not found")
        self.repo.update_product(product, {"status": "inactive"})
        logger.info(f"Product {product_id} deactivated")
