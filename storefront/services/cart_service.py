# storefront/services/cart_service.py
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from storefront.data.models.cart_item import CartItemModel
from storefront.domain.errors import EmptyCart, NotFound, ProductUnavailable
from storefront.domain.pricing import SnapshotLine, subtotal_of
from storefront.repos.cart_repo import CartRepo
from storefront.repos.product_repo import ProductRepo
from storefront.utils.logging import get_logger
from storefront.utils.money import from_cents

logger = get_logger(__name__)


def unavailable_reason(product, quantity: int) -> str | None:
    if product is None:
        return "missing"
    if product.status != "active":
        return "inactive"
    if product.stock < quantity:
        return "insufficient_stock"
    return None


def unavailable_line(product_id: int, product, quantity: int, reason: str) -> Dict[str, Any]:
    return {
        "productId": product_id,
        "name": product.name if product is not None else None,
        "requested": quantity,
        "available": product.stock if product is not None else 0,
        "reason": reason,
    }


class CartService:
    """
    Cart use cases.
    commands (add, update, remove, clear) change cart lines,
    queries (get_cart, snapshot) only read.
    """

    def __init__(self, db: Session):
        self.repo = CartRepo(db)
        self.products = ProductRepo(db)

    # query
    def snapshot(self, user_id: int) -> List[SnapshotLine]:
        """
        Resolve the user's cart lines against live products.

        Raises EmptyCart when there is nothing to buy and ProductUnavailable
        listing every line that is missing, inactive or short of stock.
        """
        lines = self.repo.find_cart_lines(user_id)
        if not lines:
            raise EmptyCart("Cart is empty")

        problems = []
        snapshot = []
        for line in lines:
            product = line.product
            reason = unavailable_reason(product, line.quantity)
            if reason:
                problems.append(unavailable_line(line.product_id, product, line.quantity, reason))
                continue
            snapshot.append(
                SnapshotLine(
                    product_id=product.id,
                    name=product.name,
                    unit_price_cents=product.price_cents,
                    quantity=line.quantity,
                )
            )

        if problems:
            logger.info(f"Cart of user {user_id} has {len(problems)} unavailable line(s)")
            raise ProductUnavailable("Some cart items are unavailable", details=problems)

        return snapshot

    def get_cart(self, user_id: int) -> Dict[str, Any]:
        lines = self.repo.find_cart_lines(user_id)
        priced = [l for l in lines if l.product is not None]
        subtotal = sum(l.product.price_cents * l.quantity for l in priced)
        return {
            "items": [self._line_dict(l) for l in lines],
            "subtotal": from_cents(subtotal),
            "item_count": sum(l.quantity for l in lines),
        }

    def cart_subtotal_cents(self, user_id: int) -> int:
        return subtotal_of(self.snapshot(user_id))

    # commands
    def add_item(self, user_id: int, product_id: int, quantity: int) -> tuple[Dict[str, Any], bool]:
        """Add or merge a line. Returns (line, created)."""
        if quantity <= 0:
            raise ValueError("Quantity must be greater than 0")

        product = self.products.get_product(product_id)
        if product is None or product.status != "active":
            raise NotFound("Product not found")

        existing = self.repo.get_line_for_product(user_id, product_id)
        new_quantity = quantity + (existing.quantity if existing else 0)
        self._check_stock(product, new_quantity)

        if existing:
            logger.info(
                f"Product {product_id} already in cart of user {user_id}, "
                f"quantity {existing.quantity} -> {new_quantity}"
            )
            existing.quantity = new_quantity
            line = existing
        else:
            logger.info(f"Adding product {product_id} x{quantity} to cart of user {user_id}")
            line = self.repo.add_line(
                CartItemModel(user_id=user_id, product_id=product_id, quantity=quantity)
            )

        self.repo.commit()
        return self._line_dict(line), existing is None

    def update_item(self, user_id: int, item_id: int, quantity: int) -> Dict[str, Any]:
        if quantity <= 0:
            raise ValueError("Quantity must be greater than 0")

        line = self.repo.get_line(user_id, item_id)
        if not line:
            raise NotFound("Cart item not found")

        self._check_stock(line.product, quantity, product_id=line.product_id)
        line.quantity = quantity
        self.repo.commit()
        return self._line_dict(line)

    def remove_item(self, user_id: int, item_id: int):
        line = self.repo.get_line(user_id, item_id)
        if not line:
            raise NotFound("Cart item not found")

        self.repo.delete_line(line)
        self.repo.commit()
        logger.info(f"Cart item {item_id} removed for user {user_id}")

    def clear(self, user_id: int) -> int:
        removed = self.repo.clear(user_id)
        self.repo.commit()
        logger.info(f"Cleared {removed} line(s) from cart of user {user_id}")
        return removed

    @staticmethod
    def _check_stock(product, quantity: int, product_id: int | None = None):
        reason = unavailable_reason(product, quantity)
        if reason:
            pid = product.id if product is not None else product_id
            raise ProductUnavailable(
                "Insufficient stock",
                details=[unavailable_line(pid, product, quantity, reason)],
            )

    @staticmethod
    def _line_dict(line: CartItemModel) -> Dict[str, Any]:
        product = line.product
        return {
            "id": line.id,
            "product_id": line.product_id,
            "quantity": line.quantity,
            "created_at": line.created_at,
            "product": {
                "id": product.id,
                "name": product.name,
                "price": from_cents(product.price_cents),
                "stock": product.stock,
                "status": product.status,
            } if product is not None else None,
        }
