# storefront/data/seed.py
from datetime import datetime, timezone

from storefront.data.database import SessionLocal
from storefront.data.models import CartItemModel, CouponModel, ProductModel, UserModel
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

PRODUCTS = [
    ("Keyboard", 19999, 25),
    ("Mouse", 4950, 40),
    ("Monitor", 89900, 8),
    ("USB-C Cable", 999, 120),
    ("Laptop Stand", 3499, 15),
]

COUPONS = [
    dict(code="SAVE10", kind="percentage", value=10, min_order_cents=5000, max_usages=100),
    dict(code="SAVE20", kind="percentage", value=20, min_order_cents=10000, max_usages=50),
    dict(code="FLAT5", kind="fixed", value=500),
    dict(code="EXPIRED10", kind="percentage", value=10,
         expires_at=datetime(2020, 1, 1, tzinfo=timezone.utc)),
]


def seed(session_factory=SessionLocal) -> bool:
    """Insert demo data into an empty database. Returns False if data was already there."""
    db = session_factory()
    try:
        # not forcing: only seed if empty
        if db.query(UserModel).first():
            return False

        db.add_all([
            UserModel(id=1, name="Test User", role="user"),
            UserModel(id=2, name="Admin", role="admin"),
        ])
        products = [ProductModel(name=n, price_cents=p, stock=s) for n, p, s in PRODUCTS]
        db.add_all(products)
        db.add_all([CouponModel(**c) for c in COUPONS])
        db.flush()

        db.add_all([
            CartItemModel(user_id=1, product_id=products[2].id, quantity=2),
            CartItemModel(user_id=1, product_id=products[4].id, quantity=1),
        ])
        db.commit()
        logger.info(f"Seeded {len(products)} products and {len(COUPONS)} coupons")
        return True
    finally:
        db.close()
