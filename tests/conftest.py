"""Shared fixtures: in-memory database, API client and data factories."""
import os

# must be set before storefront.utils.settings is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "1"
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ["TAX_RATE"] = "0.08"
os.environ["SHIPPING_STANDARD"] = "9.99"
os.environ["SHIPPING_EXPRESS"] = "19.99"
os.environ["FREE_SHIPPING_THRESHOLD"] = "100.00"
os.environ["COUPON_POLICY"] = "reject"

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from storefront.data.database import Base, SessionLocal, engine, init_db
from storefront.data.models import CartItemModel, CouponModel, ProductModel, UserModel
from storefront.domain.pricing import PricingConfig, ShippingMethod, ShippingRule
from storefront.domain.schemas import OrderCreate
from storefront.main import app
from storefront.utils.money import to_cents

ADDRESS = {
    "street": "123 Main Street",
    "city": "Springfield",
    "state": "IL",
    "zipCode": "62701",
    "country": "US",
}


@pytest.fixture
def schema():
    init_db()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db(schema):
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def client(schema):
    return TestClient(app)


@pytest.fixture
def flat_pricing():
    """8% tax and a flat 5.00 standard shipping, no free-shipping threshold."""
    return PricingConfig(
        tax_rate=Decimal("0.08"),
        shipping={ShippingMethod.STANDARD: ShippingRule(flat_cents=500)},
    )


@pytest.fixture
def make_user(db):
    def _make(user_id: int, role: str = "user", name: str | None = None) -> int:
        db.add(UserModel(id=user_id, name=name or f"user-{user_id}", role=role))
        db.commit()
        return user_id

    return _make


@pytest.fixture
def make_product(db):
    def _make(name: str = "Widget", price: str = "20.00", stock: int = 10, status: str = "active") -> int:
        product = ProductModel(name=name, price_cents=to_cents(price), stock=stock, status=status)
        db.add(product)
        db.commit()
        return product.id

    return _make


@pytest.fixture
def add_to_cart(db):
    def _add(user_id: int, product_id: int, quantity: int) -> int:
        line = CartItemModel(user_id=user_id, product_id=product_id, quantity=quantity)
        db.add(line)
        db.commit()
        return line.id

    return _add


@pytest.fixture
def make_coupon(db):
    def _make(code: str, kind: str = "percentage", value: int = 10, **extra) -> int:
        coupon = CouponModel(code=code, kind=kind, value=value, **extra)
        db.add(coupon)
        db.commit()
        return coupon.id

    return _make


@pytest.fixture
def stock_of(db):
    def _stock(product_id: int) -> int:
        db.expire_all()
        return db.get(ProductModel, product_id).stock

    return _stock


def headers(user_id: int) -> dict:
    return {"X-User-Id": str(user_id)}


def checkout_body(**overrides) -> dict:
    body = {
        "shippingAddress": dict(ADDRESS),
        "billingAddress": dict(ADDRESS),
        "paymentMethod": "credit_card",
    }
    body.update(overrides)
    return body


def checkout_payload(**overrides) -> OrderCreate:
    return OrderCreate.model_validate(checkout_body(**overrides))
