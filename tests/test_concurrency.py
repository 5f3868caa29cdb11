"""Two checkouts racing for the last unit, each on its own connection."""
import threading
from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from storefront.data.database import Base
from storefront.data.models import CartItemModel, OrderModel, ProductModel, UserModel
from storefront.domain.errors import StockChanged
from storefront.domain.pricing import PricingConfig, ShippingMethod, ShippingRule, price_order
from storefront.services.cart_service import CartService
from storefront.services.order_service import CheckoutDetails, OrderService

from tests.conftest import ADDRESS

PRICING = PricingConfig(
    tax_rate=Decimal("0.08"),
    shipping={ShippingMethod.STANDARD: ShippingRule(flat_cents=500)},
)


@pytest.fixture
def file_sessions(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'race.db'}",
        connect_args={"check_same_thread": False, "timeout": 10},
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(bind=engine, autoflush=False)
    engine.dispose()


def test_two_checkouts_for_the_last_unit(file_sessions):
    with file_sessions() as setup:
        setup.add_all([UserModel(id=1, name="a"), UserModel(id=2, name="b")])
        product = ProductModel(name="Last one", price_cents=1000, stock=1)
        setup.add(product)
        setup.flush()
        setup.add_all([
            CartItemModel(user_id=1, product_id=product.id, quantity=1),
            CartItemModel(user_id=2, product_id=product.id, quantity=1),
        ])
        setup.commit()
        product_id = product.id

    barrier = threading.Barrier(2)
    outcomes = {}

    def checkout(user_id):
        with file_sessions() as session:
            service = OrderService(session, pricing=PRICING)
            lines = CartService(session).snapshot(user_id)
            barrier.wait()
            try:
                service.persist(
                    user_id,
                    lines,
                    price_order(lines, PRICING),
                    CheckoutDetails(ADDRESS, ADDRESS, "credit_card"),
                )
                outcomes[user_id] = "ok"
            except StockChanged:
                outcomes[user_id] = "stock_changed"

    threads = [threading.Thread(target=checkout, args=(uid,)) for uid in (1, 2)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=30)

    assert sorted(outcomes.values()) == ["ok", "stock_changed"]

    with file_sessions() as check:
        assert check.get(ProductModel, product_id).stock == 0
        assert check.query(OrderModel).count() == 1
        loser = next(uid for uid, outcome in outcomes.items() if outcome == "stock_changed")
        assert check.query(CartItemModel).filter_by(user_id=loser).count() == 1
