# storefront/api/__init__.py
from storefront.api.routers import carts, coupons, health, orders, payments, products, users

ROUTERS = (
    health.router,
    users.router,
    products.router,
    carts.router,
    coupons.router,
    orders.router,
    payments.router,
)
