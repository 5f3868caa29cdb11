# every model is imported here so SQLAlchemy registers it in Base.metadata

from storefront.data.models.user import UserModel
from storefront.data.models.product import ProductModel
from storefront.data.models.cart_item import CartItemModel
from storefront.data.models.coupon import CouponModel
from storefront.data.models.order import OrderModel, OrderItemModel

__all__ = [
    "UserModel",
    "ProductModel",
    "CartItemModel",
    "CouponModel",
    "OrderModel",
    "OrderItemModel",
]
