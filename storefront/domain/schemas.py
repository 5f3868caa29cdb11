# storefront/domain/schemas.py
from datetime import datetime
from decimal import Decimal
from typing import List, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from storefront.domain.pricing import CouponKind, ShippingMethod
from storefront.domain.status import OrderStatus, PaymentStatus


class ApiModel(BaseModel):
    """camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# ---------------------------------------------------------------- users

class UserCreate(ApiModel):
    """Schema for creating a user."""

    id: int = Field(..., gt=0)
    name: str = Field(..., min_length=1, max_length=100)
    role: Literal["user", "admin"] = "user"


class UserRead(ApiModel):
    id: int
    name: str
    role: str


# ---------------------------------------------------------------- products

class ProductCreate(ApiModel):
    name: str = Field(..., min_length=1, max_length=255)
    price: Decimal = Field(..., ge=0, decimal_places=2)
    stock: int = Field(0, ge=0)
    status: Literal["active", "inactive"] = "active"


class ProductUpdate(ApiModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    price: Decimal | None = Field(None, ge=0, decimal_places=2)
    stock: int | None = Field(None, ge=0)
    status: Literal["active", "inactive"] | None = None


class ProductOut(ApiModel):
    id: int
    name: str
    price: Decimal
    stock: int
    status: str


class Pagination(ApiModel):
    page: int
    page_size: int
    total: int
    total_pages: int


class ProductPage(ApiModel):
    data: List[ProductOut]
    pagination: Pagination


# ---------------------------------------------------------------- cart

class CartItemIn(ApiModel):
    """Add a product to the cart."""

    product_id: int = Field(..., gt=0)
    quantity: int = Field(1, gt=0)


class CartItemUpdate(ApiModel):
    quantity: int = Field(..., gt=0)


class CartProductOut(ApiModel):
    id: int
    name: str
    price: Decimal
    stock: int
    status: str


class CartItemOut(ApiModel):
    id: int
    product_id: int
    quantity: int
    created_at: datetime | None = None
    product: CartProductOut | None = None


class CartOut(ApiModel):
    items: List[CartItemOut]
    subtotal: Decimal
    item_count: int


# ---------------------------------------------------------------- coupons

class CouponApplyIn(ApiModel):
    code: str = Field(..., min_length=1)


class CouponApplyOut(ApiModel):
    code: str
    discount: Decimal
    subtotal: Decimal


class CouponCreate(ApiModel):
    code: str = Field(..., min_length=1, max_length=64)
    kind: CouponKind = CouponKind.PERCENTAGE
    # percent for percentage coupons, currency amount for fixed ones
    value: Decimal = Field(..., gt=0)
    min_order_amount: Decimal | None = Field(None, ge=0)
    max_usages: int | None = Field(None, gt=0)
    is_active: bool = True
    expires_at: datetime | None = None


class CouponOut(ApiModel):
    id: int
    code: str
    kind: CouponKind
    value: Decimal
    min_order_amount: Decimal | None = None
    max_usages: int | None = None
    usage_count: int
    is_active: bool
    expires_at: datetime | None = None


# ---------------------------------------------------------------- orders

class Address(ApiModel):
    street: str = Field(..., min_length=5)
    city: str = Field(..., min_length=2)
    state: str = Field(..., min_length=2)
    zip_code: str = Field(..., min_length=5)
    country: str = Field(..., min_length=2)


class OrderCreate(ApiModel):
    """Checkout request, the cart itself comes from the caller's cart lines."""

    shipping_address: Address
    billing_address: Address
    payment_method: str = Field(..., min_length=1)
    coupon_code: str | None = None
    shipping_method: ShippingMethod = ShippingMethod.STANDARD
    notes: str | None = None


class OrderStatusUpdate(ApiModel):
    status: OrderStatus


class OrderItemOut(ApiModel):
    id: int
    product_id: int
    name: str
    price: Decimal
    quantity: int


class OrderOut(ApiModel):
    id: int
    user_id: int
    status: OrderStatus
    subtotal: Decimal
    discount: Decimal
    coupon_code: str | None = None
    tax: Decimal
    shipping: Decimal
    total: Decimal
    shipping_method: str
    shipping_address: dict
    billing_address: dict
    payment_method: str
    payment_status: PaymentStatus
    notes: str | None = None
    created_at: datetime
    updated_at: datetime
    items: List[OrderItemOut]


class OrderPage(ApiModel):
    data: List[OrderOut]
    pagination: Pagination


# ---------------------------------------------------------------- payments

class PaymentDetails(ApiModel):
    card_number: str | None = None
    expiry_month: str | None = None
    expiry_year: str | None = None
    cvv: str | None = None
    paypal_email: str | None = None


class PaymentIn(ApiModel):
    order_id: int = Field(..., gt=0)
    payment_details: PaymentDetails | None = None


class PaymentMethodOut(ApiModel):
    id: str
    name: str
    description: str


class PaymentOut(ApiModel):
    success: bool
    transaction_id: str
    order: OrderOut
