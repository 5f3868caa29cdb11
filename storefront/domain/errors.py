# storefront/domain/errors.py
from typing import Any


class StorefrontError(Exception):
    """Base for errors surfaced to API callers."""

    code = "ERROR"
    status_code = 400

    def __init__(self, message: str, details: Any = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def as_detail(self) -> dict:
        detail = {"code": self.code, "message": self.message}
        if self.details is not None:
            detail["details"] = self.details
        return detail


class NotFound(StorefrontError):
    code = "NOT_FOUND"
    status_code = 404


class Forbidden(StorefrontError):
    code = "FORBIDDEN"
    status_code = 403


class EmptyCart(StorefrontError):
    code = "EMPTY_CART"


class ProductUnavailable(StorefrontError):
    """One or more cart lines cannot be bought; ``details`` lists them all."""

    code = "PRODUCT_UNAVAILABLE"


class StockChanged(StorefrontError):
    """Stock ran out between the cart snapshot and the commit."""

    code = "STOCK_CHANGED"


class InvalidCoupon(StorefrontError):
    code = "INVALID_COUPON"

    def __init__(self, message: str, reason: str = "INVALID_COUPON", details: Any = None):
        super().__init__(message, details)
        self.reason = reason

    def as_detail(self) -> dict:
        detail = super().as_detail()
        detail["reason"] = self.reason
        return detail


class NotCancellable(StorefrontError):
    code = "NOT_CANCELLABLE"


class IllegalTransition(StorefrontError):
    code = "ILLEGAL_TRANSITION"


class StatusConflict(StorefrontError):
    """The order changed status under us and retries ran out."""

    code = "STATUS_CONFLICT"
    status_code = 409


class PaymentError(StorefrontError):
    code = "PAYMENT_ERROR"

    def __init__(self, message: str, code: str = "PAYMENT_ERROR", details: Any = None):
        super().__init__(message, details)
        self.code = code
