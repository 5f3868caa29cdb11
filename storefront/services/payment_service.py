# storefront/services/payment_service.py
import uuid
from datetime import datetime, timezone
from typing import Any, Dict

from sqlalchemy.orm import Session

from storefront.data.unit_of_work import UnitOfWork
from storefront.domain.errors import PaymentError, StatusConflict
from storefront.domain.serializers import order_dict
from storefront.domain.status import (
    OrderStatus,
    PaymentStatus,
    is_legal_payment_transition,
    is_legal_transition,
)
from storefront.repos.order_repo import OrderRepo
from storefront.services.order_lifecycle import OrderLifecycle
from storefront.utils import settings
from storefront.utils.logging import get_logger
from storefront.utils.retry import status_retry

logger = get_logger(__name__)

PAYMENT_METHODS = [
    {
        "id": "credit_card",
        "name": "Credit Card",
        "description": "Pay with Visa, Mastercard, or American Express",
    },
    {
        "id": "paypal",
        "name": "PayPal",
        "description": "Pay with your PayPal account",
    },
    {
        "id": "bank_transfer",
        "name": "Bank Transfer",
        "description": "Direct bank transfer",
    },
]


class PaymentService:
    """
    Deterministic payment stub, no gateway is called.
    The configured decline card fails, anything else succeeds.
    """

    def __init__(self, db: Session, lifecycle: OrderLifecycle | None = None):
        self.db = db
        self.repo = OrderRepo(db)
        self.lifecycle = lifecycle or OrderLifecycle(db)

    @staticmethod
    def methods():
        return PAYMENT_METHODS

    @status_retry()
    def process(self, order_id: int, user_id: int, card_number: str | None = None) -> Dict[str, Any]:
        """
        The payment write and the pending -> processing move are one
        conditional update, a cancel that lands in between makes it miss and
        the next attempt sees the cancelled order.
        """
        order = self.lifecycle.load_owned(order_id, user_id, admin=False)
        current = OrderStatus(order.status)
        payment = PaymentStatus(order.payment_status)

        if payment is PaymentStatus.COMPLETED:
            raise PaymentError("Order already paid", code="ALREADY_PAID")
        if current is OrderStatus.CANCELLED or not is_legal_payment_transition(
            payment, PaymentStatus.COMPLETED
        ):
            raise PaymentError(f"Order in status {current.value} cannot be paid", code="ORDER_NOT_PAYABLE")

        if card_number and card_number == settings.PAYMENT_DECLINE_CARD:
            self._write(order_id, current, payment, {"payment_status": PaymentStatus.FAILED.value})
            logger.info(f"Payment for order {order_id} declined")
            raise PaymentError("Payment failed. Please try again.", code="PAYMENT_FAILED")

        new_data = {"payment_status": PaymentStatus.COMPLETED.value}
        advance = current is OrderStatus.PENDING and is_legal_transition(current, OrderStatus.PROCESSING)
        if advance:
            new_data["status"] = OrderStatus.PROCESSING.value
        self._write(order_id, current, payment, new_data)

        if advance:
            logger.info(f"Order {order_id}: {current.value} -> {OrderStatus.PROCESSING.value}")
            self.lifecycle.notifications.order_status_changed(
                order.user_id, order_id, current.value, OrderStatus.PROCESSING.value
            )

        transaction_id = f"TXN-{datetime.now(timezone.utc):%Y%m%d%H%M%S}-{uuid.uuid4().hex[:8]}"
        logger.info(f"Payment for order {order_id} completed ({transaction_id})")
        return {
            "success": True,
            "transaction_id": transaction_id,
            "order": order_dict(self.repo.find_order_by_id(order_id)),
        }

    def _write(self, order_id: int, status: OrderStatus, payment: PaymentStatus, new_data: dict):
        with UnitOfWork(self.db, name=f"payment order={order_id}"):
            if self.repo.update_payment_status(order_id, status.value, payment.value, new_data) == 0:
                raise StatusConflict(f"Order {order_id} changed while recording the payment")
