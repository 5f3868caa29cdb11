# storefront/api/routers/payments.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.api.deps import get_current_user
from storefront.api.errors import to_http
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.errors import StorefrontError
from storefront.domain.schemas import PaymentIn, PaymentMethodOut, PaymentOut
from storefront.services.payment_service import PaymentService

router = APIRouter(prefix="/payments", tags=["payments"])


@router.get("/methods", response_model=List[PaymentMethodOut])
def payment_methods():
    return PaymentService.methods()


@router.post("/process", response_model=PaymentOut)
def process_payment(
    payload: PaymentIn,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    card_number = payload.payment_details.card_number if payload.payment_details else None
    try:
        return PaymentService(db).process(payload.order_id, user.id, card_number=card_number)
    except StorefrontError as e:
        raise to_http(e)
