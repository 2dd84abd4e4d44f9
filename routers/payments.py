# routers/payments.py

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from core.logging_config import logger
from core.store import DocumentStore, get_store
from core.utils import normalize_email, utc_now_iso
from dependencies.auth import CurrentUser, get_current_user, require_self
from dependencies.services import get_coupon_validator
from models.payment import PaymentCreate
from services.coupon_validator import CouponValidator


router = APIRouter(
    prefix="/payments",
    tags=["Payments"],
)


# -----------------------------------------------------
# HISTORY (self)
# -----------------------------------------------------
@router.get("", summary="Payment history of the caller")
def list_payments(
    email: Optional[str] = None,
    current_user: CurrentUser = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
):
    require_self(email, current_user)
    return store.find(
        "payments",
        {"email": normalize_email(email)},
        order_by="paidAt",
        descending=True,
    )


# -----------------------------------------------------
# LOG PAYMENT (authenticated)
# -----------------------------------------------------
@router.post("", summary="Record a completed payment")
def log_payment(
    payload: PaymentCreate,
    current_user: CurrentUser = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
    coupons: CouponValidator = Depends(get_coupon_validator),
):
    discount = 0.0
    if payload.couponCode:
        check = coupons.validate(payload.couponCode)
        if not check["valid"]:
            raise HTTPException(400, "Coupon is not valid")
        discount = float(check["discount"] or 0)

    data = payload.model_dump()
    data.update({
        "email": current_user.email,
        "discount": discount,
        "amountPaid": round(payload.rent * (100 - discount) / 100, 2),
        "paidAt": utc_now_iso(),
    })

    payment = store.insert_one("payments", data)
    logger.info(f"Payment {payment.get('id')} logged for {current_user.email} ({payload.month})")
    return payment
