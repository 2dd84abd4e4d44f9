# models/payment.py

from typing import Optional
from pydantic import BaseModel, Field


# -------------------------------------------------
# Payment log entry (POST /payments)
# No settlement happens here; the record is what the
# client reports after its own checkout completed.
# -------------------------------------------------
class PaymentCreate(BaseModel):
    apartmentId: str
    month: str = Field(..., min_length=1)
    rent: float = Field(..., ge=0)
    couponCode: Optional[str] = None
    transactionId: Optional[str] = None
