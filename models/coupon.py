# models/coupon.py

from typing import Optional
from pydantic import BaseModel, Field, field_validator


class CouponCreate(BaseModel):
    code: str = Field(..., min_length=1, max_length=64)
    discount: float = Field(..., gt=0, le=100)
    description: Optional[str] = None
    isAvailable: bool = True

    @field_validator("code")
    @classmethod
    def strip_code(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("code must not be blank")
        return v


class CouponAvailabilityUpdate(BaseModel):
    isAvailable: bool


class CouponValidateRequest(BaseModel):
    code: str
