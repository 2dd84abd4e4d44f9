# -------------------------
# Enums
# -------------------------
from .enums import (
    UserRole,
    AgreementStatus,
)

# -------------------------
# Request bodies
# -------------------------
from .auth import TokenRequest, SuccessResponse
from .user import UserCreate, RoleResponse
from .agreement import AgreementCreate, AgreementStatusUpdate
from .coupon import CouponCreate, CouponAvailabilityUpdate, CouponValidateRequest
from .announcement import AnnouncementCreate
from .payment import PaymentCreate
