# routers/coupons.py

from fastapi import APIRouter, Depends

from dependencies.auth import CurrentUser, get_current_user, require_admin
from dependencies.services import get_coupon_validator
from models.coupon import CouponAvailabilityUpdate, CouponCreate, CouponValidateRequest
from services.coupon_validator import CouponValidator


router = APIRouter(
    tags=["Coupons"],
)


# -----------------------------------------------------
# PUBLIC: available coupons
# -----------------------------------------------------
@router.get("/coupons", summary="List available coupons")
def list_available_coupons(coupons: CouponValidator = Depends(get_coupon_validator)):
    return coupons.list_coupons(available_only=True)


# -----------------------------------------------------
# ADMIN: every coupon
# -----------------------------------------------------
@router.get("/admin/coupons", summary="Admin: list all coupons")
def list_all_coupons(
    admin: CurrentUser = Depends(require_admin),
    coupons: CouponValidator = Depends(get_coupon_validator),
):
    return coupons.list_coupons(available_only=False)


@router.post("/coupons", summary="Admin: create coupon")
def create_coupon(
    payload: CouponCreate,
    admin: CurrentUser = Depends(require_admin),
    coupons: CouponValidator = Depends(get_coupon_validator),
):
    return coupons.create(payload.model_dump())


@router.put("/coupons/{coupon_id}", summary="Admin: toggle coupon availability")
def set_coupon_availability(
    coupon_id: str,
    payload: CouponAvailabilityUpdate,
    admin: CurrentUser = Depends(require_admin),
    coupons: CouponValidator = Depends(get_coupon_validator),
):
    return coupons.set_availability(coupon_id, payload.isAvailable)


# -----------------------------------------------------
# AUTHENTICATED: validate a code at checkout
# -----------------------------------------------------
@router.post("/coupons/validate", summary="Validate coupon code")
def validate_coupon(
    payload: CouponValidateRequest,
    current_user: CurrentUser = Depends(get_current_user),
    coupons: CouponValidator = Depends(get_coupon_validator),
):
    return coupons.validate(payload.code)
