# routers/agreements.py

from typing import Optional

from fastapi import APIRouter, Depends

from dependencies.auth import CurrentUser, get_current_user, require_admin, require_self
from dependencies.services import get_lifecycle, get_tenancy_store
from models.agreement import AgreementCreate, AgreementStatusUpdate
from models.enums import AgreementStatus
from services.agreement_lifecycle import AgreementLifecycle
from services.tenancy_store import TenancyStore


router = APIRouter(
    tags=["Agreements"],
)


# -----------------------------------------------------
# SUBMIT (authenticated)
# -----------------------------------------------------
@router.post("/agreements", summary="Submit agreement request")
def submit_agreement(
    payload: AgreementCreate,
    current_user: CurrentUser = Depends(get_current_user),
    lifecycle: AgreementLifecycle = Depends(get_lifecycle),
):
    user_name = payload.userName or current_user.claims.get("name")
    return lifecycle.submit(current_user.email, payload.apartmentId, user_name=user_name)


# -----------------------------------------------------
# OWN AGREEMENTS (self)
# -----------------------------------------------------
@router.get("/agreements/{email}", summary="List the caller's agreements")
def list_own_agreements(
    email: str,
    current_user: CurrentUser = Depends(get_current_user),
    tenancy: TenancyStore = Depends(get_tenancy_store),
):
    require_self(email, current_user)
    return tenancy.list_agreements(user_email=email)


# -----------------------------------------------------
# ALL AGREEMENTS (admin)
# -----------------------------------------------------
@router.get("/agreements", summary="Admin: list agreements")
def list_agreements(
    status: Optional[AgreementStatus] = None,
    admin: CurrentUser = Depends(require_admin),
    tenancy: TenancyStore = Depends(get_tenancy_store),
):
    return tenancy.list_agreements(status=status.value if status else None)


# -----------------------------------------------------
# TRANSITION (admin)
# -----------------------------------------------------
@router.put("/agreement/status/{agreement_id}", summary="Admin: approve or reject agreement")
def update_agreement_status(
    agreement_id: str,
    payload: AgreementStatusUpdate,
    admin: CurrentUser = Depends(require_admin),
    lifecycle: AgreementLifecycle = Depends(get_lifecycle),
):
    result = lifecycle.transition(agreement_id, payload.status, acting_admin=admin.email)
    return result.to_dict("agreement")
