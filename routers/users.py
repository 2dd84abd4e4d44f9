# routers/users.py

from fastapi import APIRouter, Depends

from core.errors import Conflict
from core.logging_config import logger
from core.utils import normalize_email, utc_now_iso
from dependencies.auth import CurrentUser, get_current_user, require_admin, require_self
from dependencies.services import get_lifecycle, get_tenancy_store
from models.enums import UserRole
from models.user import UserCreate, RoleResponse
from services.agreement_lifecycle import AgreementLifecycle
from services.tenancy_store import TenancyStore


router = APIRouter(
    tags=["Users"],
)


# -------------------------------------------------------------
# REGISTER (idempotent)
# -------------------------------------------------------------
# Fields the server owns; never taken from the registration body.
SERVER_FIELDS = ("id", "role", "rentedApartmentId", "agreementId", "timestamp")

ALREADY_EXISTS = {"message": "user already exists", "insertedId": None}


@router.post("/users", summary="Register user (no-op if email exists)")
def register_user(payload: UserCreate, tenancy: TenancyStore = Depends(get_tenancy_store)):
    email = normalize_email(payload.email)

    existing = tenancy.get_user_by_email(email)
    if existing:
        return dict(ALREADY_EXISTS)

    data = payload.model_dump(exclude_none=True)
    for key in SERVER_FIELDS:
        data.pop(key, None)
    data.update({
        "email": email,
        "role": UserRole.user.value,
        "rentedApartmentId": None,
        "agreementId": None,
        "timestamp": utc_now_iso(),
    })

    # users.email carries a unique index; a concurrent registration loses here
    try:
        user = tenancy.insert_user(data)
    except Conflict:
        logger.info(f"Registration race for {email}; keeping the existing user")
        return dict(ALREADY_EXISTS)

    logger.info(f"Registered user {email}")
    return {"message": "user created", "insertedId": user.get("id")}


# -------------------------------------------------------------
# ROLE (self)
# -------------------------------------------------------------
@router.get("/user/role/{email}", response_model=RoleResponse, summary="Role of the caller")
def get_role(
    email: str,
    current_user: CurrentUser = Depends(get_current_user),
    tenancy: TenancyStore = Depends(get_tenancy_store),
):
    require_self(email, current_user)

    user = tenancy.get_user_by_email(email)
    return RoleResponse(role=(user or {}).get("role") or UserRole.user.value)


# -------------------------------------------------------------
# RESET MEMBER -> TENANT (admin)
# -------------------------------------------------------------
@router.patch("/users/{user_id}", summary="Admin: reset member to tenant")
def reset_member(
    user_id: str,
    admin: CurrentUser = Depends(require_admin),
    lifecycle: AgreementLifecycle = Depends(get_lifecycle),
):
    result = lifecycle.reset_to_tenant(user_id, acting_admin=admin.email)
    return result.to_dict("user")


# -------------------------------------------------------------
# MEMBERS (admin)
# -------------------------------------------------------------
@router.get("/members", summary="Admin: list members")
def list_members(
    admin: CurrentUser = Depends(require_admin),
    tenancy: TenancyStore = Depends(get_tenancy_store),
):
    return tenancy.list_users(role=UserRole.member.value)
