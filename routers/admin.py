# routers/admin.py

from fastapi import APIRouter, Depends

from core.store import DocumentStore, get_store
from dependencies.auth import CurrentUser, require_admin
from dependencies.services import get_lifecycle
from models.enums import UserRole
from services.agreement_lifecycle import AgreementLifecycle


router = APIRouter(
    tags=["Admin"],
)


def percentage(part: int, whole: int) -> float:
    if not whole:
        return 0.0
    return round(part * 100 / whole, 2)


# -----------------------------------------------------
# Occupancy + user counts
# -----------------------------------------------------
def get_admin_stats(store: DocumentStore) -> dict:
    total_apartments = store.count("apartments")
    rented = store.count("apartments", {"isRented": True})
    users = store.count("users", {"role": UserRole.user.value})
    members = store.count("users", {"role": UserRole.member.value})

    return {
        "totalApartments": total_apartments,
        "rentedApartments": rented,
        "availableApartments": total_apartments - rented,
        "rentedPercentage": percentage(rented, total_apartments),
        "availablePercentage": percentage(total_apartments - rented, total_apartments),
        "totalUsers": users,
        "totalMembers": members,
    }


@router.get("/admin-stats", summary="Admin: occupancy and user counts")
def admin_stats(
    admin: CurrentUser = Depends(require_admin),
    store: DocumentStore = Depends(get_store),
):
    return get_admin_stats(store)


# -----------------------------------------------------
# Reconciliation pass (also scheduled, see core.scheduler)
# -----------------------------------------------------
@router.post("/admin/reconcile", summary="Admin: repair tenancy state from agreements")
def reconcile(
    admin: CurrentUser = Depends(require_admin),
    lifecycle: AgreementLifecycle = Depends(get_lifecycle),
):
    return lifecycle.reconcile().to_dict()
