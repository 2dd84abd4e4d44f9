# services/agreement_lifecycle.py

"""
Agreement lifecycle: submission, admin transitions and the cascade that
keeps agreement, user and apartment records in step.

    pending --checked-->  checked --(tenant reset)--> terminated
    pending --rejected--> rejected

The store only guarantees single-row atomicity. Approval claims the
apartment and the user with conditional writes (isRented false, no linked
agreement) before committing the agreement, and gives the claims back if
that commit loses. A claim that fails on a missing row or a store error is
recorded and logged rather than raised. `reconcile()` re-derives occupancy
and membership from checked agreements to repair what those left behind.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from core.errors import AppError, InvalidTransition, NotFound
from core.logging_config import logger
from core.utils import normalize_email, utc_now_iso
from models.enums import AgreementStatus, UserRole
from services.tenancy_store import TenancyStore


S = AgreementStatus

# from_status -> statuses an admin may move it to
TRANSITION_MAP = {
    S.pending: {S.checked, S.rejected},
    S.checked: {S.terminated},
    S.rejected: set(),
    S.terminated: set(),
}

CLEARED_LINKAGE = {"rentedApartmentId": None, "agreementId": None}


# ============================================================
# Results
# ============================================================
@dataclass
class CascadeStep:
    name: str
    applied: bool
    error: Optional[str] = None

    def to_dict(self) -> dict:
        return {"step": self.name, "applied": self.applied, "error": self.error}


@dataclass
class CascadeResult:
    record: dict
    steps: List[CascadeStep] = field(default_factory=list)

    @property
    def partial(self) -> bool:
        return any(not s.applied for s in self.steps)

    def to_dict(self, record_key: str) -> dict:
        return {
            record_key: self.record,
            "cascade": [s.to_dict() for s in self.steps],
            "partial": self.partial,
        }


@dataclass
class ReconcileReport:
    apartments_marked_rented: int = 0
    apartments_released: int = 0
    members_linked: int = 0
    members_reset: int = 0
    errors: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "apartmentsMarkedRented": self.apartments_marked_rented,
            "apartmentsReleased": self.apartments_released,
            "membersLinked": self.members_linked,
            "membersReset": self.members_reset,
            "errors": self.errors,
        }


# ============================================================
# Engine
# ============================================================
class AgreementLifecycle:

    def __init__(self, tenancy: TenancyStore):
        self.tenancy = tenancy

    # -----------------------------------------------------
    # SUBMIT
    # -----------------------------------------------------
    def submit(self, user_email: str, apartment_id: str, user_name: Optional[str] = None) -> dict:
        """
        Create a pending agreement. Duplicate pending requests from the same
        user are allowed; the admin picks which one to approve.
        """
        apartment = self.tenancy.get_apartment(apartment_id)
        if not apartment:
            raise NotFound(f"Apartment {apartment_id} not found", detail="Apartment not found")

        agreement = self.tenancy.insert_agreement({
            "userEmail": normalize_email(user_email),
            "userName": user_name,
            "apartmentId": apartment_id,
            "floorNo": apartment.get("floorNo"),
            "blockName": apartment.get("blockName"),
            "apartmentNo": apartment.get("apartmentNo"),
            "rent": apartment.get("rent"),
            "status": S.pending.value,
            "submittedAt": utc_now_iso(),
            "checkedDate": None,
        })

        logger.info(f"Agreement {agreement.get('id')} submitted by {user_email} for apartment {apartment_id}")
        return agreement

    # -----------------------------------------------------
    # TRANSITION (admin)
    # -----------------------------------------------------
    def transition(self, agreement_id: str, new_status: str, acting_admin: str) -> CascadeResult:
        """
        Approving claims the apartment and the user with conditional writes
        before the agreement itself is committed, so two approvals racing for
        the same apartment or the same user cannot both land. A claim that
        fails for a missing row or a store error is reported, not raised.
        """
        if new_status not in (S.checked.value, S.rejected.value):
            raise InvalidTransition(f"unsupported status {new_status!r}", detail="Unsupported status")
        target = S(new_status)

        agreement = self.tenancy.get_agreement(agreement_id)
        if not agreement:
            raise NotFound(f"Agreement {agreement_id} not found", detail="Agreement not found")

        current = self._current_status(agreement)
        if target not in TRANSITION_MAP[current]:
            raise InvalidTransition(
                f"{agreement_id}: {current.value} -> {target.value}",
                detail=f"Cannot move agreement from {current.value} to {target.value}",
            )

        update = {"status": target.value}
        claims = []
        if target == S.checked:
            self._ensure_can_approve(agreement)
            update["checkedDate"] = utc_now_iso()
            claims = self._claim(agreement)

        try:
            updated = self.tenancy.update_agreement_if_status(agreement_id, current.value, update)
        except AppError:
            self._release(agreement, claims)
            raise

        if updated is None:
            # another request moved it first
            self._release(agreement, claims)
            raise InvalidTransition(
                f"{agreement_id} no longer {current.value}",
                detail="Agreement was already processed",
            )

        logger.info(f"Agreement {agreement_id} {current.value} -> {target.value} by {acting_admin}")

        result = CascadeResult(record=updated, steps=[step for step, _ in claims])
        if result.partial:
            logger.warning(f"Agreement {agreement_id} approved with partial cascade: "
                           f"{[s.to_dict() for s in result.steps if not s.applied]}")
        return result

    @staticmethod
    def _current_status(agreement: dict) -> AgreementStatus:
        raw = agreement.get("status")
        try:
            return S(raw)
        except ValueError:
            raise InvalidTransition(
                f"{agreement.get('id')} has unrecognised status {raw!r}",
                detail="Agreement has no valid status",
            )

    def _ensure_can_approve(self, agreement: dict):
        email = agreement.get("userEmail")
        apartment_id = agreement.get("apartmentId")

        others = [
            a for a in self.tenancy.list_agreements(user_email=email, status=S.checked.value)
            if a.get("id") != agreement.get("id")
        ]
        if others:
            raise InvalidTransition(
                f"{email} already holds checked agreement {others[0].get('id')}",
                detail="User already has an active agreement",
            )

        apartment = self.tenancy.get_apartment(apartment_id)
        if apartment and apartment.get("isRented"):
            raise InvalidTransition(
                f"apartment {apartment_id} already rented",
                detail="Apartment is already rented",
            )

    # -----------------------------------------------------
    # CASCADE STEPS
    # -----------------------------------------------------
    def _run_step(self, name: str, fn) -> CascadeStep:
        try:
            applied = fn()
        except InvalidTransition:
            raise
        except AppError as e:
            logger.error(f"Cascade step {name} failed: {e}")
            return CascadeStep(name, False, e.detail)

        if not applied:
            logger.warning(f"Cascade step {name} skipped: target not found")
            return CascadeStep(name, False, "not found")
        return CascadeStep(name, True)

    def _claim(self, agreement: dict) -> list:
        """
        Returns [(user step, prior user), (apartment step, None)].
        Raises InvalidTransition, with nothing left claimed, if the user or
        the apartment is already taken.
        """
        apartment_step = self._claim_apartment(agreement.get("apartmentId"))
        apartment_claim = (apartment_step, None)

        prior_user = {}
        try:
            user_step = self._claim_member(agreement, prior_user)
        except InvalidTransition:
            self._release(agreement, [apartment_claim])
            raise

        return [(user_step, prior_user or None), apartment_claim]

    def _claim_member(self, agreement: dict, prior_user: dict) -> CascadeStep:
        email = agreement.get("userEmail")

        def apply():
            user = self.tenancy.get_user_by_email(email)
            if not user:
                return None
            role = UserRole.admin.value if user.get("role") == UserRole.admin.value else UserRole.member.value
            linked = self.tenancy.link_member(user["id"], {
                "role": role,
                "rentedApartmentId": agreement.get("apartmentId"),
                "agreementId": agreement.get("id"),
            })
            if linked is None:
                raise InvalidTransition(
                    f"{email} is already linked to another agreement",
                    detail="User already has an active agreement",
                )
            prior_user.update(user)
            return linked

        return self._run_step("user", apply)

    def _claim_apartment(self, apartment_id: Optional[str]) -> CascadeStep:
        def apply():
            if not apartment_id:
                return None
            claimed = self.tenancy.claim_apartment(apartment_id)
            if claimed:
                return claimed

            apartment = self.tenancy.get_apartment(apartment_id)
            if apartment is None:
                return None
            if apartment.get("isRented"):
                raise InvalidTransition(
                    f"apartment {apartment_id} rented concurrently",
                    detail="Apartment is already rented",
                )
            # isRented was never set on this row
            return self.tenancy.set_apartment_rented(apartment_id, True)

        return self._run_step("apartment", apply)

    def _release(self, agreement: dict, claims: list):
        """Undo claims taken for an approval that did not commit."""
        for step, prior_user in claims:
            if not step.applied:
                continue
            try:
                if step.name == "apartment":
                    self.tenancy.release_apartment(agreement.get("apartmentId"))
                elif prior_user:
                    self.tenancy.unlink_member(prior_user["id"], agreement.get("id"), {
                        "role": prior_user.get("role"),
                        **CLEARED_LINKAGE,
                    })
            except AppError as e:
                logger.error(f"Releasing {step.name} claim for agreement {agreement.get('id')} failed: {e}")

    def _mark_apartment(self, apartment_id: Optional[str], is_rented: bool) -> CascadeStep:
        def apply():
            if not apartment_id:
                return None
            return self.tenancy.set_apartment_rented(apartment_id, is_rented)

        return self._run_step("apartment", apply)

    # -----------------------------------------------------
    # RESET MEMBER -> TENANT (admin)
    # -----------------------------------------------------
    def reset_to_tenant(self, user_id: str, acting_admin: str) -> CascadeResult:
        """
        Terminate the agreement that made the user a member, then revert them
        to a plain user and free the apartment. The agreement must be
        terminated before the user write: reconcile() rebuilds membership
        from checked agreements.
        """
        user = self.tenancy.get_user(user_id)
        if not user:
            raise NotFound(f"User {user_id} not found", detail="User not found")
        if user.get("role") == UserRole.admin.value:
            raise InvalidTransition(f"refusing to reset admin {user_id}", detail="Cannot reset an admin")

        terminated = None
        agreement = self._active_agreement_for(user)
        if agreement is not None:
            terminated = self.tenancy.update_agreement_if_status(
                agreement["id"],
                S.checked.value,
                {"status": S.terminated.value, "terminatedDate": utc_now_iso()},
            )
            if terminated is None:
                logger.warning(f"Agreement {agreement['id']} left checked before reset of {user_id}")

        updated = self.tenancy.update_user(user_id, {"role": UserRole.user.value, **CLEARED_LINKAGE})
        if updated is None:
            raise NotFound(f"User {user_id} vanished during reset", detail="User not found")

        logger.info(f"User {user_id} ({user.get('email')}) reset to tenant by {acting_admin}")

        result = CascadeResult(record=updated)
        if terminated is None:
            return result

        result.steps.append(CascadeStep("agreement", True))
        result.steps.append(self._mark_apartment(terminated.get("apartmentId"), False))

        if result.partial:
            logger.warning(f"Reset of {user_id} left a partial cascade")
        return result

    def _active_agreement_for(self, user: dict) -> Optional[dict]:
        agreement_id = user.get("agreementId")
        if agreement_id:
            agreement = self.tenancy.get_agreement(agreement_id)
            if agreement and agreement.get("status") == S.checked.value:
                return agreement

        checked = self.tenancy.list_agreements(user_email=user.get("email"), status=S.checked.value)
        return checked[0] if checked else None

    # -----------------------------------------------------
    # RECONCILIATION
    # -----------------------------------------------------
    def reconcile(self) -> ReconcileReport:
        """
        Re-derive apartment occupancy and member linkage from checked
        agreements. Safe to run repeatedly.
        """
        report = ReconcileReport()

        checked = self.tenancy.checked_agreements()
        rented_ids = set()
        member_emails = set()

        for agreement in checked:
            apartment_id = agreement.get("apartmentId")
            email = agreement.get("userEmail")
            rented_ids.add(apartment_id)
            member_emails.add(email)

            try:
                apartment = self.tenancy.get_apartment(apartment_id)
                if apartment and not apartment.get("isRented"):
                    self.tenancy.set_apartment_rented(apartment_id, True)
                    report.apartments_marked_rented += 1

                user = self.tenancy.get_user_by_email(email)
                if user and (
                    user.get("rentedApartmentId") != apartment_id
                    or user.get("agreementId") != agreement.get("id")
                    or user.get("role") == UserRole.user.value
                ):
                    role = user.get("role") if user.get("role") == UserRole.admin.value else UserRole.member.value
                    self.tenancy.update_user(user["id"], {
                        "role": role,
                        "rentedApartmentId": apartment_id,
                        "agreementId": agreement.get("id"),
                    })
                    report.members_linked += 1
            except AppError as e:
                report.errors.append(f"agreement {agreement.get('id')}: {e}")

        for apartment in self.tenancy.list_apartments(is_rented=True):
            if apartment.get("id") in rented_ids:
                continue
            try:
                self.tenancy.set_apartment_rented(apartment["id"], False)
                report.apartments_released += 1
            except AppError as e:
                report.errors.append(f"apartment {apartment.get('id')}: {e}")

        for user in self.tenancy.list_users(role=UserRole.member.value):
            if normalize_email(user.get("email")) in member_emails:
                continue
            try:
                self.tenancy.update_user(user["id"], {"role": UserRole.user.value, **CLEARED_LINKAGE})
                report.members_reset += 1
            except AppError as e:
                report.errors.append(f"user {user.get('id')}: {e}")

        logger.info(f"Reconciliation finished: {report.to_dict()}")
        return report
