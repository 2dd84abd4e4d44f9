# services/tenancy_store.py

from typing import List, Optional

from core.store import DocumentStore
from core.utils import normalize_email
from models.enums import AgreementStatus


USERS = "users"
APARTMENTS = "apartments"
AGREEMENTS = "agreements"


class TenancyStore:
    """
    The users / apartments / agreements slice of the document store.
    Every method is a single read or a single-row write.
    """

    def __init__(self, store: DocumentStore):
        self.store = store

    # -----------------------------------------------------
    # Users
    # -----------------------------------------------------
    def get_user(self, user_id: str) -> Optional[dict]:
        return self.store.find_one(USERS, {"id": user_id})

    def get_user_by_email(self, email: str) -> Optional[dict]:
        return self.store.find_one(USERS, {"email": normalize_email(email)})

    def list_users(self, role: Optional[str] = None) -> List[dict]:
        filters = {"role": role} if role else None
        return self.store.find(USERS, filters, order_by="timestamp", descending=True)

    def insert_user(self, data: dict) -> dict:
        return self.store.insert_one(USERS, data)

    def update_user(self, user_id: str, data: dict) -> Optional[dict]:
        return self.store.update_one(USERS, {"id": user_id}, data)

    def link_member(self, user_id: str, data: dict) -> Optional[dict]:
        """Conditional write: only links a user who holds no agreement yet."""
        return self.store.update_one(USERS, {"id": user_id, "agreementId": None}, data)

    def unlink_member(self, user_id: str, agreement_id: str, data: dict) -> Optional[dict]:
        return self.store.update_one(USERS, {"id": user_id, "agreementId": agreement_id}, data)

    # -----------------------------------------------------
    # Apartments
    # -----------------------------------------------------
    def get_apartment(self, apartment_id: str) -> Optional[dict]:
        return self.store.find_one(APARTMENTS, {"id": apartment_id})

    def list_apartments(self, is_rented: Optional[bool] = None) -> List[dict]:
        filters = {"isRented": is_rented} if is_rented is not None else None
        return self.store.find(APARTMENTS, filters)

    def set_apartment_rented(self, apartment_id: str, is_rented: bool) -> Optional[dict]:
        return self.store.update_one(APARTMENTS, {"id": apartment_id}, {"isRented": is_rented})

    def claim_apartment(self, apartment_id: str) -> Optional[dict]:
        """Conditional write: flips isRented only while the apartment is free."""
        return self.store.update_one(
            APARTMENTS,
            {"id": apartment_id, "isRented": False},
            {"isRented": True},
        )

    def release_apartment(self, apartment_id: str) -> Optional[dict]:
        return self.store.update_one(
            APARTMENTS,
            {"id": apartment_id, "isRented": True},
            {"isRented": False},
        )

    # -----------------------------------------------------
    # Agreements
    # -----------------------------------------------------
    def get_agreement(self, agreement_id: str) -> Optional[dict]:
        return self.store.find_one(AGREEMENTS, {"id": agreement_id})

    def list_agreements(
        self,
        *,
        user_email: Optional[str] = None,
        status: Optional[str] = None,
    ) -> List[dict]:
        filters = {}
        if user_email:
            filters["userEmail"] = normalize_email(user_email)
        if status:
            filters["status"] = status
        return self.store.find(AGREEMENTS, filters or None, order_by="submittedAt", descending=True)

    def checked_agreements(self) -> List[dict]:
        return self.list_agreements(status=AgreementStatus.checked.value)

    def insert_agreement(self, data: dict) -> dict:
        return self.store.insert_one(AGREEMENTS, data)

    def update_agreement_if_status(
        self, agreement_id: str, expected_status: str, data: dict
    ) -> Optional[dict]:
        """
        Conditional write: only applies while the agreement still has
        `expected_status`. None means the row was missing or already moved.
        """
        return self.store.update_one(
            AGREEMENTS,
            {"id": agreement_id, "status": expected_status},
            data,
        )
