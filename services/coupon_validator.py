# services/coupon_validator.py

from typing import List

from core.errors import NotFound
from core.logging_config import logger
from core.store import DocumentStore


COUPONS = "coupons"


class CouponValidator:
    """
    Promotional code lookups. A miss is a normal answer ({"valid": False}),
    never an error.
    """

    def __init__(self, store: DocumentStore):
        self.store = store

    def validate(self, code: str) -> dict:
        code = (code or "").strip()
        if not code:
            return {"valid": False}

        coupon = self.store.find_one(COUPONS, {"code": code, "isAvailable": True})
        if not coupon:
            return {"valid": False}

        return {"valid": True, "code": coupon["code"], "discount": coupon.get("discount")}

    def list_coupons(self, available_only: bool = True) -> List[dict]:
        filters = {"isAvailable": True} if available_only else None
        return self.store.find(COUPONS, filters)

    def create(self, data: dict) -> dict:
        coupon = self.store.insert_one(COUPONS, data)
        logger.info(f"Coupon {coupon.get('code')} created")
        return coupon

    def set_availability(self, coupon_id: str, is_available: bool) -> dict:
        updated = self.store.update_one(COUPONS, {"id": coupon_id}, {"isAvailable": is_available})
        if updated is None:
            raise NotFound(f"Coupon {coupon_id} not found", detail="Coupon not found")

        logger.info(f"Coupon {coupon_id} availability set to {is_available}")
        return updated
