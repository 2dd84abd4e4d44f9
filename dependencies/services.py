# dependencies/services.py

from fastapi import Depends

from core.store import DocumentStore, get_store
from services.agreement_lifecycle import AgreementLifecycle
from services.coupon_validator import CouponValidator
from services.tenancy_store import TenancyStore


def get_tenancy_store(store: DocumentStore = Depends(get_store)) -> TenancyStore:
    return TenancyStore(store)


def get_lifecycle(tenancy: TenancyStore = Depends(get_tenancy_store)) -> AgreementLifecycle:
    return AgreementLifecycle(tenancy)


def get_coupon_validator(store: DocumentStore = Depends(get_store)) -> CouponValidator:
    return CouponValidator(store)
