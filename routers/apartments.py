# routers/apartments.py

from typing import Optional

from fastapi import APIRouter, Depends

from core.config import settings
from core.store import DocumentStore, get_store
from core.utils import to_int_or_none


router = APIRouter(
    tags=["Apartments"],
)


# -------------------------------------------------------------
# Rent band from raw query strings; unparsable bounds are ignored
# -------------------------------------------------------------
def rent_range(min_rent: Optional[str], max_rent: Optional[str]) -> Optional[dict]:
    low = to_int_or_none(min_rent)
    high = to_int_or_none(max_rent)
    if low is None and high is None:
        return None
    return {"rent": (low, high)}


# -------------------------------------------------------------
# LIST (public, paginated)
# -------------------------------------------------------------
@router.get("/apartments", summary="List apartments")
def list_apartments(
    page: Optional[str] = None,
    size: Optional[str] = None,
    minRent: Optional[str] = None,
    maxRent: Optional[str] = None,
    store: DocumentStore = Depends(get_store),
):
    page_no = to_int_or_none(page) or 1
    page_size = to_int_or_none(size) or settings.APARTMENTS_PAGE_SIZE
    page_no = max(page_no, 1)
    page_size = max(page_size, 1)

    return store.find(
        "apartments",
        ranges=rent_range(minRent, maxRent),
        order_by="rent",
        offset=(page_no - 1) * page_size,
        limit=page_size,
    )


# -------------------------------------------------------------
# COUNT (public, same filter)
# -------------------------------------------------------------
@router.get("/apartmentsCount", summary="Count apartments")
def count_apartments(
    minRent: Optional[str] = None,
    maxRent: Optional[str] = None,
    store: DocumentStore = Depends(get_store),
):
    return {"count": store.count("apartments", ranges=rent_range(minRent, maxRent))}
