# core/store.py

"""
Document store handle.

Each collection (users, apartments, agreements, coupons, announcements,
payments) is a Supabase table addressed through PostgREST. The handle is
created once at process start, attached to ``app.state.store`` and closed at
shutdown; request handlers receive it through ``get_store``.

Only single-row writes are atomic. Callers that need several writes to land
together (the tenancy cascade) must treat each write as independent.
"""

from typing import Any, Dict, List, Optional, Tuple

from fastapi import Request

from core.errors import Conflict, StoreUnavailable, extract_store_error, is_unique_violation
from core.logging_config import logger


COLLECTIONS = (
    "users",
    "apartments",
    "agreements",
    "coupons",
    "announcements",
    "payments",
)

RangeFilter = Dict[str, Tuple[Optional[float], Optional[float]]]


class DocumentStore:
    """Thin collection-oriented wrapper over a Supabase client."""

    def __init__(self, client):
        self._client = client

    # -----------------------------------------------------
    # Lifecycle
    # -----------------------------------------------------
    @property
    def is_open(self) -> bool:
        return self._client is not None

    def close(self):
        if self._client is not None:
            logger.info("Closing document store")
        self._client = None

    def _table(self, collection: str):
        if self._client is None:
            raise StoreUnavailable("Document store is not configured")
        return self._client.table(collection)

    # -----------------------------------------------------
    # Query building
    # -----------------------------------------------------
    @staticmethod
    def _apply_filters(query, filters: Optional[dict], ranges: Optional[RangeFilter]):
        for key, val in (filters or {}).items():
            if val is None:
                query = query.is_(key, "null")
            else:
                query = query.eq(key, val)

        for key, (low, high) in (ranges or {}).items():
            if low is not None:
                query = query.gte(key, low)
            if high is not None:
                query = query.lte(key, high)

        return query

    # -----------------------------------------------------
    # Reads
    # -----------------------------------------------------
    def find(
        self,
        collection: str,
        filters: Optional[dict] = None,
        *,
        ranges: Optional[RangeFilter] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        try:
            query = self._apply_filters(self._table(collection).select("*"), filters, ranges)
            if order_by:
                query = query.order(order_by, desc=descending)
            if limit is not None:
                query = query.range(offset, offset + limit - 1)
            result = query.execute()
        except StoreUnavailable:
            raise
        except Exception as e:
            logger.error(f"Failed to fetch from {collection}: {extract_store_error(e)}")
            raise StoreUnavailable(f"find on {collection} failed") from e

        return result.data or []

    def find_one(self, collection: str, filters: dict) -> Optional[Dict[str, Any]]:
        rows = self.find(collection, filters, limit=1)
        return rows[0] if rows else None

    def count(
        self,
        collection: str,
        filters: Optional[dict] = None,
        *,
        ranges: Optional[RangeFilter] = None,
    ) -> int:
        try:
            query = self._table(collection).select("id", count="exact")
            result = self._apply_filters(query, filters, ranges).execute()
        except StoreUnavailable:
            raise
        except Exception as e:
            logger.error(f"Failed to count {collection}: {extract_store_error(e)}")
            raise StoreUnavailable(f"count on {collection} failed") from e

        return result.count or 0

    # -----------------------------------------------------
    # Writes
    # -----------------------------------------------------
    def insert_one(self, collection: str, data: dict) -> Dict[str, Any]:
        try:
            result = (
                self._table(collection)
                .insert(data, returning="representation")
                .execute()
            )
        except StoreUnavailable:
            raise
        except Exception as e:
            if is_unique_violation(e):
                logger.warning(f"Duplicate insert into {collection}: {extract_store_error(e)}")
                raise Conflict(f"duplicate row in {collection}") from e
            logger.error(f"Failed to insert into {collection}: {extract_store_error(e)}")
            raise StoreUnavailable(f"insert into {collection} failed") from e

        if not result.data:
            raise StoreUnavailable(f"insert into {collection} returned no row")
        return result.data[0]

    def update_one(self, collection: str, filters: dict, data: dict) -> Optional[Dict[str, Any]]:
        """
        Update the row matching every filter. Returns the updated row, or None
        when nothing matched, which lets callers use extra filters
        (e.g. an expected prior status) as a conditional write.
        """
        if not filters:
            raise ValueError("update_one requires at least one filter")

        try:
            query = self._table(collection).update(data, returning="representation")
            result = self._apply_filters(query, filters, None).execute()
        except StoreUnavailable:
            raise
        except Exception as e:
            logger.error(f"Failed to update {collection}: {extract_store_error(e)}")
            raise StoreUnavailable(f"update on {collection} failed") from e

        return result.data[0] if result.data else None

    # -----------------------------------------------------
    # Health
    # -----------------------------------------------------
    def ping(self) -> dict:
        """
        Connectivity check across every collection.
        """
        if self._client is None:
            return {"service": "Supabase", "status": "not_configured"}

        results = {}
        for name in COLLECTIONS:
            try:
                res = self._client.table(name).select("*").limit(1).execute()
                results[name] = {"status": "ok", "rows_found": len(res.data or [])}
            except Exception as err:
                results[name] = {"status": "error", "detail": extract_store_error(err)}

        status = "ok" if all(r["status"] == "ok" for r in results.values()) else "degraded"
        return {"service": "Supabase", "status": status, "tables": results}


# ============================================================
# FastAPI dependency
# ============================================================
def get_store(request: Request) -> DocumentStore:
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise StoreUnavailable("Document store was never opened")
    return store
