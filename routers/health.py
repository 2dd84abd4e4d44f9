# routers/health.py

from fastapi import APIRouter, Depends
from core.store import DocumentStore, get_store

router = APIRouter(
    prefix="/health",
    tags=["Health"],
)


# -----------------------------------------------------
# GET /health/db
# Checks store connection + one query per collection
# No auth required
# -----------------------------------------------------
@router.get("/db", summary="Document store health check")
def health_db(store: DocumentStore = Depends(get_store)):
    """
    Verifies Supabase connectivity.
    Returns row-count + error details per collection.
    """
    status = store.ping()
    return {
        "service": "Supabase",
        "status": status.get("status", "unknown"),
        "details": status,
    }


# -----------------------------------------------------
# GET /health/app
# -----------------------------------------------------
@router.get("/app", summary="App health check")
async def health_app():
    return {
        "service": "BMS API",
        "status": "ok",
    }
