# routers/announcements.py

from fastapi import APIRouter, Depends

from core.logging_config import logger
from core.store import DocumentStore, get_store
from core.utils import utc_now_iso
from dependencies.auth import CurrentUser, get_current_user, require_admin
from models.announcement import AnnouncementCreate


router = APIRouter(
    prefix="/announcements",
    tags=["Announcements"],
)


@router.get("", summary="List announcements")
def list_announcements(
    current_user: CurrentUser = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
):
    return store.find("announcements", order_by="createdAt", descending=True)


@router.post("", summary="Admin: post announcement")
def create_announcement(
    payload: AnnouncementCreate,
    admin: CurrentUser = Depends(require_admin),
    store: DocumentStore = Depends(get_store),
):
    data = payload.model_dump()
    data["createdAt"] = utc_now_iso()

    announcement = store.insert_one("announcements", data)
    logger.info(f"Announcement {announcement.get('id')} posted by {admin.email}")
    return announcement
