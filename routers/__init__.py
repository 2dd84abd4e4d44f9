# routers/__init__.py

from .auth import router as auth_router
from .users import router as users_router
from .apartments import router as apartments_router
from .agreements import router as agreements_router
from .coupons import router as coupons_router
from .announcements import router as announcements_router
from .payments import router as payments_router
from .admin import router as admin_router
from .health import router as health_router


__all__ = [
    "auth_router",
    "users_router",
    "apartments_router",
    "agreements_router",
    "coupons_router",
    "announcements_router",
    "payments_router",
    "admin_router",
    "health_router",
]
