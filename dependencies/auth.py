from typing import Optional
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from pydantic import BaseModel

from core.config import settings
from core.errors import Forbidden, InvalidToken, Unauthorized
from core.logging_config import logger
from core.store import DocumentStore, get_store
from core.tokens import decode_access_token
from core.utils import normalize_email
from models.enums import UserRole
from services.tenancy_store import TenancyStore


# Cookie is the primary transport; the header is accepted for API clients.
bearer_scheme = HTTPBearer(auto_error=False)


# ============================================================
# Current User Model (decoded identity)
# ============================================================
class CurrentUser(BaseModel):
    email: str
    claims: dict = {}


# ============================================================
# AUTHENTICATE
# ============================================================
def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> CurrentUser:

    token = request.cookies.get(settings.TOKEN_COOKIE_NAME)
    if not token and credentials:
        token = credentials.credentials

    if not token:
        raise Unauthorized("No token in cookie or Authorization header")

    try:
        claims = decode_access_token(token)
    except InvalidToken:
        raise Unauthorized("Token failed verification")

    return CurrentUser(email=normalize_email(claims["email"]), claims=claims)


# ============================================================
# REQUIRE ADMIN (live lookup every call, never cached)
# ============================================================
def require_admin(
    current_user: CurrentUser = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
) -> CurrentUser:

    user = TenancyStore(store).get_user_by_email(current_user.email)
    if not user or user.get("role") != UserRole.admin.value:
        logger.warning(f"Admin check failed for {current_user.email}")
        raise Forbidden(f"{current_user.email} is not an admin")

    return current_user


# ============================================================
# REQUIRE SELF (self-scoped endpoints)
# ============================================================
def require_self(target_email: Optional[str], current_user: CurrentUser):
    """
    The target identity in the path/query must be the caller's own.
    Admins get no exemption.
    """
    if not target_email or normalize_email(target_email) != current_user.email:
        raise Forbidden(f"{current_user.email} asked for {target_email}")
