# core/tokens.py

from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Response
from jose import JWTError, jwt

from core.config import settings
from core.errors import InvalidToken


RESERVED_CLAIMS = ("exp", "iat")


# ============================================================
# ISSUE
# ============================================================
def create_access_token(claims: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Sign an identity payload. The payload must carry an email; expiry is
    fixed by ACCESS_TOKEN_EXPIRE_MINUTES unless a delta is given.
    """
    if not claims.get("email"):
        raise ValueError("Token claims must include an email")

    now = datetime.now(timezone.utc)
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    payload = {k: v for k, v in claims.items() if k not in RESERVED_CLAIMS}
    payload["iat"] = now
    payload["exp"] = now + expires_delta

    return jwt.encode(payload, settings.ACCESS_TOKEN_SECRET, algorithm=settings.JWT_ALGORITHM)


# ============================================================
# VERIFY
# ============================================================
def decode_access_token(token: Optional[str]) -> dict:
    if not token:
        raise InvalidToken("No token supplied")

    try:
        payload = jwt.decode(
            token,
            settings.ACCESS_TOKEN_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
        )
    except JWTError as e:
        raise InvalidToken(f"Token rejected: {type(e).__name__}") from e

    if not payload.get("email"):
        raise InvalidToken("Token has no email claim")

    return {k: v for k, v in payload.items() if k not in RESERVED_CLAIMS}


# ============================================================
# COOKIE TRANSPORT
# ============================================================
def _cookie_options() -> dict:
    return {
        "httponly": True,
        "secure": settings.is_production,
        "samesite": "none" if settings.is_production else "strict",
    }


def set_token_cookie(response: Response, token: str):
    response.set_cookie(
        settings.TOKEN_COOKIE_NAME,
        token,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        **_cookie_options(),
    )


def clear_token_cookie(response: Response):
    """Tokens are not tracked server-side; logout only drops the cookie."""
    response.delete_cookie(settings.TOKEN_COOKIE_NAME, **_cookie_options())
