from fastapi import APIRouter, Response

from core.logging_config import logger
from core.tokens import create_access_token, set_token_cookie, clear_token_cookie
from core.utils import normalize_email
from models.auth import TokenRequest, SuccessResponse


router = APIRouter(
    tags=["Auth"],
)


# ============================================================
# ISSUE TOKEN (sets http-only cookie)
# ============================================================
@router.post("/jwt", response_model=SuccessResponse, summary="Issue access token cookie")
def issue_token(payload: TokenRequest, response: Response):
    claims = payload.model_dump(exclude_none=True)
    claims["email"] = normalize_email(claims["email"])

    token = create_access_token(claims)
    set_token_cookie(response, token)

    logger.info(f"Token issued for {claims['email']}")
    return SuccessResponse()


# ============================================================
# LOGOUT (clears cookie; tokens are not tracked server-side)
# ============================================================
@router.post("/logout", response_model=SuccessResponse, summary="Clear access token cookie")
def logout(response: Response):
    clear_token_cookie(response)
    return SuccessResponse()
