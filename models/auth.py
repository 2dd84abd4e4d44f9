# models/auth.py

from typing import Optional
from pydantic import BaseModel, ConfigDict, EmailStr


class TokenRequest(BaseModel):
    """Identity payload signed into the token. Extra claims pass through."""
    model_config = ConfigDict(extra="allow")

    email: EmailStr
    name: Optional[str] = None


class SuccessResponse(BaseModel):
    success: bool = True
