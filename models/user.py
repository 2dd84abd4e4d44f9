# models/user.py

from typing import Optional
from pydantic import BaseModel, EmailStr, ConfigDict


# -------------------------------------------------
# Registration (POST /users)
# -------------------------------------------------
class UserCreate(BaseModel):
    """
    Self-registration payload. Anything the client sends beyond these
    fields is stored as-is; role and timestamps are always server-set.
    """
    model_config = ConfigDict(extra="allow")

    email: EmailStr
    name: Optional[str] = None
    photo: Optional[str] = None


class RoleResponse(BaseModel):
    role: str = "user"
