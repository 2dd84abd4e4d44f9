# models/agreement.py

from typing import Literal, Optional
from pydantic import BaseModel, Field


# -------------------------------------------------
# Submit (POST /agreements)
# -------------------------------------------------
class AgreementCreate(BaseModel):
    """
    The owning email always comes from the authenticated identity,
    never from the body.
    """
    apartmentId: str = Field(..., min_length=1)
    userName: Optional[str] = None


# -------------------------------------------------
# Transition (PUT /agreement/status/{id})
# -------------------------------------------------
class AgreementStatusUpdate(BaseModel):
    status: Literal["checked", "rejected"]
