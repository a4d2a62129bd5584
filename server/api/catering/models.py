# Catering models

from typing import Optional

from pydantic import BaseModel, Field


class CateringRequest(BaseModel):
    """Catering enquiry as sent by the storefront form"""
    name: str = Field(..., max_length=80)
    phone: str
    eventDateTime: str = Field(..., description="ISO 8601, at least one hour ahead")
    guests: int = Field(..., ge=1, le=5000)
    comment: Optional[str] = Field(None, max_length=1000)


class CateringResponse(BaseModel):
    ok: bool
