# Auth models

from typing import Optional
from pydantic import BaseModel, Field


class AuthenticatedPrincipal(BaseModel):
    """Caller resolved from a bearer token"""
    user_id: str = Field(..., description="Backend user id")
    email: Optional[str] = None
    role: Optional[str] = Field(None, description="Auth service role, e.g. authenticated")
    access_token: str = Field(..., repr=False)
    staff_role: Optional[str] = Field(None, description="profiles.role, loaded for gated routes")


class MeUser(BaseModel):
    id: str
    email: Optional[str] = None
    role: Optional[str] = None


class MeResponse(BaseModel):
    user: MeUser
