# Auth module

from .routes import (
    router as auth_router, get_backend_settings, get_current_principal, get_staff_principal, require_role
)
from .models import AuthenticatedPrincipal, MeResponse
from .principal import resolve_principal

__all__ = [
    "auth_router",
    "get_backend_settings",
    "get_current_principal",
    "get_staff_principal",
    "require_role",
    "resolve_principal",
    "AuthenticatedPrincipal",
    "MeResponse"
]
