# Auth routes and shared request dependencies
# Backend settings, bearer principal and role gate used by every authenticated router

import logging
from typing import Optional
from fastapi import APIRouter, Depends, Header, status

from .models import AuthenticatedPrincipal, MeResponse, MeUser
from .principal import load_staff_role, resolve_principal
from db.backend import BackendError
from utils.config import BackendSettings, Config
from utils.response import (
    MISCONFIGURED_ENV, MISCONFIGURED_ENV_MESSAGE, create_api_exception, create_diagnostic_code
)
from utils.roles import ROLE_RANK, has_access
from utils.security import extract_bearer_token

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/auth", tags=["auth"])

config = Config()


def get_backend_settings() -> BackendSettings:
    """
    Backend settings for the current request.

    Raises 500 MISCONFIGURED_ENV before anything else touches the backend.
    """
    settings = config.get_backend_settings()
    if not settings.is_configured:
        logger.error(f"Backend is not configured, missing: {', '.join(settings.missing)}")
        raise create_api_exception(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            MISCONFIGURED_ENV,
            MISCONFIGURED_ENV_MESSAGE,
            missing=settings.missing
        )
    return settings


async def get_current_principal(
    settings: BackendSettings = Depends(get_backend_settings),
    authorization: Optional[str] = Header(None)
) -> AuthenticatedPrincipal:
    """Resolve the bearer token into a principal or fail with 401"""
    token = extract_bearer_token(authorization)
    if not token:
        raise create_api_exception(status.HTTP_401_UNAUTHORIZED, "UNAUTHORIZED", "Unauthorized")

    try:
        principal = await resolve_principal(token, settings)
    except BackendError as e:
        diagnostic_code = create_diagnostic_code("AUTH")
        logger.error(f"[{diagnostic_code}] Auth service failed: {e.to_log_dict()}")
        raise create_api_exception(
            status.HTTP_502_BAD_GATEWAY, "AUTH_UNAVAILABLE", "Failed to verify credentials",
            diagnosticCode=diagnostic_code
        )

    if principal is None:
        raise create_api_exception(status.HTTP_401_UNAUTHORIZED, "UNAUTHORIZED", "Unauthorized")

    return principal


async def get_staff_principal(
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    settings: BackendSettings = Depends(get_backend_settings)
) -> AuthenticatedPrincipal:
    """Principal with profiles.role loaded"""
    try:
        staff_role = await load_staff_role(principal, settings)
    except BackendError as e:
        diagnostic_code = create_diagnostic_code("ROLE")
        logger.error(f"[{diagnostic_code}] Role lookup failed for {principal.user_id}: {e.to_log_dict()}")
        raise create_api_exception(
            status.HTTP_502_BAD_GATEWAY, "ROLE_LOAD_FAILED", "Failed to load role",
            diagnosticCode=diagnostic_code
        )

    return principal.model_copy(update={"staff_role": staff_role})


def require_role(min_role: str):
    """
    Dependency factory gating a route on a minimum staff role

    Args:
        min_role: One of ROLE_RANK

    Returns:
        Dependency yielding the principal when access is granted, 403 otherwise
    """
    if min_role not in ROLE_RANK:
        raise ValueError(f"Unknown role: {min_role}")

    async def role_gate(principal: AuthenticatedPrincipal = Depends(get_staff_principal)) -> AuthenticatedPrincipal:
        if not has_access(principal.staff_role, min_role):
            logger.warning(f"User {principal.user_id} with role {principal.staff_role} denied, requires {min_role}")
            raise create_api_exception(status.HTTP_403_FORBIDDEN, "FORBIDDEN", "Forbidden")
        return principal

    return role_gate


@router.get("/me", response_model=MeResponse)
async def get_me(principal: AuthenticatedPrincipal = Depends(get_current_principal)):
    """Who the bearer token belongs to"""
    return MeResponse(user=MeUser(id=principal.user_id, email=principal.email, role=principal.role))
