# Back office routes
# Read-only staff views gated by profiles.role

import logging
from fastapi import APIRouter, Depends, Query, status

from .models import AdminOrdersResponse, RoleResponse
from api.auth.models import AuthenticatedPrincipal
from api.auth.routes import get_backend_settings, get_staff_principal, require_role
from db.backend import BackendClient, BackendError
from db.query_operations import ADMIN_ORDERS_DEFAULT_LIMIT, ADMIN_ORDERS_MAX_LIMIT, QueryOperations
from utils.config import BackendSettings
from utils.response import create_diagnostic_code, create_error_response, create_success_response
from utils.roles import role_rank

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/admin", tags=["admin"])


@router.get("/role", response_model=RoleResponse)
async def get_role(principal: AuthenticatedPrincipal = Depends(get_staff_principal)):
    """Staff role of the caller; guest when there is no profile"""
    return RoleResponse(role=principal.staff_role, rank=role_rank(principal.staff_role))


@router.get("/orders", response_model=AdminOrdersResponse)
async def list_orders(
    limit: int = Query(ADMIN_ORDERS_DEFAULT_LIMIT, ge=1, le=ADMIN_ORDERS_MAX_LIMIT),
    principal: AuthenticatedPrincipal = Depends(require_role("engineer")),
    settings: BackendSettings = Depends(get_backend_settings)
):
    """
    Latest orders with per-status totals

    Args:
        limit: Rows to return, newest first
    """
    backend = BackendClient(settings.origin, settings.anon_key, access_token=principal.access_token,
                            timeout=settings.timeout_seconds)
    try:
        result = await QueryOperations(backend).list_orders(limit)
    except BackendError as e:
        diagnostic_code = create_diagnostic_code("ADM")
        logger.error(f"[{diagnostic_code}] Back office orders load failed: {e.to_log_dict()}")
        return create_error_response("ADMIN_ORDERS_LOAD_FAILED", "Failed to load orders",
                                     status.HTTP_502_BAD_GATEWAY, diagnosticCode=diagnostic_code)

    return create_success_response({
        "orders": [order.to_wire() for order in result["orders"]],
        "totals": result["totals"],
    })
