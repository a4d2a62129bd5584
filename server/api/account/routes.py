# Account routes
# The caller's own orders and loyalty balance, read with their token so row-level security applies

import logging
from fastapi import APIRouter, Depends, Query, status

from .models import LoyaltyResponse, MyOrdersResponse
from api.auth.models import AuthenticatedPrincipal
from api.auth.routes import get_backend_settings, get_current_principal
from db.backend import BackendClient, BackendError
from db.mappers import MapperError
from db.query_operations import QueryOperations
from utils.config import BackendSettings
from utils.response import create_diagnostic_code, create_error_response, create_success_response

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/me", tags=["account"])


def _user_queries(principal: AuthenticatedPrincipal, settings: BackendSettings) -> QueryOperations:
    backend = BackendClient(settings.origin, settings.anon_key, access_token=principal.access_token,
                            timeout=settings.timeout_seconds)
    return QueryOperations(backend)


@router.get("/orders", response_model=MyOrdersResponse)
async def get_my_orders(
    offset: int = Query(0, ge=0, description="Orders to skip"),
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    settings: BackendSettings = Depends(get_backend_settings)
):
    """
    One page of the caller's orders, newest first

    Returns:
        {items, nextOffset}; pass nextOffset back to get the following page
    """
    try:
        page = await _user_queries(principal, settings).get_my_orders_page(principal.user_id, offset)
    except (BackendError, MapperError) as e:
        diagnostic_code = create_diagnostic_code("ACC")
        logger.error(f"[{diagnostic_code}] Orders load failed for {principal.user_id}: {e}")
        return create_error_response("MY_ORDERS_LOAD_FAILED", "Failed to load orders",
                                     status.HTTP_502_BAD_GATEWAY, diagnosticCode=diagnostic_code)

    return create_success_response(page.to_wire())


@router.get("/loyalty", response_model=LoyaltyResponse)
async def get_my_loyalty(
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    settings: BackendSettings = Depends(get_backend_settings)
):
    """Loyalty balance, tier, rules and the last transactions"""
    try:
        loyalty = await _user_queries(principal, settings).get_loyalty(principal.user_id)
    except BackendError as e:
        if e.code == "LOYALTY_NOT_ACTIVATED":
            return create_error_response(e.code, "Loyalty is not activated for this account",
                                         status.HTTP_404_NOT_FOUND)
        diagnostic_code = create_diagnostic_code("ACC")
        logger.error(f"[{diagnostic_code}] Loyalty load failed for {principal.user_id}: {e.to_log_dict()}")
        return create_error_response("LOYALTY_LOAD_FAILED", "Failed to load loyalty data",
                                     status.HTTP_502_BAD_GATEWAY, diagnosticCode=diagnostic_code)
    except MapperError as e:
        diagnostic_code = create_diagnostic_code("ACC")
        logger.error(f"[{diagnostic_code}] Malformed loyalty account for {principal.user_id}: {e}")
        return create_error_response("LOYALTY_LOAD_FAILED", "Failed to load loyalty data",
                                     status.HTTP_502_BAD_GATEWAY, diagnosticCode=diagnostic_code)

    return create_success_response(loyalty.to_wire())
