# Delivery zone routes

import logging
from fastapi import APIRouter, Depends, status

from .models import DeliveryZonesResponse
from api.auth.routes import get_backend_settings
from db.backend import BackendClient, BackendError
from db.query_operations import QueryOperations
from utils.config import BackendSettings
from utils.response import create_diagnostic_code, create_error_response, create_success_response

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/delivery-zones", tags=["delivery"])


@router.get("", response_model=DeliveryZonesResponse)
async def get_delivery_zones(settings: BackendSettings = Depends(get_backend_settings)):
    """Delivery polygons by priority, as [lat, lon] pairs; zones under three points are dropped"""
    backend = BackendClient(settings.origin, settings.anon_key, timeout=settings.timeout_seconds)
    try:
        zones = await QueryOperations(backend).get_delivery_zones()
    except BackendError as e:
        diagnostic_code = create_diagnostic_code("ZON")
        logger.error(f"[{diagnostic_code}] Delivery zones load failed: {e.to_log_dict()}")
        return create_error_response("DELIVERY_ZONES_LOAD_FAILED", "Failed to load delivery zones",
                                     status.HTTP_502_BAD_GATEWAY, diagnosticCode=diagnostic_code)

    return create_success_response({"zones": [zone.to_wire() for zone in zones]})
