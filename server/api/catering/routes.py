# Catering routes
# Public enquiry form, stored with the service-role key and rate limited per phone

import json
import logging
from fastapi import APIRouter, Request, status

from .models import CateringRequest, CateringResponse
from db.backend import BackendClient, BackendError
from db.core_operations import CoreOperations
from db.supporting_operations import SupportingOperations
from utils.config import Config
from utils.response import (
    create_diagnostic_code, create_error_response, create_misconfigured_response, create_success_response
)
from utils.validators import validate_catering_payload

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/catering", tags=["catering"])

config = Config()


def _client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for", "")
    first = forwarded.split(",")[0].strip()
    return first or "unknown"


@router.post(
    "",
    response_model=CateringResponse,
    openapi_extra={"requestBody": {"content": {"application/json": {
        "schema": CateringRequest.model_json_schema()
    }}, "required": True}},
)
async def create_catering_request(request: Request):
    """
    Store a catering enquiry

    Returns:
        200 {ok: true}; 400 on invalid input; 429 when the phone already sent
        too many requests within the window
    """
    settings = config.get_backend_settings()
    missing = [label for label, value in ((settings.origin_label, settings.origin),
                                          (settings.service_role_key_label, settings.service_role_key))
               if not value]
    if missing:
        logger.error(f"Catering unavailable, backend not configured: {', '.join(missing)}")
        return create_misconfigured_response(missing)

    try:
        payload = json.loads(await request.body())
    except ValueError:
        return create_error_response("INVALID_JSON", "Invalid request body", status.HTTP_400_BAD_REQUEST)

    values, error = validate_catering_payload(payload)
    if values is None:
        return create_error_response("INVALID_PAYLOAD", error, status.HTTP_400_BAD_REQUEST)

    backend = BackendClient(settings.origin, settings.service_role_key, timeout=settings.timeout_seconds)
    window_minutes = int(config.get("catering.rate_limit_window_minutes", 15))
    max_per_window = int(config.get("catering.rate_limit_max_per_window", 3))

    try:
        recent = await SupportingOperations(backend).count_recent_catering_requests(values["phone"], window_minutes)
        if recent >= max_per_window:
            logger.warning(f"Catering rate limit hit for {values['phone']}: {recent} in {window_minutes} min")
            return create_error_response(
                "RATE_LIMITED",
                f"Too many requests. Try again in {window_minutes} minutes.",
                status.HTTP_429_TOO_MANY_REQUESTS
            )

        await CoreOperations(backend).create_catering_request(
            values, _client_ip(request), request.headers.get("user-agent")
        )
    except BackendError as e:
        diagnostic_code = create_diagnostic_code("CAT")
        logger.error(f"[{diagnostic_code}] Catering request failed: {e.to_log_dict()}")
        return create_error_response("CATERING_REQUEST_FAILED", "Failed to persist request",
                                     status.HTTP_502_BAD_GATEWAY, diagnosticCode=diagnostic_code)

    return create_success_response({"ok": True})
