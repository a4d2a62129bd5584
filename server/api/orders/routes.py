# Order routes
# Checkout submission: auth and idempotency checks, payload validation, one atomic backend call

import json
import logging
from typing import Optional
from fastapi import APIRouter, Header, Request, status

from .models import CreateOrderRequest, CreateOrderResponse, OrderErrorResponse
from db.backend import BackendClient, BackendError
from db.core_operations import CoreOperations
from utils.config import Config
from utils.response import (
    create_diagnostic_code, create_error_response, create_misconfigured_response, create_success_response
)
from utils.security import extract_bearer_token
from utils.validators import normalize_order_payload, validate_order_payload

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/orders", tags=["orders"])

config = Config()

# Backend statuses meaning the caller's token was not accepted
TOKEN_REJECTED_STATUSES = (401, 403)


def _order_error(code: str, error: str, status_code: int, diagnostic_code: Optional[str] = None):
    return create_error_response(
        code, error, status_code,
        diagnosticCode=diagnostic_code or create_diagnostic_code("ORD")
    )


@router.post(
    "/create",
    response_model=CreateOrderResponse,
    responses={400: {"model": OrderErrorResponse}, 401: {"model": OrderErrorResponse},
               502: {"model": OrderErrorResponse}},
    openapi_extra={"requestBody": {"content": {"application/json": {
        "schema": CreateOrderRequest.model_json_schema()
    }}, "required": True}},
)
async def create_order(
    request: Request,
    authorization: Optional[str] = Header(None),
    idempotency_key: Optional[str] = Header(None)
):
    """
    Create an order from a cart checkout.

    The idempotency key is forwarded to the backend procedure, which returns
    the existing order id when the key was already used. Nothing is cached or
    retried here.
    """
    settings = config.get_backend_settings()
    if not settings.is_configured:
        logger.error(f"Order rejected, backend not configured: {', '.join(settings.missing)}")
        return create_misconfigured_response(settings.missing)

    access_token = extract_bearer_token(authorization)
    if not access_token:
        return _order_error("UNAUTHORIZED", "Unauthorized", status.HTTP_401_UNAUTHORIZED)

    key = (idempotency_key or "").strip()
    if not key:
        return _order_error("MISSING_IDEMPOTENCY_KEY", "Idempotency key is required", status.HTTP_400_BAD_REQUEST)

    try:
        payload = json.loads(await request.body())
    except ValueError:
        return _order_error("INVALID_JSON", "Invalid request body", status.HTTP_400_BAD_REQUEST)

    if not validate_order_payload(payload):
        return _order_error("INVALID_PAYLOAD", "Invalid checkout payload", status.HTTP_400_BAD_REQUEST)

    order = normalize_order_payload(payload)

    backend = BackendClient(settings.origin, settings.anon_key, access_token=access_token,
                            timeout=settings.timeout_seconds)
    core_ops = CoreOperations(backend)

    try:
        order_id = await core_ops.create_order_with_items(order, key)
    except BackendError as e:
        diagnostic_code = create_diagnostic_code("ORD")
        if e.status in TOKEN_REJECTED_STATUSES:
            logger.warning(f"[{diagnostic_code}] Backend rejected access token: {e.to_log_dict()}")
            return _order_error("UNAUTHORIZED", "Unauthorized", status.HTTP_401_UNAUTHORIZED, diagnostic_code)

        logger.error(
            f"[{diagnostic_code}] ORDER_CREATE_FAILED code={e.code} message={e.message} "
            f"details={e.details} status={e.status}"
        )
        return _order_error("ORDER_CREATE_FAILED", "Failed to create order", status.HTTP_502_BAD_GATEWAY,
                            diagnostic_code)

    return create_success_response({"orderId": order_id})
