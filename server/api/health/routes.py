# Health routes
# Schema preflight: every required table/column set must be selectable

import logging
from fastapi import APIRouter, status

from .models import SchemaHealthResponse
from db.backend import BackendClient
from db.supporting_operations import SupportingOperations
from utils.config import Config
from utils.response import create_misconfigured_response, create_success_response

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/health", tags=["health"])

config = Config()


@router.get("", response_model=SchemaHealthResponse, responses={503: {"model": SchemaHealthResponse}})
async def schema_health():
    """
    Deployment preflight against the backend schema

    Returns:
        200 {ok: true}, or 503 with the itemised schema issues
    """
    settings = config.get_backend_settings()
    if not settings.is_configured:
        logger.error(f"Health check impossible, backend not configured: {', '.join(settings.missing)}")
        return create_misconfigured_response(settings.missing)

    backend = BackendClient(settings.origin, settings.anon_key, timeout=settings.timeout_seconds)
    issues = await SupportingOperations(backend).check_schema()

    if not issues:
        return create_success_response({"ok": True})

    transport_failure = any(issue.transport for issue in issues)
    code, error = ("HEALTHCHECK_FAILED", "healthcheck-failed") if transport_failure \
        else ("SCHEMA_MISMATCH", "schema-mismatch")
    logger.error(f"Health check failed ({code}): {len(issues)} issue(s)")

    return create_success_response(
        {
            "ok": False,
            "code": code,
            "error": error,
            "schemaIssues": [issue.to_wire() for issue in issues],
        },
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE
    )
