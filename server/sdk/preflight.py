# Schema preflight client
# Asks the storefront API whether the backend schema is migrated

import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from .api_client import ApiClientError, fetch_json

logger = logging.getLogger(__name__)

HEALTH_PATH = "/api/health"
PREFLIGHT_TIMEOUT_SECONDS = 6.0
SCHEMA_MIGRATION_MESSAGE = "Требуется миграция БД: примените supabase_admin.sql и supabase_menu.sql."


@dataclass
class PreflightResult:
    schema_mismatch: bool
    message: Optional[str] = None


async def check_schema_preflight(base_url: str, timeout: float = PREFLIGHT_TIMEOUT_SECONDS,
                                 transport: Optional[httpx.AsyncBaseTransport] = None) -> PreflightResult:
    """
    Run the schema preflight against the storefront API.

    Any 503 from the health endpoint counts as a mismatch. Other failures
    (network, misconfiguration) are logged and reported as no mismatch.

    Args:
        base_url: Storefront API origin
        timeout: Request timeout in seconds
        transport: Custom httpx transport

    Returns:
        PreflightResult
    """
    try:
        payload = await fetch_json(f"{base_url.rstrip('/')}{HEALTH_PATH}", timeout=timeout, transport=transport)
    except ApiClientError as e:
        if e.status == 503:
            return PreflightResult(schema_mismatch=True, message=SCHEMA_MIGRATION_MESSAGE)
        logger.warning(f"Schema preflight unavailable ({e.code}, status {e.status})")
        return PreflightResult(schema_mismatch=False)

    payload = payload if isinstance(payload, dict) else {}
    mismatch = payload.get("error") == "schema-mismatch" or payload.get("code") == "SCHEMA_MISMATCH"
    return PreflightResult(schema_mismatch=mismatch, message=SCHEMA_MIGRATION_MESSAGE if mismatch else None)
