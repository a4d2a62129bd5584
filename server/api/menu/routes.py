# Menu routes
# Public menu read model: active categories and items

import logging
from fastapi import APIRouter, status

from .models import MenuErrorResponse
from db.backend import BackendClient
from db.query_operations import QueryOperations
from utils.config import Config
from utils.response import create_error_response, create_misconfigured_response, create_success_response

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/menu", tags=["menu"])

config = Config()


@router.get("", responses={502: {"model": MenuErrorResponse}})
async def get_menu():
    """
    Categories and items for public display.

    An item load failure is a 502 listing every failed query. A category
    failure alone still returns 200, with categories derived from the items.
    """
    settings = config.get_backend_settings()
    if not settings.is_configured:
        logger.error(f"Menu unavailable, backend not configured: {', '.join(settings.missing)}")
        return create_misconfigured_response(settings.missing)

    backend = BackendClient(settings.origin, settings.anon_key, timeout=settings.timeout_seconds)
    result = await QueryOperations(backend).load_menu()

    for failure in result.failures:
        logger.error(f"Menu query failed: query={failure.query} table={failure.table} "
                     f"code={failure.code} message={failure.message}")

    if result.items_failed:
        return create_error_response(
            "MENU_LOAD_FAILED",
            "Failed to load menu",
            status.HTTP_502_BAD_GATEWAY,
            failures=[failure.to_wire() for failure in result.failures]
        )

    if result.categories_failed:
        logger.warning(f"Serving {len(result.categories)} categories derived from menu items")

    return create_success_response({
        "categories": [category.to_wire() for category in result.categories],
        "items": [item.to_wire() for item in result.items],
    })
