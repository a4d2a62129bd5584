# Menu repository
# Storefront API first; categories fall back to the static defaults, items never do

import logging
from typing import List, Optional

import httpx
from pydantic import ValidationError

from .api_client import ApiClientError, fetch_json
from .query_error import normalize_query_error
from db.menu_defaults import get_default_menu_categories
from db.models import MenuCategory, MenuItem

logger = logging.getLogger(__name__)

MENU_PATH = "/api/menu"
MENU_TIMEOUT_SECONDS = 8.0


def _parse_records(rows, model) -> list:
    records = []
    for row in rows if isinstance(rows, list) else []:
        try:
            records.append(model.model_validate(row))
        except ValidationError as e:
            logger.debug(f"Skipping malformed {model.__name__}: {e.error_count()} error(s)")
    return records


class MenuRepository:
    """
    Reads the public menu for storefront clients

    Args:
        base_url: Storefront API origin
        timeout: Request timeout in seconds
        transport: Custom httpx transport
    """

    def __init__(self, base_url: str, timeout: float = MENU_TIMEOUT_SECONDS,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    async def _fetch_menu(self) -> dict:
        payload = await fetch_json(f"{self.base_url}{MENU_PATH}", timeout=self.timeout, transport=self.transport)
        return payload if isinstance(payload, dict) else {}

    async def get_categories(self) -> List[MenuCategory]:
        """Categories from the API, or the static defaults when the API fails or has none"""
        try:
            categories = _parse_records((await self._fetch_menu()).get("categories"), MenuCategory)
        except ApiClientError as e:
            logger.warning(f"Menu categories unavailable ({e.code}), using defaults")
            return get_default_menu_categories()

        return categories or get_default_menu_categories()

    async def get_items(self) -> List[MenuItem]:
        """
        Menu items from the API

        Raises:
            QueryError: code MENU_LOAD_FAILED:<cause>
        """
        try:
            payload = await self._fetch_menu()
        except ApiClientError as e:
            raise normalize_query_error(
                e,
                base_code="MENU_LOAD_FAILED",
                fallback_message="Ошибка загрузки с сервера. Меню временно недоступно.",
                configuration_message="Сервис меню временно недоступен: ошибка конфигурации сервера.",
            )

        return _parse_records(payload.get("items"), MenuItem)
