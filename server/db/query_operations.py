# Read-side business operations
# Every method returns typed records from db.models; backend errors propagate as BackendError

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Dict, List

from .backend import BackendClient, BackendError
from .mappers import (
    derive_categories_from_items, parse_admin_order_row, parse_delivery_zone_row, parse_loyalty,
    parse_menu_category_row, parse_menu_item_row, parse_order_row, parse_role, parse_rows
)
from .models import (
    AdminOrder, DeliveryZone, LoyaltyData, MenuCategory, MenuItem, MenuQueryFailure, OrdersPage
)

logger = logging.getLogger(__name__)

MY_ORDERS_PAGE_SIZE = 20
LOYALTY_TRANSACTIONS_LIMIT = 30
ADMIN_ORDERS_DEFAULT_LIMIT = 200
ADMIN_ORDERS_MAX_LIMIT = 500
ORDER_STATUSES = ("NEW", "COOKING", "READY", "COURIER", "DELIVERED", "CANCELLED")

MENU_CATEGORY_COLUMNS = ["key", "label", "full_label", "image_url", "fallback_background", "sort"]
MENU_ITEM_COLUMNS = ["id", "title", "description", "category", "price", "image_url"]


@dataclass
class MenuLoadResult:
    categories: List[MenuCategory] = field(default_factory=list)
    items: List[MenuItem] = field(default_factory=list)
    failures: List[MenuQueryFailure] = field(default_factory=list)

    @property
    def items_failed(self) -> bool:
        return any(failure.query == "items" for failure in self.failures)

    @property
    def categories_failed(self) -> bool:
        return any(failure.query == "categories" for failure in self.failures)


class QueryOperations:
    """
    Read operations against the hosted database
    """
    def __init__(self, backend: BackendClient):
        self.backend = backend

    @staticmethod
    def _failure(query: str, table: str, error: BackendError) -> MenuQueryFailure:
        return MenuQueryFailure(query=query, table=table, code=error.code, message=error.message)

    async def load_menu(self) -> MenuLoadResult:
        """
        Load active categories and items together.

        Backend errors are not raised; each one is recorded as a failure for
        the query it belongs to. When only the category query fails the
        categories are derived from the items.

        Returns:
            MenuLoadResult
        """
        categories_result, items_result = await asyncio.gather(
            self.backend.select(
                "menu_categories", MENU_CATEGORY_COLUMNS,
                filters={"is_active": True}, order=[("sort", True)]
            ),
            self.backend.select(
                "menu_items", MENU_ITEM_COLUMNS,
                filters={"is_active": True},
                order=[("category", True), ("sort", True), ("created_at", False)]
            ),
            return_exceptions=True,
        )

        result = MenuLoadResult()

        for query, table, outcome in (("categories", "menu_categories", categories_result),
                                      ("items", "menu_items", items_result)):
            if isinstance(outcome, BackendError):
                result.failures.append(self._failure(query, table, outcome))
            elif isinstance(outcome, BaseException):
                raise outcome

        if not isinstance(items_result, BaseException):
            result.items = parse_rows(items_result, parse_menu_item_row)

        if not isinstance(categories_result, BaseException):
            result.categories = parse_rows(categories_result, parse_menu_category_row)
        elif not result.items_failed:
            result.categories = derive_categories_from_items(result.items)

        return result

    async def get_my_orders_page(self, user_id: str, offset: int = 0) -> OrdersPage:
        """
        One page of the caller's orders, newest first, with their items

        Args:
            user_id: Authenticated user id
            offset: Rows to skip

        Returns:
            OrdersPage; next_offset equals offset when the page is empty
        """
        offset = max(0, int(offset))
        orders = await self.backend.select(
            "orders", ["id", "created_at", "status", "total", "address", "comment"],
            filters={"created_by": user_id}, order=[("created_at", False)],
            limit=MY_ORDERS_PAGE_SIZE, offset=offset
        )
        if not orders:
            return OrdersPage(items=[], next_offset=offset)

        order_ids = [row["id"] for row in orders if row.get("id")]
        item_rows = await self.backend.select(
            "order_items", ["order_id", "title", "qty", "price"],
            filters={"order_id": order_ids}, order=[("id", True)]
        )

        return OrdersPage(
            items=[parse_order_row(row, item_rows) for row in orders if row.get("id")],
            next_offset=offset + len(orders),
        )

    async def get_loyalty(self, user_id: str) -> LoyaltyData:
        """
        Loyalty account with its last transactions

        Raises:
            BackendError: LOYALTY_NOT_ACTIVATED (status 404) when there is no account
        """
        account = await self.backend.select(
            "loyalty_accounts", ["id", "points_balance", "lifetime_earned", "tier_name"],
            filters={"user_id": user_id}, single=True
        )
        if not account:
            raise BackendError("Loyalty is not activated for this account",
                               code="LOYALTY_NOT_ACTIVATED", status=404)

        transactions = await self.backend.select(
            "loyalty_transactions",
            ["id", "created_at", "operation_type", "points_delta", "reason", "order_id"],
            filters={"account_id": account["id"]}, order=[("created_at", False)],
            limit=LOYALTY_TRANSACTIONS_LIMIT
        )
        return parse_loyalty(account, transactions)

    async def get_delivery_zones(self) -> List[DeliveryZone]:
        rows = await self.backend.select(
            "delivery_zones", ["id", "name", "color", "min_order_amount", "polygon_geojson"],
            order=[("priority", True)]
        )
        return parse_rows(rows, parse_delivery_zone_row)

    async def get_role(self, user_id: str) -> str:
        row = await self.backend.select("profiles", ["role"], filters={"user_id": user_id}, single=True)
        return parse_role(row)

    async def list_orders(self, limit: int = ADMIN_ORDERS_DEFAULT_LIMIT) -> Dict[str, object]:
        """
        Latest orders for the back office with per-status totals

        Returns:
            {"orders": [AdminOrder], "totals": {status: count}}
        """
        limit = min(max(1, int(limit)), ADMIN_ORDERS_MAX_LIMIT)
        rows = await self.backend.select(
            "orders",
            ["id", "created_at", "customer_name", "customer_phone", "address", "comment", "status", "total"],
            order=[("created_at", False)], limit=limit
        )
        orders: List[AdminOrder] = parse_rows(rows, parse_admin_order_row)

        totals = {status: 0 for status in ORDER_STATUSES}
        for order in orders:
            totals[order.status] = totals.get(order.status, 0) + 1

        return {"orders": orders, "totals": totals}
