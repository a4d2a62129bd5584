# Row mappers
# Loosely typed backend rows are parsed here into typed records; nothing untyped
# leaves the db package

import logging
import math
from typing import Any, Dict, Iterable, List, Optional

from utils.roles import normalize_role
from .menu_defaults import (
    DEFAULT_CATEGORY_BACKGROUND, DEFAULT_CATEGORY_LABELS, default_category_image, is_menu_category
)
from .models import (
    AdminOrder, DeliveryZone, LoyaltyData, LoyaltyTransaction, MenuCategory, MenuItem,
    MyOrder, MyOrderItem, Number
)

logger = logging.getLogger(__name__)

# Categories stored by older menu editors
LEGACY_TO_UI_CATEGORY = {
    "pizza": "classic",
    "snacks": "fried",
    "dessert": "desserts",
    "drinks": "drinks",
}

LOYALTY_RULES = [
    "Начисляем 5% баллами за оплаченный заказ после статуса DELIVERED.",
    "1 балл = 1 ₽ скидки на следующий заказ.",
    "Списать можно до 30% суммы заказа (кроме акций и комбо).",
    "В день рождения +300 баллов, если в профиле указана дата минимум за 7 дней.",
]

LOYALTY_TRANSACTION_TYPES = ("accrual", "redeem", "adjustment")


class MapperError(ValueError):
    """A row required to build a record is missing or malformed"""


def _text(value: Any) -> str:
    return "" if value is None else str(value).strip()


def _optional_text(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _to_number(value: Any, default: Number = 0) -> Optional[Number]:
    """
    Coerce a backend numeric column; numeric strings are accepted.

    Returns None for values that are not finite numbers.
    """
    if value is None:
        return default
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return int(number) if number.is_integer() and not isinstance(value, float) else number


def map_legacy_category_to_ui(category: str) -> Optional[str]:
    normalized = category.strip().lower()
    if not normalized:
        return None
    return LEGACY_TO_UI_CATEGORY.get(normalized)


def normalize_category_key(raw: Any) -> str:
    key = _text(raw)
    return map_legacy_category_to_ui(key) or key


def parse_menu_category_row(row: Dict[str, Any]) -> Optional[MenuCategory]:
    """
    Parse a menu_categories row

    Returns:
        MenuCategory, or None when the row has no key or label
    """
    key = normalize_category_key(row.get("key"))
    label = _text(row.get("label"))
    if not key or not label:
        logger.debug(f"Skipping menu category row without key/label: {row!r}")
        return None

    sort = _to_number(row.get("sort"), 100)
    background = row.get("fallback_background")

    return MenuCategory(
        key=key,
        label=label,
        full_label=_text(row.get("full_label")) or label,
        image_url=_optional_text(row.get("image_url")),
        background=background if isinstance(background, str) else DEFAULT_CATEGORY_BACKGROUND,
        sort=int(sort) if sort is not None else 100,
    )


def parse_menu_item_row(row: Dict[str, Any]) -> Optional[MenuItem]:
    """
    Parse a menu_items row

    Returns:
        MenuItem, or None when id, title or category is missing or the price is
        not a finite number
    """
    item_id = _text(row.get("id"))
    title = _text(row.get("title"))
    category = normalize_category_key(row.get("category"))
    price = _to_number(row.get("price"), 0)

    if not item_id or not title or not category or price is None:
        logger.debug(f"Skipping invalid menu item row: {row!r}")
        return None

    return MenuItem(
        id=item_id,
        title=title,
        desc=_text(row.get("description")),
        category=category,
        price_from=price,
        image=_optional_text(row.get("image_url")),
    )


def parse_rows(rows: Iterable[Dict[str, Any]], parser) -> List[Any]:
    """Apply a row parser and drop the rows it rejects"""
    parsed = []
    for row in rows or []:
        if not isinstance(row, dict):
            continue
        record = parser(row)
        if record is not None:
            parsed.append(record)
    return parsed


def derive_categories_from_items(items: Iterable[MenuItem]) -> List[MenuCategory]:
    """
    Build a flat category list from the categories present among the items,
    in first-seen order
    """
    categories = []
    seen = set()
    for item in items:
        if item.category in seen:
            continue
        seen.add(item.category)
        label = DEFAULT_CATEGORY_LABELS.get(item.category, item.category)
        categories.append(MenuCategory(
            key=item.category,
            label=label,
            full_label=label,
            image_url=default_category_image(item.category) if is_menu_category(item.category) else None,
            background=DEFAULT_CATEGORY_BACKGROUND,
            sort=len(categories) * 10 + 10,
        ))
    return categories


def parse_order_row(order: Dict[str, Any], item_rows: Iterable[Dict[str, Any]]) -> MyOrder:
    """
    Parse an orders row together with the order_items rows that belong to it

    Raises:
        MapperError: the order row has no id
    """
    order_id = _text(order.get("id"))
    if not order_id:
        raise MapperError("Order row without id")

    items = [
        MyOrderItem(
            title=_text(item.get("title")),
            qty=_to_number(item.get("qty")) or 0,
            price=_to_number(item.get("price")) or 0,
        )
        for item in item_rows
        if _text(item.get("order_id")) == order_id
    ]

    return MyOrder(
        id=order_id,
        number=order_id[:8].upper(),
        created_at=_text(order.get("created_at")),
        status=_text(order.get("status")),
        total=_to_number(order.get("total")) or 0,
        address=_optional_text(order.get("address")),
        comment=_optional_text(order.get("comment")),
        items=items,
    )


def parse_loyalty(account: Dict[str, Any], transactions: Iterable[Dict[str, Any]]) -> LoyaltyData:
    """
    Parse a loyalty_accounts row and its recent transactions

    Raises:
        MapperError: the account row has no id
    """
    account_id = _text(account.get("id"))
    if not account_id:
        raise MapperError("Loyalty account row without id")

    parsed_transactions = []
    for tx in transactions:
        tx_type = _text(tx.get("operation_type"))
        if tx_type not in LOYALTY_TRANSACTION_TYPES:
            logger.debug(f"Skipping loyalty transaction with unknown type: {tx!r}")
            continue
        parsed_transactions.append(LoyaltyTransaction(
            id=_text(tx.get("id")),
            created_at=_text(tx.get("created_at")),
            type=tx_type,
            points=_to_number(tx.get("points_delta")) or 0,
            reason=_text(tx.get("reason")),
            order_id=_optional_text(tx.get("order_id")),
        ))

    return LoyaltyData(
        account_id=account_id,
        points_balance=_to_number(account.get("points_balance")) or 0,
        lifetime_earned=_to_number(account.get("lifetime_earned")) or 0,
        tier_name=_text(account.get("tier_name")),
        rules=list(LOYALTY_RULES),
        transactions=parsed_transactions,
    )


def parse_delivery_zone_row(row: Dict[str, Any]) -> Optional[DeliveryZone]:
    """
    Parse a delivery_zones row.

    The GeoJSON ring is stored as [lon, lat]; the record holds [lat, lon]
    pairs. Zones with fewer than three usable points are dropped.
    """
    geometry = row.get("polygon_geojson")
    coordinates = geometry.get("coordinates") if isinstance(geometry, dict) else None
    ring = coordinates[0] if isinstance(coordinates, list) and coordinates else []

    polygon = []
    for point in ring if isinstance(ring, list) else []:
        if not isinstance(point, (list, tuple)) or len(point) < 2:
            continue
        lat = _to_number(point[1], None)
        lon = _to_number(point[0], None)
        if lat is None or lon is None:
            continue
        polygon.append((float(lat), float(lon)))

    zone_id = _text(row.get("id"))
    if not zone_id or len(polygon) < 3:
        logger.debug(f"Skipping delivery zone without usable polygon: {zone_id or row!r}")
        return None

    return DeliveryZone(
        id=zone_id,
        name=_text(row.get("name")),
        color=_text(row.get("color")),
        min_order_amount=_to_number(row.get("min_order_amount")) or 0,
        polygon=polygon,
    )


def parse_admin_order_row(row: Dict[str, Any]) -> Optional[AdminOrder]:
    order_id = _text(row.get("id"))
    if not order_id:
        return None

    return AdminOrder(
        id=order_id,
        created_at=_text(row.get("created_at")),
        customer_name=_optional_text(row.get("customer_name")),
        customer_phone=_optional_text(row.get("customer_phone")),
        address=_optional_text(row.get("address")),
        comment=_optional_text(row.get("comment")),
        status=_text(row.get("status")).upper() or "NEW",
        total=_to_number(row.get("total")) or 0,
    )


def parse_role(row: Optional[Dict[str, Any]]) -> str:
    """Role from a profiles row; a missing row or unknown role is guest"""
    if not row:
        return normalize_role(None)
    return normalize_role(row.get("role"))
