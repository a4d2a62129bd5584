# Cart state container
# Explicitly owned by the caller; persistence goes through dumps()/loads()

import json
import math
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Union

Number = Union[int, float]

DEFAULT_SIZE = "M"
CART_SIZES = ("S", "M", "L")
CART_STORAGE_VERSION = 1


@dataclass
class CartLine:
    id: str
    title: str
    price: Number
    qty: int = 1
    size: str = DEFAULT_SIZE

    @property
    def key(self) -> str:
        return line_key(self.id, self.size)


def line_key(item_id: str, size: Optional[str] = None) -> str:
    return f"{item_id}__{size or DEFAULT_SIZE}"


def _is_price(value: Any) -> bool:
    """Finite JSON number; booleans do not count"""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(float(value))
    except OverflowError:
        return False


@dataclass
class CartStore:
    """
    Cart lines keyed by menu item id and size.

    Adding the same item and size again increments its quantity; a line whose
    quantity drops to zero is removed.
    """
    lines: List[CartLine] = field(default_factory=list)

    def _find(self, item_id: str, size: Optional[str]) -> Optional[CartLine]:
        key = line_key(item_id, size)
        for line in self.lines:
            if line.key == key:
                return line
        return None

    def add(self, item_id: str, title: str, price: Number, size: Optional[str] = None) -> CartLine:
        size = size or DEFAULT_SIZE
        if size not in CART_SIZES:
            raise ValueError(f"Unknown size: {size}")

        line = self._find(item_id, size)
        if line:
            line.qty += 1
            return line

        line = CartLine(id=item_id, title=title, price=price, qty=1, size=size)
        self.lines.append(line)
        return line

    def inc(self, item_id: str, size: Optional[str] = None):
        line = self._find(item_id, size)
        if line:
            line.qty += 1

    def dec(self, item_id: str, size: Optional[str] = None):
        line = self._find(item_id, size)
        if not line:
            return
        line.qty -= 1
        if line.qty <= 0:
            self.lines.remove(line)

    def remove(self, item_id: str, size: Optional[str] = None):
        key = line_key(item_id, size)
        self.lines = [line for line in self.lines if line.key != key]

    def clear(self):
        self.lines = []

    @property
    def count(self) -> int:
        return sum(line.qty for line in self.lines)

    @property
    def total(self) -> Number:
        return sum(line.price * line.qty for line in self.lines)

    def to_order_items(self) -> List[Dict[str, Any]]:
        """Checkout items; the size is folded into the title"""
        return [
            {"title": f"{line.title} ({line.size})" if line.size else line.title,
             "qty": line.qty, "price": line.price}
            for line in self.lines
        ]

    def dumps(self) -> str:
        return json.dumps({"version": CART_STORAGE_VERSION, "lines": [asdict(line) for line in self.lines]},
                          ensure_ascii=False)

    @classmethod
    def loads(cls, data: Optional[str]) -> "CartStore":
        """
        Restore a cart from dumps() output.

        Unreadable data, another storage version and malformed lines give an
        empty cart or are skipped.
        """
        if not data:
            return cls()
        try:
            decoded = json.loads(data)
        except ValueError:
            return cls()
        if not isinstance(decoded, dict) or decoded.get("version") != CART_STORAGE_VERSION:
            return cls()

        lines = []
        for raw in decoded.get("lines") or []:
            if not isinstance(raw, dict):
                continue
            item_id, title, price, qty = raw.get("id"), raw.get("title"), raw.get("price"), raw.get("qty")
            size = raw.get("size") or DEFAULT_SIZE
            if not isinstance(item_id, str) or not isinstance(title, str):
                continue
            if not _is_price(price):
                continue
            if isinstance(qty, bool) or not isinstance(qty, int) or qty <= 0 or size not in CART_SIZES:
                continue
            lines.append(CartLine(id=item_id, title=title, price=price, qty=qty, size=size))
        return cls(lines=lines)
