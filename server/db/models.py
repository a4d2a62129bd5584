# Typed records produced by the row mappers
# Serialised with camelCase keys for the storefront clients

from typing import List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Number = Union[int, float]


class CamelModel(BaseModel):
    """Base model: snake_case attributes, camelCase on the wire"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True)


class MenuCategory(CamelModel):
    key: str
    label: str
    full_label: str
    image_url: Optional[str] = None
    background: str
    sort: int = 100


class MenuItem(CamelModel):
    id: str
    title: str
    desc: str = ""
    category: str
    price_from: Number
    image: Optional[str] = None


class MenuQueryFailure(CamelModel):
    query: str
    table: str
    code: str
    message: str


class MyOrderItem(CamelModel):
    title: str
    qty: Number
    price: Number


class MyOrder(CamelModel):
    id: str
    number: str
    created_at: str
    status: str
    total: Number
    address: Optional[str] = None
    comment: Optional[str] = None
    items: List[MyOrderItem] = Field(default_factory=list)


class OrdersPage(CamelModel):
    items: List[MyOrder]
    next_offset: int


class LoyaltyTransaction(CamelModel):
    id: str
    created_at: str
    type: str
    points: Number
    reason: str = ""
    order_id: Optional[str] = None


class LoyaltyData(CamelModel):
    account_id: str
    points_balance: Number
    lifetime_earned: Number
    tier_name: str
    rules: List[str]
    transactions: List[LoyaltyTransaction]


class DeliveryZone(CamelModel):
    id: str
    name: str
    color: str
    min_order_amount: Number
    polygon: List[Tuple[float, float]]


class AdminOrder(CamelModel):
    id: str
    created_at: str
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    address: Optional[str] = None
    comment: Optional[str] = None
    status: str
    total: Number


class SchemaRequirement(CamelModel):
    table: str
    columns: List[str]


class SchemaIssue(CamelModel):
    table: str
    columns: List[str]
    message: str
    transport: bool = Field(default=False, exclude=True)
