# Order models
# Documented request/response shapes of the checkout endpoint

from typing import List, Literal, Optional, Union
from pydantic import BaseModel, Field

Number = Union[int, float]


class CreateOrderItem(BaseModel):
    """Cart line as sent by the storefront"""
    title: str
    qty: Number = Field(..., description="Finite quantity")
    price: Number = Field(..., description="Finite unit price")


class CreateOrderRequest(BaseModel):
    """Checkout request body (camelCase on the wire)"""
    total: Number
    customerName: str
    customerPhone: str
    address: str
    comment: Optional[str] = None
    paymentMethod: Optional[Literal["cash", "sberbank_code"]] = Field(None, description="Defaults to cash")
    paymentCode: Optional[str] = Field(None, description="Only kept for sberbank_code")
    items: List[CreateOrderItem]


class CreateOrderResponse(BaseModel):
    orderId: str


class OrderErrorResponse(BaseModel):
    code: str
    error: str
    diagnosticCode: str
