# Order module

from .routes import router as orders_router
from .models import CreateOrderRequest, CreateOrderResponse, OrderErrorResponse

__all__ = [
    "orders_router",
    "CreateOrderRequest",
    "CreateOrderResponse",
    "OrderErrorResponse"
]
