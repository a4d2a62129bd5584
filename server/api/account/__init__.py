# Account module

from .routes import router as account_router
from .models import MyOrdersResponse, LoyaltyResponse

__all__ = [
    "account_router",
    "MyOrdersResponse",
    "LoyaltyResponse"
]
