# Delivery zones module

from .routes import router as zones_router
from .models import DeliveryZonesResponse

__all__ = [
    "zones_router",
    "DeliveryZonesResponse"
]
