# Catering module

from .routes import router as catering_router
from .models import CateringRequest, CateringResponse

__all__ = [
    "catering_router",
    "CateringRequest",
    "CateringResponse"
]
