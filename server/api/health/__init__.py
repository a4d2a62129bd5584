# Health module

from .routes import router as health_router
from .models import SchemaHealthResponse, LivenessResponse

__all__ = [
    "health_router",
    "SchemaHealthResponse",
    "LivenessResponse"
]
