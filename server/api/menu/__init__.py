# Menu module

from .routes import router as menu_router
from .models import MenuResponse, MenuErrorResponse

__all__ = [
    "menu_router",
    "MenuResponse",
    "MenuErrorResponse"
]
