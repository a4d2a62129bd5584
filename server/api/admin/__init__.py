# Back office module

from .routes import router as admin_router
from .models import RoleResponse, AdminOrdersResponse

__all__ = [
    "admin_router",
    "RoleResponse",
    "AdminOrdersResponse"
]
