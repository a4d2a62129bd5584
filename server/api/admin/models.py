# Back office models

from typing import Dict, List

from pydantic import BaseModel

from db.models import AdminOrder


class RoleResponse(BaseModel):
    role: str
    rank: int


class AdminOrdersResponse(BaseModel):
    orders: List[AdminOrder]
    totals: Dict[str, int]
