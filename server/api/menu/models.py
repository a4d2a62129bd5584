# Menu models

from typing import List

from pydantic import BaseModel

from db.models import MenuCategory, MenuItem, MenuQueryFailure


class MenuResponse(BaseModel):
    categories: List[MenuCategory]
    items: List[MenuItem]


class MenuErrorResponse(BaseModel):
    code: str
    error: str
    failures: List[MenuQueryFailure]
