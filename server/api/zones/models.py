# Delivery zone models

from typing import List

from pydantic import BaseModel

from db.models import DeliveryZone


class DeliveryZonesResponse(BaseModel):
    zones: List[DeliveryZone]
