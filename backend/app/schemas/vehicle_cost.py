"""Vehicle stage cost schemas"""

from datetime import date, datetime
from typing import Optional

from pydantic import Field

from app.models.enums import ShippingStage
from app.schemas.base import BlankToNoneModel, CamelModel


class VehicleCostCreate(BlankToNoneModel):
    stage: ShippingStage
    cost_type: str = Field(..., min_length=1, max_length=100)
    amount: float = Field(..., gt=0)
    currency: str = Field("JPY", min_length=3, max_length=3)
    vendor_id: int
    payment_deadline: Optional[date] = None
    payment_date: Optional[date] = None


class VehicleCostResponse(CamelModel):
    id: int
    vehicle_id: int
    stage: ShippingStage
    cost_type: str
    amount: float
    currency: str
    vendor_id: int
    vendor_name: Optional[str] = None
    payment_deadline: Optional[date] = None
    payment_date: Optional[date] = None
    created_at: datetime
