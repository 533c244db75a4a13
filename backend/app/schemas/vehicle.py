"""Vehicle schemas"""

from datetime import date, datetime
from typing import List, Optional

from pydantic import Field

from app.models.enums import ShippingStage
from app.schemas.base import BlankToNoneModel, CamelModel


class VehicleBase(BlankToNoneModel):
    stock_no: Optional[str] = None
    make: Optional[str] = None
    model: Optional[str] = None
    year: Optional[int] = Field(None, ge=1900, le=2100)
    chassis_no: Optional[str] = None
    auction_house: Optional[str] = None
    lot_no: Optional[str] = None
    purchase_date: Optional[date] = None
    purchase_price: Optional[float] = Field(None, ge=0)
    is_registered: Optional[bool] = None
    customer_id: Optional[int] = None
    inquiry_id: Optional[int] = None


class VehicleCreate(VehicleBase):
    vin: str = Field(..., min_length=1, max_length=50)
    current_shipping_stage: ShippingStage = ShippingStage.PURCHASE


class VehicleUpdate(VehicleBase):
    vin: Optional[str] = Field(None, min_length=1, max_length=50)


class VehicleResponse(CamelModel):
    id: int
    vin: str
    stock_no: Optional[str] = None
    make: Optional[str] = None
    model: Optional[str] = None
    year: Optional[int] = None
    chassis_no: Optional[str] = None
    auction_house: Optional[str] = None
    lot_no: Optional[str] = None
    purchase_date: Optional[date] = None
    purchase_price: Optional[float] = None
    is_registered: bool = False
    customer_id: Optional[int] = None
    customer_name: Optional[str] = None
    inquiry_id: Optional[int] = None
    current_shipping_stage: ShippingStage
    stage_label: str = ""
    display_name: str = ""
    created_at: datetime
    updated_at: Optional[datetime] = None


class VehicleListResponse(CamelModel):
    data: List[VehicleResponse]
    total: int
    page: int
    limit: int
