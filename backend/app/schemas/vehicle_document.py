"""Vehicle document schemas"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from app.models.enums import DocumentCategory, ShippingStage
from app.schemas.base import BlankToNoneModel, CamelModel


class VehicleDocumentCreate(BlankToNoneModel):
    name: str = Field(..., min_length=1, max_length=200)
    file_url: str = Field(..., min_length=1, max_length=500)
    category: DocumentCategory
    stage: Optional[ShippingStage] = None
    file_type: Optional[str] = None
    file_size: Optional[int] = Field(None, ge=0)
    description: Optional[str] = None
    visible_to_customer: bool = False


class VehicleDocumentResponse(CamelModel):
    id: int
    vehicle_id: int
    stage: Optional[ShippingStage] = None
    category: DocumentCategory
    name: str
    file_url: str
    file_type: Optional[str] = None
    file_size: Optional[int] = None
    description: Optional[str] = None
    visible_to_customer: bool = False
    created_at: datetime
