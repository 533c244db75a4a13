"""Vendor and yard schemas"""

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from app.models.enums import VendorCategory
from app.schemas.base import BlankToNoneModel, CamelModel


class VendorCreate(BlankToNoneModel):
    name: str = Field(..., min_length=1, max_length=200)
    email: Optional[str] = None
    phone: Optional[str] = None
    category: VendorCategory = VendorCategory.DEALERSHIP
    notes: Optional[str] = None


class VendorUpdate(BlankToNoneModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    email: Optional[str] = None
    phone: Optional[str] = None
    category: Optional[VendorCategory] = None
    notes: Optional[str] = None


class VendorResponse(CamelModel):
    id: int
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    category: VendorCategory
    notes: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


class VendorListResponse(CamelModel):
    data: List[VendorResponse]
    total: int
    page: int
    limit: int


class YardVendor(CamelModel):
    id: int
    name: str
    email: Optional[str] = None
    category: VendorCategory


class YardCreate(BlankToNoneModel):
    name: str = Field(..., min_length=1, max_length=200)
    vendor_id: Optional[int] = None
    email: Optional[str] = None


class YardResponse(CamelModel):
    """
    Yard as listed to the stage form.
    id is a string: real yards use their row id, YARD vendors without
    a yard row appear as "vendor-<vendorId>".
    """
    id: str
    name: str
    vendor_id: Optional[int] = None
    email: Optional[str] = None
    vendor: Optional[YardVendor] = None
