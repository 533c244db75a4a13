"""Inquiry and kanban schemas"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import Field

from app.models.enums import InquirySource, InquiryStatus
from app.schemas.base import BlankToNoneModel, CamelModel


class InquiryCreate(BlankToNoneModel):
    source: InquirySource = InquirySource.WEB
    customer_name: Optional[str] = Field(None, max_length=200)
    email: Optional[str] = None
    phone: Optional[str] = None
    message: Optional[str] = None
    status: InquiryStatus = InquiryStatus.NEW
    assigned_to: Optional[str] = None
    looking_for: Optional[str] = Field(None, description="Stored in metadata.lookingFor")
    metadata: Optional[Dict[str, Any]] = None


class InquiryUpdate(BlankToNoneModel):
    customer_name: Optional[str] = Field(None, max_length=200)
    email: Optional[str] = None
    phone: Optional[str] = None
    message: Optional[str] = None
    status: Optional[InquiryStatus] = None
    looking_for: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = Field(None, description="Merged into the stored metadata")
    changed_by: Optional[str] = None


class InquiryAssign(BlankToNoneModel):
    assigned_to: str = Field(..., min_length=1, max_length=100)
    force: bool = Field(False, description="Take over an inquiry assigned to someone else")


class InquiryRelease(BlankToNoneModel):
    changed_by: Optional[str] = None
    notes: Optional[str] = None


class InquiryResponse(CamelModel):
    id: int
    source: InquirySource
    customer_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    message: Optional[str] = None
    status: InquiryStatus
    assigned_to: Optional[str] = None
    assigned_at: Optional[datetime] = None
    metadata: Dict[str, Any] = Field(default_factory=dict, validation_alias="extra")
    created_at: datetime
    updated_at: Optional[datetime] = None


class InquiryListResponse(CamelModel):
    data: List[InquiryResponse]
    total: int
    page: int
    limit: int


class InquiryHistoryResponse(CamelModel):
    id: int
    inquiry_id: int
    action: str
    previous_status: Optional[InquiryStatus] = None
    new_status: Optional[InquiryStatus] = None
    notes: Optional[str] = None
    changed_by: Optional[str] = None
    created_at: datetime


class ReleaseResult(CamelModel):
    released: int
    inquiry_ids: List[int] = []


class KanbanColumn(CamelModel):
    id: int
    name: str
    order: int
    color: Optional[str] = None
    status: InquiryStatus
    inquiries: List[InquiryResponse] = []


class KanbanBoardResponse(CamelModel):
    stages: List[KanbanColumn]
    assigned_to: Optional[str] = None


class KanbanMove(CamelModel):
    # plain strings so a bad status gets "Invalid status" rather than a schema error
    inquiry_id: Optional[int] = None
    new_status: Optional[str] = None
    changed_by: Optional[str] = None
