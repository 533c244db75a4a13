"""Invoice schemas"""

from datetime import date, datetime
from typing import List, Optional

from pydantic import Field, field_validator

from app.models.enums import InvoiceStatus, PaymentStatus
from app.schemas.base import BlankToNoneModel, CamelModel


class InvoiceChargeIn(CamelModel):
    description: str = Field(..., min_length=1, max_length=300)
    charge_type: str = Field("OTHER", max_length=30)
    amount: float

    @field_validator("description")
    @classmethod
    def strip_description(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Charge description is required")
        return v

    @field_validator("charge_type")
    @classmethod
    def upper_charge_type(cls, v: str) -> str:
        return (v or "OTHER").strip().upper()


class InvoiceChargeResponse(CamelModel):
    id: int
    description: str
    charge_type: str
    amount: float


class InvoiceCreate(BlankToNoneModel):
    customer_id: int
    vehicle_id: Optional[int] = None
    issue_date: Optional[date] = None
    due_date: Optional[date] = None
    tax_enabled: bool = False
    tax_rate: float = Field(0, ge=0, le=100)
    notes: Optional[str] = None
    charges: List[InvoiceChargeIn] = Field(..., min_length=1)


class InvoiceUpdate(BlankToNoneModel):
    vehicle_id: Optional[int] = None
    status: Optional[InvoiceStatus] = None
    issue_date: Optional[date] = None
    due_date: Optional[date] = None
    tax_enabled: Optional[bool] = None
    tax_rate: Optional[float] = Field(None, ge=0, le=100)
    notes: Optional[str] = None
    charges: Optional[List[InvoiceChargeIn]] = Field(None, min_length=1, description="Replaces every charge")


class InvoicePaymentUpdate(CamelModel):
    payment_status: PaymentStatus


class InvoiceResponse(CamelModel):
    id: int
    invoice_number: str
    customer_id: int
    customer_name: Optional[str] = None
    vehicle_id: Optional[int] = None
    status: InvoiceStatus
    payment_status: PaymentStatus
    issue_date: date
    due_date: Optional[date] = None
    tax_enabled: bool
    tax_rate: float
    notes: Optional[str] = None
    paid_at: Optional[datetime] = None
    charges: List[InvoiceChargeResponse] = []
    subtotal: float = 0
    tax_amount: float = 0
    total: float = 0
    amount_paid: float = 0
    created_at: datetime
    updated_at: Optional[datetime] = None


class InvoiceListResponse(CamelModel):
    data: List[InvoiceResponse]
    total: int
    page: int
    limit: int
