"""Transaction schemas"""

import datetime as dt
from typing import List, Optional

from pydantic import Field

from app.models.enums import TransactionDirection, TransactionType
from app.schemas.base import BlankToNoneModel, CamelModel


class TransactionCreate(BlankToNoneModel):
    direction: TransactionDirection
    type: TransactionType
    amount: float = Field(..., gt=0)
    currency: str = Field("JPY", min_length=3, max_length=3)
    date: dt.date
    description: Optional[str] = None
    vendor_id: Optional[int] = None
    customer_id: Optional[int] = None
    vehicle_id: Optional[int] = None
    invoice_id: Optional[int] = None
    reference_number: Optional[str] = None
    notes: Optional[str] = None


class TransactionUpdate(BlankToNoneModel):
    direction: Optional[TransactionDirection] = None
    type: Optional[TransactionType] = None
    amount: Optional[float] = Field(None, gt=0)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    date: Optional[dt.date] = None
    description: Optional[str] = None
    vendor_id: Optional[int] = None
    customer_id: Optional[int] = None
    vehicle_id: Optional[int] = None
    invoice_id: Optional[int] = None
    reference_number: Optional[str] = None
    notes: Optional[str] = None


class TransactionResponse(CamelModel):
    id: int
    direction: TransactionDirection
    type: TransactionType
    amount: float
    currency: str
    date: dt.date
    description: Optional[str] = None
    vendor_id: Optional[int] = None
    customer_id: Optional[int] = None
    vehicle_id: Optional[int] = None
    invoice_id: Optional[int] = None
    reference_number: Optional[str] = None
    notes: Optional[str] = None
    created_at: dt.datetime
    updated_at: Optional[dt.datetime] = None


class TransactionListResponse(CamelModel):
    data: List[TransactionResponse]
    total: int
    page: int
    limit: int
