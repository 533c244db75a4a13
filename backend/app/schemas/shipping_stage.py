"""Shipping stage schemas"""

from datetime import date, datetime
from typing import Optional, Union

from pydantic import EmailStr, Field, field_validator

from app.models.enums import BookingStatus, BookingType, ShippingStage
from app.schemas.base import BlankToNoneModel, CamelModel


class StageFields(BlankToNoneModel):
    """Every writable field of a stage record, all optional"""
    # purchase
    purchase_vendor_id: Optional[int] = None
    purchase_paid: Optional[bool] = None
    purchase_payment_deadline: Optional[date] = None
    purchase_payment_date: Optional[date] = None

    # transport
    transport_vendor_id: Optional[int] = None
    yard_id: Optional[Union[int, str]] = Field(None, description='Yard id or "vendor-<vendorId>"')
    transport_arranged: Optional[bool] = None
    yard_notified: Optional[bool] = None
    photos_requested: Optional[bool] = None

    # repair
    repair_vendor_id: Optional[int] = None
    repair_skipped: Optional[bool] = None

    # documents
    number_plates_received: Optional[bool] = None
    deregistration_complete: Optional[bool] = None
    export_certificate_uploaded: Optional[bool] = None
    deregistration_sent_to_auction: Optional[bool] = None
    insurance_refund_claimed: Optional[bool] = None
    spare_keys_received: Optional[bool] = None
    maintenance_records_received: Optional[bool] = None
    manuals_received: Optional[bool] = None
    catalogues_received: Optional[bool] = None
    accessories_received: Optional[bool] = None
    other_items_received: Optional[bool] = None

    # booking
    booking_type: Optional[BookingType] = None
    booking_status: Optional[BookingStatus] = None
    booking_requested: Optional[bool] = None
    booking_number: Optional[str] = None
    pod: Optional[str] = None
    pol: Optional[str] = None
    vessel_name: Optional[str] = None
    voyage_no: Optional[str] = None
    etd: Optional[date] = None
    eta: Optional[date] = None
    forwarding_vendor_id: Optional[int] = None
    freight_vendor_id: Optional[int] = None
    si_ec_sent_to_forwarder: Optional[bool] = None
    shipping_order_received: Optional[bool] = None

    # container
    container_number: Optional[str] = None
    container_size: Optional[str] = None
    seal_number: Optional[str] = None
    units_inside: Optional[int] = Field(None, ge=0)

    # shipped
    bl_copy_uploaded: Optional[bool] = None
    bl_details_confirmed: Optional[bool] = None
    bl_paid: Optional[bool] = None
    lc_copy_uploaded: Optional[bool] = None
    export_declaration_uploaded: Optional[bool] = None
    recycle_applied: Optional[bool] = None

    # dhl
    bl_release_notice: Optional[bool] = None
    bl_released: Optional[bool] = None
    dhl_tracking: Optional[str] = None

    notes: Optional[str] = None


class StageUpdate(StageFields):
    """PATCH body - only the keys present are written"""
    stage: ShippingStage


class StageRecord(CamelModel):
    """Stored stage record"""
    id: int
    vehicle_id: int
    stage: ShippingStage

    purchase_vendor_id: Optional[int] = None
    purchase_paid: bool = False
    purchase_payment_deadline: Optional[date] = None
    purchase_payment_date: Optional[date] = None

    transport_vendor_id: Optional[int] = None
    yard_id: Optional[str] = None
    transport_arranged: bool = False
    yard_notified: bool = False
    photos_requested: bool = False

    repair_vendor_id: Optional[int] = None
    repair_skipped: bool = False

    number_plates_received: bool = False
    deregistration_complete: bool = False
    export_certificate_uploaded: bool = False
    deregistration_sent_to_auction: bool = False
    insurance_refund_claimed: bool = False
    spare_keys_received: bool = False
    maintenance_records_received: bool = False
    manuals_received: bool = False
    catalogues_received: bool = False
    accessories_received: bool = False
    other_items_received: bool = False

    booking_type: Optional[BookingType] = None
    booking_status: Optional[BookingStatus] = None
    booking_requested: bool = False
    booking_number: Optional[str] = None
    pod: Optional[str] = None
    pol: Optional[str] = None
    vessel_name: Optional[str] = None
    voyage_no: Optional[str] = None
    etd: Optional[date] = None
    eta: Optional[date] = None
    forwarding_vendor_id: Optional[int] = None
    freight_vendor_id: Optional[int] = None
    si_ec_sent_to_forwarder: bool = False
    shipping_order_received: bool = False

    container_number: Optional[str] = None
    container_size: Optional[str] = None
    seal_number: Optional[str] = None
    units_inside: Optional[int] = None

    bl_copy_uploaded: bool = False
    bl_details_confirmed: bool = False
    bl_paid: bool = False
    lc_copy_uploaded: bool = False
    export_declaration_uploaded: bool = False
    recycle_applied: bool = False

    bl_release_notice: bool = False
    bl_released: bool = False
    dhl_tracking: Optional[str] = None

    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("yard_id", mode="before")
    @classmethod
    def yard_id_as_string(cls, v):
        # yards are listed with string ids
        return None if v is None else str(v)


class StageEnvelope(CamelModel):
    """GET /vehicles/{id}/stages"""
    shipping_stage: Optional[StageRecord] = None
    current_stage: ShippingStage
    vehicle_id: int


class CurrentStageUpdate(BlankToNoneModel):
    stage: ShippingStage
    notes: Optional[str] = None
    changed_by: Optional[str] = None


class StageHistoryResponse(CamelModel):
    id: int
    vehicle_id: int
    previous_stage: Optional[ShippingStage] = None
    new_stage: ShippingStage
    action: str
    notes: Optional[str] = None
    changed_by: Optional[str] = None
    created_at: datetime


class BookingEmailRequest(CamelModel):
    shipping_agent_email: EmailStr


class BookingEmailResponse(CamelModel):
    success: bool
    message: str
