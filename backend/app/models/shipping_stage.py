"""
Shipping stage models

- VehicleShippingStage: checklist + details for one (vehicle, stage);
  exactly one row per pair, always upserted
- VehicleStageHistory: audit trail of current-stage changes
"""
from datetime import datetime
from sqlalchemy import (
    Column, Integer, String, Text, Boolean, Date, DateTime, ForeignKey, UniqueConstraint,
)
from sqlalchemy.orm import relationship
from app.db.base import Base

# every boolean checklist flag, in form order
CHECKLIST_FLAGS = (
    # purchase
    "purchase_paid",
    # transport
    "transport_arranged",
    "yard_notified",
    "photos_requested",
    # repair
    "repair_skipped",
    # documents
    "number_plates_received",
    "deregistration_complete",
    "export_certificate_uploaded",
    "deregistration_sent_to_auction",
    "insurance_refund_claimed",
    "spare_keys_received",
    "maintenance_records_received",
    "manuals_received",
    "catalogues_received",
    "accessories_received",
    "other_items_received",
    # booking
    "booking_requested",
    "si_ec_sent_to_forwarder",
    "shipping_order_received",
    # shipped
    "bl_copy_uploaded",
    "bl_details_confirmed",
    "bl_paid",
    "lc_copy_uploaded",
    "export_declaration_uploaded",
    "recycle_applied",
    # dhl
    "bl_release_notice",
    "bl_released",
)

VENDOR_FIELDS = (
    "purchase_vendor_id",
    "transport_vendor_id",
    "repair_vendor_id",
    "forwarding_vendor_id",
    "freight_vendor_id",
)


def _vendor_fk():
    return Column(Integer, ForeignKey("vendors.id", ondelete="SET NULL"), nullable=True)


class VehicleShippingStage(Base):
    """Per-stage workflow record"""
    __tablename__ = "vehicle_shipping_stages"
    __table_args__ = (
        UniqueConstraint("vehicle_id", "stage", name="uq_vehicle_stage"),
    )

    id = Column(Integer, primary_key=True, index=True)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id", ondelete="CASCADE"), nullable=False, index=True)
    stage = Column(String(20), nullable=False, comment="ShippingStage")

    # purchase
    purchase_vendor_id = _vendor_fk()
    purchase_paid = Column(Boolean, nullable=False, default=False)
    purchase_payment_deadline = Column(Date)
    purchase_payment_date = Column(Date)

    # transport
    transport_vendor_id = _vendor_fk()
    yard_id = Column(Integer, ForeignKey("yards.id", ondelete="SET NULL"), nullable=True)
    transport_arranged = Column(Boolean, nullable=False, default=False)
    yard_notified = Column(Boolean, nullable=False, default=False)
    photos_requested = Column(Boolean, nullable=False, default=False)

    # repair
    repair_vendor_id = _vendor_fk()
    repair_skipped = Column(Boolean, nullable=False, default=False)

    # documents
    number_plates_received = Column(Boolean, nullable=False, default=False)
    deregistration_complete = Column(Boolean, nullable=False, default=False)
    export_certificate_uploaded = Column(Boolean, nullable=False, default=False)
    deregistration_sent_to_auction = Column(Boolean, nullable=False, default=False)
    insurance_refund_claimed = Column(Boolean, nullable=False, default=False)
    spare_keys_received = Column(Boolean, nullable=False, default=False)
    maintenance_records_received = Column(Boolean, nullable=False, default=False)
    manuals_received = Column(Boolean, nullable=False, default=False)
    catalogues_received = Column(Boolean, nullable=False, default=False)
    accessories_received = Column(Boolean, nullable=False, default=False)
    other_items_received = Column(Boolean, nullable=False, default=False)

    # booking
    booking_type = Column(String(20), comment="RORO / CONTAINER")
    booking_status = Column(String(20), comment="PENDING / CONFIRMED / CANCELLED")
    booking_requested = Column(Boolean, nullable=False, default=False)
    booking_number = Column(String(100))
    pod = Column(String(100), comment="Port of discharge")
    pol = Column(String(100), comment="Port of loading")
    vessel_name = Column(String(100))
    voyage_no = Column(String(50))
    etd = Column(Date)
    eta = Column(Date)
    forwarding_vendor_id = _vendor_fk()
    freight_vendor_id = _vendor_fk()
    si_ec_sent_to_forwarder = Column(Boolean, nullable=False, default=False)
    shipping_order_received = Column(Boolean, nullable=False, default=False)

    # container
    container_number = Column(String(50))
    container_size = Column(String(20))
    seal_number = Column(String(50))
    units_inside = Column(Integer)

    # shipped
    bl_copy_uploaded = Column(Boolean, nullable=False, default=False)
    bl_details_confirmed = Column(Boolean, nullable=False, default=False)
    bl_paid = Column(Boolean, nullable=False, default=False)
    lc_copy_uploaded = Column(Boolean, nullable=False, default=False)
    export_declaration_uploaded = Column(Boolean, nullable=False, default=False)
    recycle_applied = Column(Boolean, nullable=False, default=False)

    # dhl
    bl_release_notice = Column(Boolean, nullable=False, default=False)
    bl_released = Column(Boolean, nullable=False, default=False)
    dhl_tracking = Column(String(100))

    notes = Column(Text)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    vehicle = relationship("Vehicle", back_populates="shipping_stages")

    def __repr__(self):
        return f"<VehicleShippingStage vehicle={self.vehicle_id} stage={self.stage}>"


class VehicleStageHistory(Base):
    """Current-stage change log"""
    __tablename__ = "vehicle_stage_history"

    id = Column(Integer, primary_key=True, index=True)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id", ondelete="CASCADE"), nullable=False, index=True)
    previous_stage = Column(String(20))
    new_stage = Column(String(20), nullable=False)
    action = Column(String(50), nullable=False, default="STAGE_CHANGED")
    notes = Column(Text)
    changed_by = Column(String(100))
    created_at = Column(DateTime, default=datetime.utcnow, index=True)

    def __repr__(self):
        return f"<VehicleStageHistory {self.vehicle_id}: {self.previous_stage} -> {self.new_stage}>"
