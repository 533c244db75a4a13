"""
Vehicle model

A vehicle walks through the shipping stages in order
(PURCHASE -> TRANSPORT -> REPAIR -> DOCUMENTS -> BOOKING -> SHIPPED -> DHL).
Per-stage checklist data lives in VehicleShippingStage, one row per stage.
"""
from datetime import datetime
from sqlalchemy import Column, Integer, String, Float, Boolean, Date, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from app.db.base import Base
from app.models.enums import ShippingStage, STAGE_LABELS


class Vehicle(Base):
    """Vehicle"""
    __tablename__ = "vehicles"

    id = Column(Integer, primary_key=True, index=True)
    vin = Column(String(50), nullable=False, unique=True, comment="VIN / chassis id (unique)")
    stock_no = Column(String(50), index=True)
    make = Column(String(100))
    model = Column(String(100))
    year = Column(Integer)
    chassis_no = Column(String(50))

    # where it was bought
    auction_house = Column(String(100))
    lot_no = Column(String(50))
    purchase_date = Column(Date)
    purchase_price = Column(Float)
    is_registered = Column(Boolean, default=False, comment="Still registered in the origin country")

    customer_id = Column(Integer, ForeignKey("customers.id", ondelete="SET NULL"), index=True)
    inquiry_id = Column(Integer, ForeignKey("inquiries.id", ondelete="SET NULL"), index=True)

    current_shipping_stage = Column(
        String(20), nullable=False, default=ShippingStage.PURCHASE.value, comment="ShippingStage"
    )

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    customer = relationship("Customer", lazy="joined")
    shipping_stages = relationship(
        "VehicleShippingStage", back_populates="vehicle",
        cascade="all, delete-orphan", passive_deletes=True,
    )

    def __repr__(self):
        return f"<Vehicle {self.id}: {self.vin}>"

    @property
    def display_name(self) -> str:
        parts = [str(p) for p in (self.year, self.make, self.model) if p]
        return " ".join(parts) or self.vin

    @property
    def customer_name(self):
        return self.customer.name if self.customer else None

    @property
    def stage_label(self) -> str:
        try:
            return STAGE_LABELS[ShippingStage(self.current_shipping_stage)]
        except ValueError:
            return self.current_shipping_stage
