"""
Per-stage vehicle costs (what we owe vendors for a vehicle)
"""
from datetime import datetime
from sqlalchemy import Column, Integer, String, Float, Date, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from app.db.base import Base


class VehicleStageCost(Base):
    """Charge against a vendor, recorded on a shipping stage"""
    __tablename__ = "vehicle_stage_costs"

    id = Column(Integer, primary_key=True, index=True)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id", ondelete="CASCADE"), nullable=False, index=True)
    stage = Column(String(20), nullable=False, comment="ShippingStage")
    cost_type = Column(String(100), nullable=False, comment="e.g. Inland Transport, Photo Inspection")
    amount = Column(Float, nullable=False)
    currency = Column(String(3), nullable=False, default="JPY")
    vendor_id = Column(Integer, ForeignKey("vendors.id"), nullable=False, index=True)
    payment_deadline = Column(Date)
    payment_date = Column(Date)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    vendor = relationship("Vendor", lazy="joined")

    def __repr__(self):
        return f"<VehicleStageCost {self.cost_type}: {self.amount} {self.currency}>"

    @property
    def vendor_name(self):
        return self.vendor.name if self.vendor else None
