"""
Vendor and yard models

- Vendor: any counterparty we pay (auction house, transport, garage, forwarder ...)
- Yard: storage yard a vehicle waits in; a yard may be run by a vendor,
  which is who the photo inspection charge goes to
"""
from datetime import datetime
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from app.db.base import Base
from app.models.enums import VendorCategory


class Vendor(Base):
    """Vendor"""
    __tablename__ = "vendors"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False, unique=True, comment="Vendor name (unique)")
    email = Column(String(200))
    phone = Column(String(30))
    category = Column(String(30), nullable=False, default=VendorCategory.DEALERSHIP.value, comment="VendorCategory")
    notes = Column(Text)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<Vendor {self.id}: {self.name} ({self.category})>"


class Yard(Base):
    """Storage yard"""
    __tablename__ = "yards"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False, unique=True, comment="Yard name (unique)")
    vendor_id = Column(Integer, ForeignKey("vendors.id", ondelete="SET NULL"), nullable=True, index=True)
    email = Column(String(200))

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    vendor = relationship("Vendor", lazy="joined")

    def __repr__(self):
        return f"<Yard {self.id}: {self.name}>"

    @property
    def vendor_name(self):
        return self.vendor.name if self.vendor else None
