"""
Vehicle documents - metadata only, the file itself lives in external storage
"""
from datetime import datetime
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey
from app.db.base import Base


class VehicleDocument(Base):
    """Document attached to a vehicle (optionally to a stage)"""
    __tablename__ = "vehicle_documents"

    id = Column(Integer, primary_key=True, index=True)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id", ondelete="CASCADE"), nullable=False, index=True)
    stage = Column(String(20), nullable=True, comment="ShippingStage")
    category = Column(String(40), nullable=False, comment="DocumentCategory")
    name = Column(String(200), nullable=False)
    file_url = Column(String(500), nullable=False)
    file_type = Column(String(100))
    file_size = Column(Integer)
    description = Column(Text)
    visible_to_customer = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<VehicleDocument {self.category}: {self.name}>"
