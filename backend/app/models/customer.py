"""
Customer model - buyers of exported vehicles
"""
from datetime import datetime
from sqlalchemy import Column, Integer, String, Text, DateTime
from app.db.base import Base


class Customer(Base):
    """Customer with postal address and phone"""
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False, index=True, comment="Customer name")
    email = Column(String(200), comment="Email")

    # phone is stored without the country code
    phone_country_code = Column(String(8), comment="Phone country code, e.g. +81")
    phone = Column(String(30), comment="Phone number")

    # address
    country = Column(String(100), comment="Country name")
    street = Column(String(200))
    city = Column(String(100))
    state = Column(String(100), comment="State / province / prefecture")
    zip_code = Column(String(20), comment="Postal code")

    notes = Column(Text)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<Customer {self.id}: {self.name}>"

    @property
    def full_phone(self) -> str:
        if not self.phone:
            return ""
        return f"{self.phone_country_code or ''} {self.phone}".strip()
