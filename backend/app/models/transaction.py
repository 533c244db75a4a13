"""
Transaction model - actual money movements

INCOMING transactions linked to an invoice drive the invoice payment status.
"""
from datetime import datetime
from sqlalchemy import Column, Integer, String, Text, Float, Date, DateTime, ForeignKey
from app.db.base import Base


class Transaction(Base):
    """Money in / money out"""
    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, index=True)
    direction = Column(String(10), nullable=False, index=True, comment="INCOMING / OUTGOING")
    type = Column(String(20), nullable=False, comment="BANK_TRANSFER / PAYPAL / CASH / WISE")
    amount = Column(Float, nullable=False)
    currency = Column(String(3), nullable=False, default="JPY")
    date = Column(Date, nullable=False, index=True)
    description = Column(String(300))

    vendor_id = Column(Integer, ForeignKey("vendors.id", ondelete="SET NULL"), index=True)
    customer_id = Column(Integer, ForeignKey("customers.id", ondelete="SET NULL"), index=True)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id", ondelete="SET NULL"), index=True)
    invoice_id = Column(Integer, ForeignKey("invoices.id", ondelete="SET NULL"), index=True)

    reference_number = Column(String(100))
    notes = Column(Text)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<Transaction {self.id}: {self.direction} {self.amount} {self.currency}>"
