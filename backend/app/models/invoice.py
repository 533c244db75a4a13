"""
Invoice models

Invoice number format: AUC-YYYY-NNN
Charges of type DISCOUNT / DEPOSIT reduce the total; tax applies to the subtotal.
"""
from datetime import datetime
from sqlalchemy import Column, Integer, String, Text, Float, Boolean, Date, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from app.db.base import Base
from app.models.enums import InvoiceStatus, PaymentStatus

NEGATIVE_CHARGE_TYPES = ("DISCOUNT", "DEPOSIT")


class Invoice(Base):
    """Customer invoice"""
    __tablename__ = "invoices"

    id = Column(Integer, primary_key=True, index=True)
    invoice_number = Column(String(30), unique=True, nullable=False, index=True, comment="AUC-YYYY-NNN")
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False, index=True)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id", ondelete="SET NULL"), index=True)

    status = Column(String(20), nullable=False, default=InvoiceStatus.DRAFT.value, comment="InvoiceStatus")
    payment_status = Column(String(20), nullable=False, default=PaymentStatus.PENDING.value, comment="PaymentStatus")

    issue_date = Column(Date, nullable=False)
    due_date = Column(Date)
    tax_enabled = Column(Boolean, nullable=False, default=False)
    tax_rate = Column(Float, nullable=False, default=0)
    notes = Column(Text)
    paid_at = Column(DateTime)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    charges = relationship(
        "InvoiceCharge", back_populates="invoice", lazy="selectin",
        cascade="all, delete-orphan", order_by="InvoiceCharge.id",
    )
    customer = relationship("Customer", lazy="joined")

    def __repr__(self):
        return f"<Invoice {self.invoice_number}: {self.payment_status}>"

    @property
    def subtotal(self) -> float:
        total = 0.0
        for charge in self.charges:
            if (charge.charge_type or "").upper() in NEGATIVE_CHARGE_TYPES:
                total -= abs(charge.amount)
            else:
                total += charge.amount
        return round(total, 2)

    @property
    def tax_amount(self) -> float:
        if not self.tax_enabled or not self.tax_rate:
            return 0.0
        return round(self.subtotal * self.tax_rate / 100, 2)

    @property
    def total(self) -> float:
        return round(self.subtotal + self.tax_amount, 2)

    @property
    def customer_name(self):
        return self.customer.name if self.customer else None


class InvoiceCharge(Base):
    """Invoice line"""
    __tablename__ = "invoice_charges"

    id = Column(Integer, primary_key=True, index=True)
    invoice_id = Column(Integer, ForeignKey("invoices.id", ondelete="CASCADE"), nullable=False, index=True)
    description = Column(String(300), nullable=False)
    charge_type = Column(String(30), nullable=False, default="OTHER", comment="VEHICLE / SHIPPING / DISCOUNT / DEPOSIT ...")
    amount = Column(Float, nullable=False)

    invoice = relationship("Invoice", back_populates="charges")
