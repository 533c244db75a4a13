"""
Invoice service - numbering and payment status

Payment status follows the INCOMING transactions linked to the invoice:
  received >= total - 0.01  -> PAID
  received >  0.01          -> PARTIALLY_PAID
  otherwise                 -> PENDING
"""
import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.enums import PaymentStatus, TransactionDirection
from app.models.invoice import Invoice
from app.models.transaction import Transaction

logger = logging.getLogger(__name__)

INVOICE_PREFIX = "AUC"
TOLERANCE = 0.01


async def generate_invoice_number(db: AsyncSession, year: Optional[int] = None) -> str:
    """AUC-YYYY-NNN, sequence restarts every year"""
    year = year or datetime.now().year
    prefix = f"{INVOICE_PREFIX}-{year}-"
    result = await db.execute(
        select(func.max(Invoice.invoice_number)).where(Invoice.invoice_number.like(f"{prefix}%"))
    )
    max_no = result.scalar()

    if max_no:
        try:
            seq = int(max_no[len(prefix):]) + 1
        except ValueError:
            seq = 1
    else:
        seq = 1

    return f"{prefix}{seq:03d}"


async def amount_received(db: AsyncSession, invoice_id: int) -> float:
    result = await db.execute(
        select(func.coalesce(func.sum(Transaction.amount), 0)).where(
            Transaction.invoice_id == invoice_id,
            Transaction.direction == TransactionDirection.INCOMING.value,
        )
    )
    return float(result.scalar() or 0)


def payment_status_for(total: float, received: float) -> PaymentStatus:
    if received >= total - TOLERANCE:
        return PaymentStatus.PAID
    if received > TOLERANCE:
        return PaymentStatus.PARTIALLY_PAID
    return PaymentStatus.PENDING


async def recalc_payment_status(db: AsyncSession, invoice_id: Optional[int]) -> Optional[Invoice]:
    """
    Recompute payment status from incoming transactions.
    Call after charges or linked transactions change; the caller commits.
    """
    if not invoice_id:
        return None
    result = await db.execute(select(Invoice).where(Invoice.id == invoice_id))
    invoice = result.scalar_one_or_none()
    if not invoice:
        return None

    received = await amount_received(db, invoice_id)
    status = payment_status_for(invoice.total, received)
    if invoice.payment_status != status.value:
        logger.info(f"💰 Invoice {invoice.invoice_number}: {invoice.payment_status} -> {status.value}")
    invoice.payment_status = status.value
    if status == PaymentStatus.PAID:
        invoice.paid_at = invoice.paid_at or datetime.utcnow()
    else:
        invoice.paid_at = None
    await db.flush()
    return invoice
