"""
Invoice API
"""
import logging
from datetime import date, datetime
from typing import Any, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError

from app.core.deps import get_db
from app.models import Customer, Invoice, InvoiceCharge, Transaction, Vehicle
from app.models.enums import InvoiceStatus, PaymentStatus
from app.schemas.invoice import (
    InvoiceCreate,
    InvoiceListResponse,
    InvoicePaymentUpdate,
    InvoiceResponse,
    InvoiceUpdate)
from app.services.invoices import amount_received, generate_invoice_number, recalc_payment_status

logger = logging.getLogger(__name__)

router = APIRouter()


async def load_invoice(db: AsyncSession, invoice_id: int) -> Invoice:
    result = await db.execute(
        select(Invoice).where(Invoice.id == invoice_id).execution_options(populate_existing=True)
    )
    invoice = result.scalar_one_or_none()
    if not invoice:
        raise HTTPException(status_code=404, detail="Invoice not found")
    return invoice


async def build_invoice_response(db: AsyncSession, invoice: Invoice) -> InvoiceResponse:
    response = InvoiceResponse.model_validate(invoice)
    response.amount_paid = round(await amount_received(db, invoice.id), 2)
    return response


async def _check_links(db: AsyncSession, customer_id: Optional[int], vehicle_id: Optional[int]) -> None:
    if customer_id is not None and not await db.get(Customer, customer_id):
        raise HTTPException(status_code=400, detail="Customer not found")
    if vehicle_id is not None and not await db.get(Vehicle, vehicle_id):
        raise HTTPException(status_code=400, detail="Vehicle not found")


@router.get("", response_model=InvoiceListResponse)
async def list_invoices(
    *,
    db: AsyncSession = Depends(get_db),
    status: Optional[InvoiceStatus] = Query(None),
    payment_status: Optional[PaymentStatus] = Query(None, alias="paymentStatus"),
    customer_id: Optional[int] = Query(None, alias="customerId"),
    vehicle_id: Optional[int] = Query(None, alias="vehicleId"),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=200)) -> Any:
    """List invoices, newest first"""
    conditions = []
    if status:
        conditions.append(Invoice.status == status.value)
    if payment_status:
        conditions.append(Invoice.payment_status == payment_status.value)
    if customer_id:
        conditions.append(Invoice.customer_id == customer_id)
    if vehicle_id:
        conditions.append(Invoice.vehicle_id == vehicle_id)

    query = select(Invoice)
    count_query = select(func.count(Invoice.id))
    for condition in conditions:
        query = query.where(condition)
        count_query = count_query.where(condition)

    total = (await db.execute(count_query)).scalar() or 0
    result = await db.execute(
        query.order_by(Invoice.issue_date.desc(), Invoice.id.desc()).offset((page - 1) * limit).limit(limit)
    )
    invoices = result.scalars().unique().all()

    return InvoiceListResponse(
        data=[await build_invoice_response(db, i) for i in invoices],
        total=total,
        page=page,
        limit=limit,
    )


@router.get("/{invoice_id}", response_model=InvoiceResponse)
async def get_invoice(
    *,
    db: AsyncSession = Depends(get_db),
    invoice_id: int) -> Any:
    """Invoice detail with totals"""
    return await build_invoice_response(db, await load_invoice(db, invoice_id))


@router.post("", response_model=InvoiceResponse, status_code=201)
async def create_invoice(
    *,
    db: AsyncSession = Depends(get_db),
    invoice_in: InvoiceCreate) -> Any:
    """Create invoice (number AUC-YYYY-NNN is assigned here)"""
    await _check_links(db, invoice_in.customer_id, invoice_in.vehicle_id)

    issue_date = invoice_in.issue_date or date.today()
    invoice = Invoice(
        invoice_number=await generate_invoice_number(db, issue_date.year),
        customer_id=invoice_in.customer_id,
        vehicle_id=invoice_in.vehicle_id,
        issue_date=issue_date,
        due_date=invoice_in.due_date,
        tax_enabled=invoice_in.tax_enabled,
        tax_rate=invoice_in.tax_rate,
        notes=invoice_in.notes,
        charges=[InvoiceCharge(**c.model_dump()) for c in invoice_in.charges],
    )
    db.add(invoice)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(status_code=409, detail="Invoice number already taken, please retry")

    logger.info(f"🧾 Invoice {invoice.invoice_number} created for customer {invoice.customer_id}")
    return await build_invoice_response(db, await load_invoice(db, invoice.id))


@router.put("/{invoice_id}", response_model=InvoiceResponse)
async def update_invoice(
    *,
    db: AsyncSession = Depends(get_db),
    invoice_id: int,
    invoice_in: InvoiceUpdate) -> Any:
    """Update invoice; sending charges replaces them all"""
    invoice = await load_invoice(db, invoice_id)
    update_data = invoice_in.model_dump(exclude_unset=True)

    if invoice.status == InvoiceStatus.FINALIZED.value and set(update_data) - {"status", "notes"}:
        raise HTTPException(status_code=400, detail="Finalized invoices cannot be edited")

    charges = update_data.pop("charges", None)
    if "vehicle_id" in update_data:
        await _check_links(db, None, update_data["vehicle_id"])
    for field in ("status", "issue_date", "tax_enabled", "tax_rate"):
        if field in update_data and update_data[field] is None:
            del update_data[field]

    for field, value in update_data.items():
        setattr(invoice, field, value)
    if charges is not None:
        invoice.charges = [InvoiceCharge(**c) for c in charges]

    await db.flush()
    await recalc_payment_status(db, invoice.id)
    await db.commit()
    return await build_invoice_response(db, await load_invoice(db, invoice_id))


@router.patch("/{invoice_id}/payment", response_model=InvoiceResponse)
async def update_payment_status(
    *,
    db: AsyncSession = Depends(get_db),
    invoice_id: int,
    payment_in: InvoicePaymentUpdate) -> Any:
    """Set the payment status by hand; PAID stamps paidAt"""
    invoice = await load_invoice(db, invoice_id)
    invoice.payment_status = payment_in.payment_status
    invoice.paid_at = datetime.utcnow() if payment_in.payment_status == PaymentStatus.PAID.value else None
    await db.commit()
    return await build_invoice_response(db, await load_invoice(db, invoice_id))


@router.delete("/{invoice_id}")
async def delete_invoice(
    *,
    db: AsyncSession = Depends(get_db),
    invoice_id: int) -> Any:
    """Delete a non-finalized invoice; linked transactions are kept and unlinked"""
    invoice = await load_invoice(db, invoice_id)
    if invoice.status == InvoiceStatus.FINALIZED.value:
        raise HTTPException(status_code=400, detail="Finalized invoices cannot be deleted")

    linked = await db.execute(select(Transaction).where(Transaction.invoice_id == invoice_id))
    for transaction in linked.scalars().all():
        transaction.invoice_id = None
    await db.delete(invoice)
    await db.commit()
    return {"success": True}
