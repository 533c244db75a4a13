"""
Transaction API

Incoming transactions linked to an invoice re-drive its payment status.
"""
import logging
from datetime import date
from typing import Any, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func

from app.core.deps import get_db
from app.models import Customer, Invoice, Transaction, Vehicle, Vendor
from app.models.enums import TransactionDirection, TransactionType
from app.schemas.transaction import (
    TransactionCreate,
    TransactionListResponse,
    TransactionResponse,
    TransactionUpdate)
from app.services.invoices import recalc_payment_status

logger = logging.getLogger(__name__)

router = APIRouter()

LINKS = (
    ("vendor_id", Vendor, "Vendor not found"),
    ("customer_id", Customer, "Customer not found"),
    ("vehicle_id", Vehicle, "Vehicle not found"),
    ("invoice_id", Invoice, "Invoice not found"),
)


async def _check_links(db: AsyncSession, data: dict) -> None:
    for field, model, message in LINKS:
        if data.get(field) is not None and not await db.get(model, data[field]):
            raise HTTPException(status_code=400, detail=message)


@router.get("", response_model=TransactionListResponse)
async def list_transactions(
    *,
    db: AsyncSession = Depends(get_db),
    direction: Optional[TransactionDirection] = Query(None),
    type: Optional[TransactionType] = Query(None),
    vendor_id: Optional[int] = Query(None, alias="vendorId"),
    customer_id: Optional[int] = Query(None, alias="customerId"),
    vehicle_id: Optional[int] = Query(None, alias="vehicleId"),
    invoice_id: Optional[int] = Query(None, alias="invoiceId"),
    date_from: Optional[date] = Query(None, alias="dateFrom"),
    date_to: Optional[date] = Query(None, alias="dateTo"),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=200)) -> Any:
    """List transactions, newest first"""
    conditions = []
    if direction:
        conditions.append(Transaction.direction == direction.value)
    if type:
        conditions.append(Transaction.type == type.value)
    if vendor_id:
        conditions.append(Transaction.vendor_id == vendor_id)
    if customer_id:
        conditions.append(Transaction.customer_id == customer_id)
    if vehicle_id:
        conditions.append(Transaction.vehicle_id == vehicle_id)
    if invoice_id:
        conditions.append(Transaction.invoice_id == invoice_id)
    if date_from:
        conditions.append(Transaction.date >= date_from)
    if date_to:
        conditions.append(Transaction.date <= date_to)

    query = select(Transaction)
    count_query = select(func.count(Transaction.id))
    for condition in conditions:
        query = query.where(condition)
        count_query = count_query.where(condition)

    total = (await db.execute(count_query)).scalar() or 0
    result = await db.execute(
        query.order_by(Transaction.date.desc(), Transaction.id.desc()).offset((page - 1) * limit).limit(limit)
    )
    return TransactionListResponse(
        data=[TransactionResponse.model_validate(t) for t in result.scalars().all()],
        total=total,
        page=page,
        limit=limit,
    )


@router.get("/{transaction_id}", response_model=TransactionResponse)
async def get_transaction(
    *,
    db: AsyncSession = Depends(get_db),
    transaction_id: int) -> Any:
    """Transaction detail"""
    transaction = await db.get(Transaction, transaction_id)
    if not transaction:
        raise HTTPException(status_code=404, detail="Transaction not found")
    return TransactionResponse.model_validate(transaction)


@router.post("", response_model=TransactionResponse, status_code=201)
async def create_transaction(
    *,
    db: AsyncSession = Depends(get_db),
    transaction_in: TransactionCreate) -> Any:
    """Record a transaction"""
    data = transaction_in.model_dump()
    await _check_links(db, data)
    data["currency"] = data["currency"].upper()

    transaction = Transaction(**data)
    db.add(transaction)
    await db.flush()
    await recalc_payment_status(db, transaction.invoice_id)
    await db.commit()
    await db.refresh(transaction)
    logger.info(f"Transaction {transaction.id}: {transaction.direction} {transaction.amount} {transaction.currency}")
    return TransactionResponse.model_validate(transaction)


@router.put("/{transaction_id}", response_model=TransactionResponse)
async def update_transaction(
    *,
    db: AsyncSession = Depends(get_db),
    transaction_id: int,
    transaction_in: TransactionUpdate) -> Any:
    """Update transaction; both the old and the new invoice are recalculated"""
    transaction = await db.get(Transaction, transaction_id)
    if not transaction:
        raise HTTPException(status_code=404, detail="Transaction not found")

    update_data = transaction_in.model_dump(exclude_unset=True)
    for field in ("direction", "type", "amount", "currency", "date"):
        if field in update_data and update_data[field] is None:
            del update_data[field]
    await _check_links(db, update_data)
    if "currency" in update_data:
        update_data["currency"] = update_data["currency"].upper()

    old_invoice_id = transaction.invoice_id
    for field, value in update_data.items():
        setattr(transaction, field, value)
    await db.flush()

    await recalc_payment_status(db, old_invoice_id)
    if transaction.invoice_id != old_invoice_id:
        await recalc_payment_status(db, transaction.invoice_id)
    await db.commit()
    await db.refresh(transaction)
    return TransactionResponse.model_validate(transaction)


@router.delete("/{transaction_id}")
async def delete_transaction(
    *,
    db: AsyncSession = Depends(get_db),
    transaction_id: int) -> Any:
    """Delete transaction"""
    transaction = await db.get(Transaction, transaction_id)
    if not transaction:
        raise HTTPException(status_code=404, detail="Transaction not found")

    invoice_id = transaction.invoice_id
    await db.delete(transaction)
    await db.flush()
    await recalc_payment_status(db, invoice_id)
    await db.commit()
    return {"success": True}
