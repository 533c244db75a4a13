"""
Customer API
"""
from typing import Any, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, or_

from app.core.deps import get_db
from app.models import Customer, Invoice
from app.schemas.customer import (
    CustomerCreate,
    CustomerUpdate,
    CustomerResponse,
    CustomerListResponse)

router = APIRouter()


@router.get("", response_model=CustomerListResponse)
async def list_customers(
    *,
    db: AsyncSession = Depends(get_db),
    search: Optional[str] = Query(None, description="Name / email / phone"),
    country: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=200)) -> Any:
    """List customers"""
    query = select(Customer)
    count_query = select(func.count(Customer.id))

    if search:
        pattern = f"%{search}%"
        condition = or_(
            Customer.name.ilike(pattern),
            Customer.email.ilike(pattern),
            Customer.phone.ilike(pattern),
        )
        query = query.where(condition)
        count_query = count_query.where(condition)

    if country:
        query = query.where(Customer.country == country)
        count_query = count_query.where(Customer.country == country)

    total = (await db.execute(count_query)).scalar() or 0
    result = await db.execute(
        query.order_by(Customer.name).offset((page - 1) * limit).limit(limit)
    )
    customers = result.scalars().all()

    return CustomerListResponse(
        data=[CustomerResponse.model_validate(c) for c in customers],
        total=total,
        page=page,
        limit=limit,
    )


@router.get("/{customer_id}", response_model=CustomerResponse)
async def get_customer(
    *,
    db: AsyncSession = Depends(get_db),
    customer_id: int) -> Any:
    """Customer detail"""
    customer = await db.get(Customer, customer_id)
    if not customer:
        raise HTTPException(status_code=404, detail="Customer not found")
    return CustomerResponse.model_validate(customer)


@router.post("", response_model=CustomerResponse, status_code=201)
async def create_customer(
    *,
    db: AsyncSession = Depends(get_db),
    customer_in: CustomerCreate) -> Any:
    """Create customer"""
    customer = Customer(**customer_in.model_dump())
    db.add(customer)
    await db.commit()
    await db.refresh(customer)
    return CustomerResponse.model_validate(customer)


@router.put("/{customer_id}", response_model=CustomerResponse)
async def update_customer(
    *,
    db: AsyncSession = Depends(get_db),
    customer_id: int,
    customer_in: CustomerUpdate) -> Any:
    """Update customer (only the fields sent)"""
    customer = await db.get(Customer, customer_id)
    if not customer:
        raise HTTPException(status_code=404, detail="Customer not found")

    update_data = customer_in.model_dump(exclude_unset=True)
    if "name" in update_data and not update_data["name"]:
        raise HTTPException(status_code=400, detail="Customer name is required")
    for field, value in update_data.items():
        setattr(customer, field, value)

    await db.commit()
    await db.refresh(customer)
    return CustomerResponse.model_validate(customer)


@router.delete("/{customer_id}")
async def delete_customer(
    *,
    db: AsyncSession = Depends(get_db),
    customer_id: int) -> Any:
    """Delete customer (refused while invoices reference it)"""
    customer = await db.get(Customer, customer_id)
    if not customer:
        raise HTTPException(status_code=404, detail="Customer not found")

    invoice_count = (await db.execute(
        select(func.count(Invoice.id)).where(Invoice.customer_id == customer_id)
    )).scalar() or 0
    if invoice_count:
        raise HTTPException(status_code=400, detail="Customer has invoices and cannot be deleted")

    await db.delete(customer)
    await db.commit()
    return {"success": True}
