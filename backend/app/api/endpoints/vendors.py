"""
Vendor API
"""
from typing import Any, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError

from app.core.deps import get_db
from app.models import Vendor
from app.models.enums import VendorCategory
from app.schemas.vendor import (
    VendorCreate,
    VendorUpdate,
    VendorResponse,
    VendorListResponse)

router = APIRouter()

DUPLICATE_NAME = "Vendor with this name already exists"


async def _name_taken(db: AsyncSession, name: str, exclude_id: Optional[int] = None) -> bool:
    query = select(Vendor.id).where(Vendor.name == name)
    if exclude_id:
        query = query.where(Vendor.id != exclude_id)
    return (await db.execute(query)).first() is not None


@router.get("", response_model=VendorListResponse)
async def list_vendors(
    *,
    db: AsyncSession = Depends(get_db),
    category: Optional[VendorCategory] = Query(None),
    search: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(100, ge=1, le=500)) -> Any:
    """List vendors, optionally by category"""
    query = select(Vendor)
    count_query = select(func.count(Vendor.id))

    if category:
        query = query.where(Vendor.category == category.value)
        count_query = count_query.where(Vendor.category == category.value)
    if search:
        query = query.where(Vendor.name.ilike(f"%{search}%"))
        count_query = count_query.where(Vendor.name.ilike(f"%{search}%"))

    total = (await db.execute(count_query)).scalar() or 0
    result = await db.execute(query.order_by(Vendor.name).offset((page - 1) * limit).limit(limit))

    return VendorListResponse(
        data=[VendorResponse.model_validate(v) for v in result.scalars().all()],
        total=total,
        page=page,
        limit=limit,
    )


@router.get("/{vendor_id}", response_model=VendorResponse)
async def get_vendor(
    *,
    db: AsyncSession = Depends(get_db),
    vendor_id: int) -> Any:
    """Vendor detail"""
    vendor = await db.get(Vendor, vendor_id)
    if not vendor:
        raise HTTPException(status_code=404, detail="Vendor not found")
    return VendorResponse.model_validate(vendor)


@router.post("", response_model=VendorResponse, status_code=201)
async def create_vendor(
    *,
    db: AsyncSession = Depends(get_db),
    vendor_in: VendorCreate) -> Any:
    """Create vendor"""
    name = vendor_in.name.strip()
    if await _name_taken(db, name):
        raise HTTPException(status_code=409, detail=DUPLICATE_NAME)

    vendor = Vendor(**{**vendor_in.model_dump(), "name": name})
    db.add(vendor)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(status_code=409, detail=DUPLICATE_NAME)
    await db.refresh(vendor)
    return VendorResponse.model_validate(vendor)


@router.put("/{vendor_id}", response_model=VendorResponse)
async def update_vendor(
    *,
    db: AsyncSession = Depends(get_db),
    vendor_id: int,
    vendor_in: VendorUpdate) -> Any:
    """Update vendor"""
    vendor = await db.get(Vendor, vendor_id)
    if not vendor:
        raise HTTPException(status_code=404, detail="Vendor not found")

    update_data = vendor_in.model_dump(exclude_unset=True)
    if "name" in update_data:
        if not update_data["name"]:
            raise HTTPException(status_code=400, detail="Vendor name is required")
        update_data["name"] = update_data["name"].strip()
        if await _name_taken(db, update_data["name"], exclude_id=vendor_id):
            raise HTTPException(status_code=409, detail=DUPLICATE_NAME)
    if "category" in update_data and update_data["category"] is None:
        del update_data["category"]

    for field, value in update_data.items():
        setattr(vendor, field, value)

    await db.commit()
    await db.refresh(vendor)
    return VendorResponse.model_validate(vendor)


@router.delete("/{vendor_id}")
async def delete_vendor(
    *,
    db: AsyncSession = Depends(get_db),
    vendor_id: int) -> Any:
    """Delete vendor (refused while costs reference it)"""
    vendor = await db.get(Vendor, vendor_id)
    if not vendor:
        raise HTTPException(status_code=404, detail="Vendor not found")

    await db.delete(vendor)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(status_code=400, detail="Vendor is referenced by vehicle costs and cannot be deleted")
    return {"success": True}
