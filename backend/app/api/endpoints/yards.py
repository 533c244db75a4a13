"""
Yard API

The list merges real yards with YARD-category vendors that have no yard row
yet (id "vendor-<vendorId>"); names are unique across the merged list.
"""
from typing import Any, List
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from app.core.deps import get_db
from app.models import Vendor, Yard
from app.models.enums import VendorCategory
from app.schemas.vendor import YardCreate, YardResponse, YardVendor
from app.services.shipping_stages import VENDOR_YARD_PREFIX

router = APIRouter()


def build_yard_response(yard: Yard) -> YardResponse:
    return YardResponse(
        id=str(yard.id),
        name=yard.name,
        vendor_id=yard.vendor_id,
        email=yard.email,
        vendor=YardVendor.model_validate(yard.vendor) if yard.vendor else None,
    )


@router.get("", response_model=List[YardResponse])
async def list_yards(
    *,
    db: AsyncSession = Depends(get_db)) -> Any:
    """Yards plus YARD vendors"""
    yards = (await db.execute(select(Yard).order_by(Yard.name))).scalars().all()
    yard_vendors = (await db.execute(
        select(Vendor).where(Vendor.category == VendorCategory.YARD.value).order_by(Vendor.name)
    )).scalars().all()

    merged = [build_yard_response(y) for y in yards]
    merged += [
        YardResponse(
            id=f"{VENDOR_YARD_PREFIX}{v.id}",
            name=v.name,
            vendor_id=v.id,
            email=v.email,
            vendor=YardVendor.model_validate(v),
        )
        for v in yard_vendors
    ]

    seen = set()
    unique = []
    for yard in merged:
        if yard.name in seen:
            continue
        seen.add(yard.name)
        unique.append(yard)
    return unique


@router.post("", response_model=YardResponse, status_code=201)
async def create_yard(
    *,
    db: AsyncSession = Depends(get_db),
    yard_in: YardCreate) -> Any:
    """Create yard"""
    name = yard_in.name.strip()
    existing = await db.execute(select(Yard.id).where(Yard.name == name))
    if existing.first():
        raise HTTPException(status_code=409, detail="Yard with this name already exists")
    if yard_in.vendor_id and not await db.get(Vendor, yard_in.vendor_id):
        raise HTTPException(status_code=400, detail="Vendor not found")

    yard = Yard(name=name, vendor_id=yard_in.vendor_id, email=yard_in.email)
    db.add(yard)
    await db.commit()

    result = await db.execute(
        select(Yard).where(Yard.id == yard.id).execution_options(populate_existing=True)
    )
    return build_yard_response(result.scalar_one())
