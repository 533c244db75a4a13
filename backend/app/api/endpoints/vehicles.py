"""
Vehicle API
"""
from typing import Any, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, or_

from app.core.deps import get_db
from app.models import Customer, Inquiry, Vehicle
from app.models.enums import ShippingStage
from app.schemas.vehicle import (
    VehicleCreate,
    VehicleUpdate,
    VehicleResponse,
    VehicleListResponse)

router = APIRouter()


async def _load_vehicle(db: AsyncSession, vehicle_id: int) -> Optional[Vehicle]:
    result = await db.execute(
        select(Vehicle).where(Vehicle.id == vehicle_id).execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def _check_links(db: AsyncSession, data: dict) -> None:
    if data.get("customer_id") and not await db.get(Customer, data["customer_id"]):
        raise HTTPException(status_code=400, detail="Customer not found")
    if data.get("inquiry_id") and not await db.get(Inquiry, data["inquiry_id"]):
        raise HTTPException(status_code=400, detail="Inquiry not found")


@router.get("", response_model=VehicleListResponse)
async def list_vehicles(
    *,
    db: AsyncSession = Depends(get_db),
    stage: Optional[ShippingStage] = Query(None, description="Filter by current shipping stage"),
    customer_id: Optional[int] = Query(None, alias="customerId"),
    search: Optional[str] = Query(None, description="VIN / stock no / make / model"),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=200)) -> Any:
    """List vehicles"""
    query = select(Vehicle)
    count_query = select(func.count(Vehicle.id))

    conditions = []
    if stage:
        conditions.append(Vehicle.current_shipping_stage == stage.value)
    if customer_id:
        conditions.append(Vehicle.customer_id == customer_id)
    if search:
        pattern = f"%{search}%"
        conditions.append(or_(
            Vehicle.vin.ilike(pattern),
            Vehicle.stock_no.ilike(pattern),
            Vehicle.make.ilike(pattern),
            Vehicle.model.ilike(pattern),
        ))
    for condition in conditions:
        query = query.where(condition)
        count_query = count_query.where(condition)

    total = (await db.execute(count_query)).scalar() or 0
    result = await db.execute(
        query.order_by(Vehicle.created_at.desc(), Vehicle.id.desc()).offset((page - 1) * limit).limit(limit)
    )

    return VehicleListResponse(
        data=[VehicleResponse.model_validate(v) for v in result.scalars().unique().all()],
        total=total,
        page=page,
        limit=limit,
    )


@router.get("/{vehicle_id}", response_model=VehicleResponse)
async def get_vehicle(
    *,
    db: AsyncSession = Depends(get_db),
    vehicle_id: int) -> Any:
    """Vehicle detail"""
    vehicle = await _load_vehicle(db, vehicle_id)
    if not vehicle:
        raise HTTPException(status_code=404, detail="Vehicle not found")
    return VehicleResponse.model_validate(vehicle)


@router.post("", response_model=VehicleResponse, status_code=201)
async def create_vehicle(
    *,
    db: AsyncSession = Depends(get_db),
    vehicle_in: VehicleCreate) -> Any:
    """Create vehicle"""
    data = vehicle_in.model_dump()
    data["vin"] = data["vin"].strip().upper()

    existing = await db.execute(select(Vehicle.id).where(Vehicle.vin == data["vin"]))
    if existing.first():
        raise HTTPException(status_code=409, detail="Vehicle with this VIN already exists")
    await _check_links(db, data)

    if data.get("is_registered") is None:
        data["is_registered"] = False
    vehicle = Vehicle(**data)
    db.add(vehicle)
    await db.commit()

    return VehicleResponse.model_validate(await _load_vehicle(db, vehicle.id))


@router.put("/{vehicle_id}", response_model=VehicleResponse)
async def update_vehicle(
    *,
    db: AsyncSession = Depends(get_db),
    vehicle_id: int,
    vehicle_in: VehicleUpdate) -> Any:
    """
    Update vehicle details.
    The shipping stage moves through PUT /vehicles/{id}/current-stage.
    """
    vehicle = await db.get(Vehicle, vehicle_id)
    if not vehicle:
        raise HTTPException(status_code=404, detail="Vehicle not found")

    update_data = vehicle_in.model_dump(exclude_unset=True)
    if "vin" in update_data:
        if not update_data["vin"]:
            raise HTTPException(status_code=400, detail="VIN is required")
        update_data["vin"] = update_data["vin"].strip().upper()
        existing = await db.execute(
            select(Vehicle.id).where(Vehicle.vin == update_data["vin"], Vehicle.id != vehicle_id)
        )
        if existing.first():
            raise HTTPException(status_code=409, detail="Vehicle with this VIN already exists")
    if update_data.get("is_registered", False) is None:
        update_data["is_registered"] = False
    await _check_links(db, update_data)

    for field, value in update_data.items():
        setattr(vehicle, field, value)
    await db.commit()

    return VehicleResponse.model_validate(await _load_vehicle(db, vehicle_id))


@router.delete("/{vehicle_id}")
async def delete_vehicle(
    *,
    db: AsyncSession = Depends(get_db),
    vehicle_id: int) -> Any:
    """Delete vehicle (dependent rows cascade)"""
    vehicle = await db.get(Vehicle, vehicle_id)
    if not vehicle:
        raise HTTPException(status_code=404, detail="Vehicle not found")
    await db.delete(vehicle)
    await db.commit()
    return {"success": True}
