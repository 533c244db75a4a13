"""
Vehicle stage cost API
"""
import logging
from typing import Any, List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from app.core.deps import get_db
from app.models import Vendor, VehicleStageCost
from app.models.enums import ShippingStage
from app.schemas.vehicle_cost import VehicleCostCreate, VehicleCostResponse
from app.services.shipping_stages import get_vehicle

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/{vehicle_id}/costs", response_model=List[VehicleCostResponse])
async def list_costs(
    *,
    db: AsyncSession = Depends(get_db),
    vehicle_id: int,
    stage: Optional[ShippingStage] = Query(None)) -> Any:
    """Costs of a vehicle, optionally for one stage"""
    await get_vehicle(db, vehicle_id)
    query = select(VehicleStageCost).where(VehicleStageCost.vehicle_id == vehicle_id)
    if stage:
        query = query.where(VehicleStageCost.stage == stage.value)
    result = await db.execute(query.order_by(VehicleStageCost.created_at, VehicleStageCost.id))
    return [VehicleCostResponse.model_validate(c) for c in result.scalars().all()]


@router.post("/{vehicle_id}/costs", response_model=VehicleCostResponse, status_code=201)
async def create_cost(
    *,
    db: AsyncSession = Depends(get_db),
    vehicle_id: int,
    cost_in: VehicleCostCreate) -> Any:
    """Record a cost against a vendor"""
    await get_vehicle(db, vehicle_id)
    if not await db.get(Vendor, cost_in.vendor_id):
        raise HTTPException(status_code=400, detail="Vendor not found")

    cost = VehicleStageCost(vehicle_id=vehicle_id, **cost_in.model_dump())
    cost.currency = cost.currency.upper()
    db.add(cost)
    await db.commit()
    logger.info(f"Cost '{cost.cost_type}' {cost.amount} {cost.currency} added to vehicle {vehicle_id}")

    result = await db.execute(
        select(VehicleStageCost).where(VehicleStageCost.id == cost.id).execution_options(populate_existing=True)
    )
    return VehicleCostResponse.model_validate(result.scalar_one())


@router.delete("/{vehicle_id}/costs/{cost_id}")
async def delete_cost(
    *,
    db: AsyncSession = Depends(get_db),
    vehicle_id: int,
    cost_id: int) -> Any:
    """Delete a cost"""
    cost = await db.get(VehicleStageCost, cost_id)
    if not cost or cost.vehicle_id != vehicle_id:
        raise HTTPException(status_code=404, detail="Cost not found")
    await db.delete(cost)
    await db.commit()
    return {"success": True}
