"""
Vehicle shipping stage API

- GET/PATCH /vehicles/{id}/stages       per-stage checklist record (upsert)
- PUT       /vehicles/{id}/current-stage move the vehicle along
- GET       /vehicles/{id}/history      stage moves
- POST      /vehicles/{id}/send-booking-email
"""
import logging
from typing import Any, List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from starlette.concurrency import run_in_threadpool

from app.core.config import settings
from app.core.deps import get_db, get_mailer
from app.models import VehicleStageHistory
from app.models.enums import ShippingStage
from app.schemas.shipping_stage import (
    BookingEmailRequest,
    BookingEmailResponse,
    CurrentStageUpdate,
    StageEnvelope,
    StageHistoryResponse,
    StageRecord,
    StageUpdate)
from app.services.mailer import Mailer, MailerError
from app.services.shipping_stages import (
    build_booking_email,
    change_current_stage,
    get_stage_record,
    get_vehicle,
    save_stage)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/{vehicle_id}/stages", response_model=StageEnvelope)
async def get_stage(
    *,
    db: AsyncSession = Depends(get_db),
    vehicle_id: int,
    stage: Optional[ShippingStage] = Query(None, description="Defaults to the vehicle's current stage")) -> Any:
    """Stage record (null when nothing was saved yet)"""
    vehicle = await get_vehicle(db, vehicle_id)
    stage = stage or ShippingStage(vehicle.current_shipping_stage)
    record = await get_stage_record(db, vehicle_id, stage)
    return StageEnvelope(
        shipping_stage=StageRecord.model_validate(record) if record else None,
        current_stage=vehicle.current_shipping_stage,
        vehicle_id=vehicle.id,
    )


@router.patch("/{vehicle_id}/stages", response_model=StageRecord)
async def update_stage(
    *,
    db: AsyncSession = Depends(get_db),
    vehicle_id: int,
    stage_in: StageUpdate) -> Any:
    """Upsert the (vehicle, stage) record; only the keys sent are written"""
    await get_vehicle(db, vehicle_id)
    fields = stage_in.model_dump(exclude_unset=True)
    stage = fields.pop("stage")
    record = await save_stage(db, vehicle_id, stage, fields)
    logger.debug(f"Saved stage {stage} for vehicle {vehicle_id}: {sorted(fields)}")
    return StageRecord.model_validate(record)


@router.put("/{vehicle_id}/current-stage", response_model=StageEnvelope)
async def update_current_stage(
    *,
    db: AsyncSession = Depends(get_db),
    vehicle_id: int,
    stage_in: CurrentStageUpdate) -> Any:
    """Move the vehicle to another shipping stage"""
    vehicle = await get_vehicle(db, vehicle_id)
    await change_current_stage(db, vehicle, stage_in.stage, stage_in.notes, stage_in.changed_by)
    await db.commit()

    record = await get_stage_record(db, vehicle_id, vehicle.current_shipping_stage)
    return StageEnvelope(
        shipping_stage=StageRecord.model_validate(record) if record else None,
        current_stage=vehicle.current_shipping_stage,
        vehicle_id=vehicle.id,
    )


@router.get("/{vehicle_id}/history", response_model=List[StageHistoryResponse])
async def list_stage_history(
    *,
    db: AsyncSession = Depends(get_db),
    vehicle_id: int) -> Any:
    """Stage moves, newest first"""
    await get_vehicle(db, vehicle_id)
    result = await db.execute(
        select(VehicleStageHistory)
        .where(VehicleStageHistory.vehicle_id == vehicle_id)
        .order_by(VehicleStageHistory.created_at.desc(), VehicleStageHistory.id.desc())
    )
    return [StageHistoryResponse.model_validate(h) for h in result.scalars().all()]


@router.post("/{vehicle_id}/send-booking-email", response_model=BookingEmailResponse)
async def send_booking_email(
    *,
    db: AsyncSession = Depends(get_db),
    mailer: Mailer = Depends(get_mailer),
    vehicle_id: int,
    request_in: BookingEmailRequest) -> Any:
    """Mail a booking request to the shipping agent and tick bookingRequested"""
    vehicle = await get_vehicle(db, vehicle_id)
    booking = await get_stage_record(db, vehicle_id, ShippingStage.BOOKING)
    subject, body = build_booking_email(vehicle, booking, settings.COMPANY_NAME)

    try:
        await run_in_threadpool(mailer.send, request_in.shipping_agent_email, subject, body)
    except MailerError as e:
        logger.error(f"Booking mail for vehicle {vehicle_id} failed: {e}")
        raise HTTPException(
            status_code=500,
            detail={"error": "Failed to send booking email", "details": str(e)},
        )

    await save_stage(db, vehicle_id, ShippingStage.BOOKING, {"booking_requested": True})
    logger.info(f"📨 Booking request for {vehicle.vin} sent to {request_in.shipping_agent_email}")
    return BookingEmailResponse(success=True, message="Booking request email sent successfully")
