"""
Shipping stage service

Upsert of the per-(vehicle, stage) record, yard resolution,
current-stage moves and the booking request mail body.
"""
import logging
from typing import Any, Dict, Optional, Tuple, Union

from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.enums import ShippingStage
from app.models.shipping_stage import CHECKLIST_FLAGS, VehicleShippingStage, VehicleStageHistory
from app.models.vehicle import Vehicle
from app.models.vendor import Vendor, Yard

logger = logging.getLogger(__name__)

VENDOR_YARD_PREFIX = "vendor-"


async def get_vehicle(db: AsyncSession, vehicle_id: int) -> Vehicle:
    """Vehicle or 404"""
    vehicle = await db.get(Vehicle, vehicle_id)
    if not vehicle:
        raise HTTPException(status_code=404, detail="Vehicle not found")
    return vehicle


async def get_stage_record(
    db: AsyncSession, vehicle_id: int, stage: Union[ShippingStage, str]
) -> Optional[VehicleShippingStage]:
    result = await db.execute(
        select(VehicleShippingStage).where(
            VehicleShippingStage.vehicle_id == vehicle_id,
            VehicleShippingStage.stage == ShippingStage(stage).value,
        )
    )
    return result.scalar_one_or_none()


async def resolve_yard_id(db: AsyncSession, raw: Union[int, str, None]) -> Optional[int]:
    """
    Turn a yard reference from the form into a yards.id.

    "vendor-<id>" points at a YARD vendor that may not have a yard row yet;
    the row is found (by vendor, then by name) or created.
    """
    if raw is None or raw == "":
        return None

    if isinstance(raw, str) and raw.startswith(VENDOR_YARD_PREFIX):
        try:
            vendor_id = int(raw[len(VENDOR_YARD_PREFIX):])
        except ValueError:
            raise HTTPException(status_code=400, detail=f"Invalid yard id: {raw}")

        result = await db.execute(select(Yard).where(Yard.vendor_id == vendor_id).order_by(Yard.id))
        yard = result.scalars().first()
        if yard:
            return yard.id

        vendor = await db.get(Vendor, vendor_id)
        if not vendor:
            raise HTTPException(status_code=400, detail="Yard vendor not found")

        result = await db.execute(select(Yard).where(Yard.name == vendor.name))
        yard = result.scalar_one_or_none()
        if yard:
            if yard.vendor_id is None:
                yard.vendor_id = vendor.id
            return yard.id

        yard = Yard(name=vendor.name, vendor_id=vendor.id, email=vendor.email)
        db.add(yard)
        await db.flush()
        logger.info(f"Created yard {yard.id} for vendor {vendor.name}")
        return yard.id

    try:
        yard_id = int(raw)
    except (TypeError, ValueError):
        raise HTTPException(status_code=400, detail=f"Invalid yard id: {raw}")
    if not await db.get(Yard, yard_id):
        raise HTTPException(status_code=400, detail="Yard not found")
    return yard_id


async def _check_vendors(db: AsyncSession, fields: Dict[str, Any]) -> None:
    for key, value in fields.items():
        if key.endswith("_vendor_id") and value is not None:
            if not await db.get(Vendor, value):
                raise HTTPException(status_code=400, detail=f"Vendor {value} not found")


def _apply(record: VehicleShippingStage, fields: Dict[str, Any]) -> None:
    for key, value in fields.items():
        if key in CHECKLIST_FLAGS and value is None:
            value = False
        setattr(record, key, value)
    # skipping repair drops the repair vendor
    if fields.get("repair_skipped"):
        record.repair_vendor_id = None


async def upsert_stage(
    db: AsyncSession,
    vehicle_id: int,
    stage: Union[ShippingStage, str],
    fields: Dict[str, Any],
) -> VehicleShippingStage:
    """
    Create or update the (vehicle, stage) record with the given fields.

    Only the keys present in ``fields`` are written; the caller commits.
    """
    stage = ShippingStage(stage)
    fields = dict(fields)
    if "yard_id" in fields:
        fields["yard_id"] = await resolve_yard_id(db, fields["yard_id"])
    await _check_vendors(db, fields)

    record = await get_stage_record(db, vehicle_id, stage)
    if record is None:
        record = VehicleShippingStage(vehicle_id=vehicle_id, stage=stage.value)
        db.add(record)
    _apply(record, fields)

    await db.flush()
    return record


async def save_stage(
    db: AsyncSession,
    vehicle_id: int,
    stage: Union[ShippingStage, str],
    fields: Dict[str, Any],
) -> VehicleShippingStage:
    """upsert_stage + commit, retried once if a concurrent insert won the unique key"""
    try:
        record = await upsert_stage(db, vehicle_id, stage, fields)
        await db.commit()
    except IntegrityError:
        await db.rollback()
        logger.info(f"Stage {stage} for vehicle {vehicle_id} created concurrently, retrying as update")
        record = await upsert_stage(db, vehicle_id, stage, fields)
        await db.commit()
    return record


async def change_current_stage(
    db: AsyncSession,
    vehicle: Vehicle,
    new_stage: Union[ShippingStage, str],
    notes: Optional[str] = None,
    changed_by: Optional[str] = None,
) -> Optional[VehicleStageHistory]:
    """Move the vehicle's current stage; history is written only on a real change"""
    new_stage = ShippingStage(new_stage)
    previous = vehicle.current_shipping_stage
    if previous == new_stage.value:
        return None

    vehicle.current_shipping_stage = new_stage.value
    history = VehicleStageHistory(
        vehicle_id=vehicle.id,
        previous_stage=previous,
        new_stage=new_stage.value,
        action="STAGE_CHANGED",
        notes=notes,
        changed_by=changed_by,
    )
    db.add(history)
    await db.flush()
    logger.info(f"🚚 Vehicle {vehicle.vin}: {previous} -> {new_stage.value}")
    return history


def _lines(pairs) -> str:
    return "\n".join(f"{label}: {value}" for label, value in pairs if value not in (None, ""))


def build_booking_email(
    vehicle: Vehicle,
    booking: Optional[VehicleShippingStage],
    sender_name: str,
) -> Tuple[str, str]:
    """Subject and plain text body of a booking request to a shipping agent"""
    subject = f"Booking Request - {vehicle.vin}"
    if vehicle.make and vehicle.model:
        subject += f" - {vehicle.make} {vehicle.model}"

    vehicle_details = _lines([
        ("VIN", vehicle.vin),
        ("Stock No", vehicle.stock_no),
        ("Make", vehicle.make),
        ("Model", vehicle.model),
        ("Year", vehicle.year),
        ("Chassis No", vehicle.chassis_no),
        ("Auction House", vehicle.auction_house),
        ("Lot No", vehicle.lot_no),
        ("Purchase Date", vehicle.purchase_date.isoformat() if vehicle.purchase_date else None),
    ])

    sections = [
        "Dear Shipping Agent,",
        "We would like to request a booking for the following vehicle:",
        vehicle_details,
    ]

    if booking is not None:
        booking_details = _lines([
            ("Booking Type", booking.booking_type),
            ("Booking Number", booking.booking_number),
            ("POD", booking.pod),
            ("POL", booking.pol),
            ("Vessel Name", booking.vessel_name),
            ("Voyage No", booking.voyage_no),
            ("ETD", booking.etd.isoformat() if booking.etd else None),
            ("ETA", booking.eta.isoformat() if booking.eta else None),
            ("Container Number", booking.container_number),
            ("Container Size", booking.container_size),
            ("Seal Number", booking.seal_number),
        ])
        if booking_details:
            sections.append(f"Booking Details:\n{booking_details}")

    customer = vehicle.customer
    if customer is not None:
        sections.append("Customer Information:\n" + _lines([
            ("Name", customer.name),
            ("Email", customer.email),
            ("Phone", customer.full_phone),
        ]))

    sections.append("Please confirm the booking and provide us with the necessary details.")
    sections.append(f"Thank you,\n{sender_name}")
    return subject, "\n\n".join(sections)

