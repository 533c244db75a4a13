"""
Inquiry API
"""
import logging
from datetime import datetime
from typing import Any, List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, or_

from app.core.deps import get_db
from app.models import Inquiry, InquiryHistory
from app.models.enums import InquirySource, InquiryStatus
from app.schemas.inquiry import (
    InquiryAssign,
    InquiryCreate,
    InquiryHistoryResponse,
    InquiryListResponse,
    InquiryRelease,
    InquiryResponse,
    InquiryUpdate,
    ReleaseResult)
from app.services.inquiries import add_history, change_status, release_expired_assignments

logger = logging.getLogger(__name__)

router = APIRouter()


async def get_inquiry(db: AsyncSession, inquiry_id: int) -> Inquiry:
    inquiry = await db.get(Inquiry, inquiry_id)
    if not inquiry:
        raise HTTPException(status_code=404, detail="Inquiry not found")
    return inquiry


def merge_metadata(current: Optional[dict], extra: Optional[dict], looking_for: Optional[str]) -> dict:
    """New dict so the JSON column sees the change"""
    merged = dict(current or {})
    if extra:
        merged.update(extra)
    if looking_for is not None:
        merged["lookingFor"] = looking_for
    return merged


@router.get("", response_model=InquiryListResponse)
async def list_inquiries(
    *,
    db: AsyncSession = Depends(get_db),
    status: Optional[InquiryStatus] = Query(None),
    source: Optional[InquirySource] = Query(None),
    assigned_to: Optional[str] = Query(None, alias="assignedTo"),
    unassigned: bool = Query(False, description="Only inquiries nobody owns"),
    search: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=200)) -> Any:
    """List inquiries, newest first"""
    conditions = []
    if status:
        conditions.append(Inquiry.status == status.value)
    if source:
        conditions.append(Inquiry.source == source.value)
    if assigned_to:
        conditions.append(Inquiry.assigned_to == assigned_to)
    if unassigned:
        conditions.append(Inquiry.assigned_to.is_(None))
    if search:
        pattern = f"%{search}%"
        conditions.append(or_(
            Inquiry.customer_name.ilike(pattern),
            Inquiry.email.ilike(pattern),
            Inquiry.phone.ilike(pattern),
            Inquiry.message.ilike(pattern),
        ))

    query = select(Inquiry)
    count_query = select(func.count(Inquiry.id))
    for condition in conditions:
        query = query.where(condition)
        count_query = count_query.where(condition)

    total = (await db.execute(count_query)).scalar() or 0
    result = await db.execute(
        query.order_by(Inquiry.created_at.desc(), Inquiry.id.desc()).offset((page - 1) * limit).limit(limit)
    )
    return InquiryListResponse(
        data=[InquiryResponse.model_validate(i) for i in result.scalars().all()],
        total=total,
        page=page,
        limit=limit,
    )


@router.post("/release-expired", response_model=ReleaseResult)
async def release_expired(
    *,
    db: AsyncSession = Depends(get_db),
    days: Optional[int] = Query(None, ge=0, description="Defaults to ASSIGNMENT_RELEASE_DAYS")) -> Any:
    """Run the assignment release job now"""
    released = await release_expired_assignments(db, days)
    return ReleaseResult(released=len(released), inquiry_ids=released)


@router.get("/{inquiry_id}", response_model=InquiryResponse)
async def read_inquiry(
    *,
    db: AsyncSession = Depends(get_db),
    inquiry_id: int) -> Any:
    """Inquiry detail"""
    return InquiryResponse.model_validate(await get_inquiry(db, inquiry_id))


@router.post("", response_model=InquiryResponse, status_code=201)
async def create_inquiry(
    *,
    db: AsyncSession = Depends(get_db),
    inquiry_in: InquiryCreate) -> Any:
    """Create inquiry"""
    inquiry = Inquiry(
        source=inquiry_in.source,
        customer_name=inquiry_in.customer_name,
        email=inquiry_in.email,
        phone=inquiry_in.phone,
        message=inquiry_in.message,
        status=inquiry_in.status,
        assigned_to=inquiry_in.assigned_to,
        assigned_at=datetime.utcnow() if inquiry_in.assigned_to else None,
        extra=merge_metadata({}, inquiry_in.metadata, inquiry_in.looking_for),
    )
    db.add(inquiry)
    await db.commit()
    await db.refresh(inquiry)
    logger.info(f"New inquiry {inquiry.id} from {inquiry.source}")
    return InquiryResponse.model_validate(inquiry)


@router.put("/{inquiry_id}", response_model=InquiryResponse)
async def update_inquiry(
    *,
    db: AsyncSession = Depends(get_db),
    inquiry_id: int,
    inquiry_in: InquiryUpdate) -> Any:
    """Update inquiry; metadata is merged, a status change is recorded"""
    inquiry = await get_inquiry(db, inquiry_id)
    update_data = inquiry_in.model_dump(exclude_unset=True)

    new_status = update_data.pop("status", None)
    changed_by = update_data.pop("changed_by", None)
    extra = update_data.pop("metadata", None)
    looking_for = update_data.pop("looking_for", None)
    if extra is not None or "looking_for" in inquiry_in.model_fields_set:
        inquiry.extra = merge_metadata(inquiry.extra, extra, looking_for)

    for field, value in update_data.items():
        setattr(inquiry, field, value)

    if new_status and new_status != inquiry.status:
        change_status(db, inquiry, new_status, changed_by)

    await db.commit()
    await db.refresh(inquiry)
    return InquiryResponse.model_validate(inquiry)


@router.delete("/{inquiry_id}")
async def delete_inquiry(
    *,
    db: AsyncSession = Depends(get_db),
    inquiry_id: int) -> Any:
    """Delete inquiry and its history"""
    inquiry = await get_inquiry(db, inquiry_id)
    await db.delete(inquiry)
    await db.commit()
    return {"success": True}


@router.post("/{inquiry_id}/assign", response_model=InquiryResponse)
async def assign_inquiry(
    *,
    db: AsyncSession = Depends(get_db),
    inquiry_id: int,
    assign_in: InquiryAssign) -> Any:
    """Give the inquiry to a salesperson; each assignment counts as an attempt"""
    inquiry = await get_inquiry(db, inquiry_id)
    previous = inquiry.assigned_to
    if previous and previous != assign_in.assigned_to and not assign_in.force:
        raise HTTPException(status_code=400, detail="Inquiry already assigned to another user")

    extra = dict(inquiry.extra or {})
    extra["attemptCount"] = inquiry.attempt_count + 1
    if previous and previous != assign_in.assigned_to:
        extra["previouslyTriedBy"] = {
            "assignee": previous,
            "triedAt": (inquiry.assigned_at or inquiry.created_at).isoformat(),
        }
    inquiry.extra = extra
    inquiry.assigned_to = assign_in.assigned_to
    inquiry.assigned_at = datetime.utcnow()

    add_history(
        db, inquiry, "ASSIGNED",
        new_status=inquiry.status,
        notes=f"Previously tried by {previous}" if previous and previous != assign_in.assigned_to else None,
        changed_by=assign_in.assigned_to,
    )
    await db.commit()
    await db.refresh(inquiry)
    return InquiryResponse.model_validate(inquiry)


@router.post("/{inquiry_id}/release", response_model=InquiryResponse)
async def release_inquiry(
    *,
    db: AsyncSession = Depends(get_db),
    inquiry_id: int,
    release_in: Optional[InquiryRelease] = None) -> Any:
    """Hand the inquiry back to the unassigned pool"""
    inquiry = await get_inquiry(db, inquiry_id)
    if not inquiry.assigned_to:
        raise HTTPException(status_code=400, detail="Inquiry is not assigned")

    release_in = release_in or InquiryRelease()
    add_history(
        db, inquiry, "RELEASED",
        previous_status=inquiry.status,
        new_status=inquiry.status,
        notes=release_in.notes,
        changed_by=release_in.changed_by or inquiry.assigned_to,
    )
    inquiry.assigned_to = None
    inquiry.assigned_at = None
    await db.commit()
    await db.refresh(inquiry)
    return InquiryResponse.model_validate(inquiry)


@router.get("/{inquiry_id}/history", response_model=List[InquiryHistoryResponse])
async def list_inquiry_history(
    *,
    db: AsyncSession = Depends(get_db),
    inquiry_id: int) -> Any:
    """Inquiry audit trail, newest first"""
    await get_inquiry(db, inquiry_id)
    result = await db.execute(
        select(InquiryHistory)
        .where(InquiryHistory.inquiry_id == inquiry_id)
        .order_by(InquiryHistory.created_at.desc(), InquiryHistory.id.desc())
    )
    return [InquiryHistoryResponse.model_validate(h) for h in result.scalars().all()]
