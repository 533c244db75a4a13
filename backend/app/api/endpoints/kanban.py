"""
Inquiry kanban API

The board only shows assigned inquiries; columns map 1:1 to InquiryStatus.
"""
import logging
from typing import Any, Dict, List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from app.core.deps import get_db
from app.models import Inquiry
from app.models.enums import InquiryStatus
from app.schemas.inquiry import InquiryResponse, KanbanBoardResponse, KanbanColumn, KanbanMove
from app.services.inquiries import change_status, ensure_kanban_stages

logger = logging.getLogger(__name__)

router = APIRouter()

VALID_STATUSES = {s.value for s in InquiryStatus}


@router.get("", response_model=KanbanBoardResponse)
async def get_board(
    *,
    db: AsyncSession = Depends(get_db),
    assigned_to: Optional[str] = Query(None, alias="assignedTo", description="One salesperson's board")) -> Any:
    """Board columns with their inquiries"""
    stages = await ensure_kanban_stages(db)

    query = select(Inquiry)
    if assigned_to:
        query = query.where(Inquiry.assigned_to == assigned_to)
    else:
        query = query.where(Inquiry.assigned_to.isnot(None))
    result = await db.execute(query.order_by(Inquiry.created_at.desc(), Inquiry.id.desc()))

    by_status: Dict[str, List[InquiryResponse]] = {}
    for inquiry in result.scalars().all():
        by_status.setdefault(inquiry.status, []).append(InquiryResponse.model_validate(inquiry))

    return KanbanBoardResponse(
        stages=[
            KanbanColumn(
                id=stage.id,
                name=stage.name,
                order=stage.order,
                color=stage.color,
                status=stage.status,
                inquiries=by_status.get(stage.status, []),
            )
            for stage in stages
        ],
        assigned_to=assigned_to,
    )


@router.patch("", response_model=InquiryResponse)
async def move_inquiry(
    *,
    db: AsyncSession = Depends(get_db),
    move_in: KanbanMove) -> Any:
    """Move a card to another column"""
    if not move_in.inquiry_id or not move_in.new_status:
        raise HTTPException(status_code=400, detail="Missing inquiryId or newStatus")
    if move_in.new_status not in VALID_STATUSES:
        raise HTTPException(status_code=400, detail="Invalid status")

    inquiry = await db.get(Inquiry, move_in.inquiry_id)
    if not inquiry:
        raise HTTPException(status_code=404, detail="Inquiry not found")

    change_status(db, inquiry, move_in.new_status, move_in.changed_by or inquiry.assigned_to)
    await db.commit()
    await db.refresh(inquiry)
    logger.info(f"Kanban: inquiry {inquiry.id} -> {inquiry.status}")
    return InquiryResponse.model_validate(inquiry)
