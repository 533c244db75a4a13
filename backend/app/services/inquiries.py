"""
Inquiry service - status changes, failed leads and assignment release
"""
import logging
from datetime import datetime, timedelta
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.models.enums import InquiryStatus
from app.models.inquiry import Inquiry, InquiryHistory, KanbanStage

logger = logging.getLogger(__name__)

# a lead worked this many times without winning is marked failed
FAILED_LEAD_ATTEMPTS = 2

DEFAULT_KANBAN_STAGES = [
    ("New", InquiryStatus.NEW, "#3b82f6"),
    ("Contacted", InquiryStatus.CONTACTED, "#8b5cf6"),
    ("Qualified", InquiryStatus.QUALIFIED, "#10b981"),
    ("Deposit", InquiryStatus.DEPOSIT, "#f59e0b"),
    ("Closed Won", InquiryStatus.CLOSED_WON, "#22c55e"),
    ("Closed Lost", InquiryStatus.CLOSED_LOST, "#6b7280"),
    ("Recurring", InquiryStatus.RECURRING, "#06b6d4"),
]


async def ensure_kanban_stages(db: AsyncSession) -> List[KanbanStage]:
    """Board columns, seeding the defaults on first use"""
    result = await db.execute(select(KanbanStage).order_by(KanbanStage.order))
    stages = list(result.scalars().all())
    if stages:
        return stages

    for order, (name, status, color) in enumerate(DEFAULT_KANBAN_STAGES):
        db.add(KanbanStage(name=name, order=order, status=status.value, color=color))
    await db.commit()
    logger.info("📋 Seeded default kanban stages")

    result = await db.execute(select(KanbanStage).order_by(KanbanStage.order))
    return list(result.scalars().all())


def add_history(
    db: AsyncSession,
    inquiry: Inquiry,
    action: str,
    previous_status: Optional[str] = None,
    new_status: Optional[str] = None,
    notes: Optional[str] = None,
    changed_by: Optional[str] = None,
) -> InquiryHistory:
    entry = InquiryHistory(
        inquiry_id=inquiry.id,
        action=action,
        previous_status=previous_status,
        new_status=new_status,
        notes=notes,
        changed_by=changed_by,
    )
    db.add(entry)
    return entry


def change_status(
    db: AsyncSession,
    inquiry: Inquiry,
    new_status: InquiryStatus,
    changed_by: Optional[str] = None,
) -> bool:
    """
    Move an inquiry to a new status, with history.

    A lead that already had FAILED_LEAD_ATTEMPTS attempts and is moved
    anywhere but CLOSED_WON is flagged as a failed lead.
    Returns True when the lead was flagged failed by this move.
    """
    new_status = InquiryStatus(new_status)
    previous = inquiry.status
    inquiry.status = new_status.value

    flagged = False
    notes = None
    if (
        inquiry.attempt_count >= FAILED_LEAD_ATTEMPTS
        and new_status != InquiryStatus.CLOSED_WON
        and not inquiry.is_failed_lead
    ):
        extra = dict(inquiry.extra or {})
        extra["isFailedLead"] = True
        extra["failedAt"] = datetime.utcnow().isoformat()
        inquiry.extra = extra
        flagged = True
        notes = "Marked as failed lead after second attempt"
        logger.info(f"Inquiry {inquiry.id} marked as failed lead")

    add_history(
        db, inquiry, "STATUS_CHANGED",
        previous_status=previous,
        new_status=new_status.value,
        notes=notes,
        changed_by=changed_by,
    )
    return flagged


async def release_expired_assignments(db: AsyncSession, days: Optional[int] = None) -> List[int]:
    """
    Release inquiries assigned more than ``days`` ago that did not convert.
    Commits; returns the released inquiry ids.
    """
    days = settings.ASSIGNMENT_RELEASE_DAYS if days is None else days
    cutoff = datetime.utcnow() - timedelta(days=days)

    result = await db.execute(
        select(Inquiry).where(
            Inquiry.assigned_to.isnot(None),
            Inquiry.assigned_at <= cutoff,
            Inquiry.status != InquiryStatus.CLOSED_WON.value,
        )
    )
    expired = list(result.scalars().all())

    for inquiry in expired:
        add_history(
            db, inquiry, "AUTO_RELEASED",
            previous_status=inquiry.status,
            new_status=inquiry.status,
            notes=f"Automatically released after {days} days without conversion",
            changed_by=inquiry.assigned_to,
        )
        inquiry.assigned_to = None
        inquiry.assigned_at = None

    await db.commit()
    if expired:
        logger.info(f"🔓 Released {len(expired)} expired inquiry assignments")
    return [inquiry.id for inquiry in expired]
