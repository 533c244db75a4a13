"""
Scheduled jobs (APScheduler)
Daily release of inquiry assignments that went stale
"""

import logging
from typing import Optional
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from app.core.config import settings
from app.db.session import SessionLocal
from app.services.inquiries import release_expired_assignments

logger = logging.getLogger(__name__)

# process-wide scheduler
scheduler: Optional[AsyncIOScheduler] = None


async def release_assignments_job():
    """Release expired assignments in a fresh session"""
    try:
        async with SessionLocal() as db:
            released = await release_expired_assignments(db)
        logger.info(f"✅ Assignment release finished: {len(released)} released")
    except Exception:
        logger.exception("❌ Assignment release failed")


def init_scheduler():
    """Create and start the scheduler"""
    global scheduler

    if not settings.ASSIGNMENT_RELEASE_ENABLED:
        logger.info("⏸️ Assignment release job disabled")
        return

    scheduler = AsyncIOScheduler()

    scheduler.add_job(
        release_assignments_job,
        trigger=CronTrigger(
            hour=settings.ASSIGNMENT_RELEASE_HOUR,
            minute=settings.ASSIGNMENT_RELEASE_MINUTE
        ),
        id="release_assignments",
        name="Release expired inquiry assignments",
        replace_existing=True
    )

    scheduler.start()
    logger.info(
        f"⏰ Scheduler started - assignment release daily at "
        f"{settings.ASSIGNMENT_RELEASE_HOUR:02d}:{settings.ASSIGNMENT_RELEASE_MINUTE:02d}"
    )


def shutdown_scheduler():
    """Stop the scheduler"""
    global scheduler
    if scheduler:
        scheduler.shutdown()
        scheduler = None
        logger.info("⏰ Scheduler stopped")


def get_scheduler_status() -> dict:
    """Scheduler state for /api/health"""
    if not scheduler:
        return {
            "enabled": settings.ASSIGNMENT_RELEASE_ENABLED,
            "running": False,
            "jobs": []
        }

    jobs = []
    for job in scheduler.get_jobs():
        jobs.append({
            "id": job.id,
            "name": job.name,
            "next_run_time": job.next_run_time.isoformat() if job.next_run_time else None
        })

    return {
        "enabled": settings.ASSIGNMENT_RELEASE_ENABLED,
        "running": scheduler.running,
        "jobs": jobs
    }
