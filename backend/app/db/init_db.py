import asyncio
import logging
import sys

from app.db.session import engine, SessionLocal
from app.db.base import Base
from app.services.inquiries import ensure_kanban_stages

# import every model so the tables are registered on Base.metadata
import app.models  # noqa: F401

logger = logging.getLogger(__name__)


async def ensure_tables_exist() -> None:
    """
    Create missing tables and the default kanban columns (called on application start)
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with SessionLocal() as db:
        stages = await ensure_kanban_stages(db)
    logger.info(f"✅ Database ready ({len(stages)} kanban columns)")


async def init_db(reset: bool = False) -> None:
    """
    Create the schema; with reset=True every table is dropped first
    """
    if reset:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
        logger.warning("⚠️ All tables dropped")
    await ensure_tables_exist()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(init_db(reset="--reset" in sys.argv))
