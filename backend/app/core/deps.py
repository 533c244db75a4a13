"""Dependencies - single tenant back office (no auth)"""
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import SessionLocal
from app.services.mailer import Mailer, build_mailer


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Database session dependency
    """
    async with SessionLocal() as session:
        yield session


def get_mailer() -> Mailer:
    """Booking mail sender (overridden in tests)"""
    return build_mailer()
