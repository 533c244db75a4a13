import os
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

from app.core.config import settings


def async_database_uri(uri: str) -> str:
    """sqlite:/// -> sqlite+aiosqlite:///"""
    if uri.startswith("sqlite:///"):
        return uri.replace("sqlite:///", "sqlite+aiosqlite:///", 1)
    return uri


def build_engine(uri: str, **kwargs) -> AsyncEngine:
    """Async engine with SQLite foreign keys switched on"""
    new_engine = create_async_engine(
        async_database_uri(uri),
        echo=os.getenv("SQL_DEBUG", "false").lower() == "true",
        future=True,
        **kwargs,
    )
    if new_engine.dialect.name == "sqlite":
        @event.listens_for(new_engine.sync_engine, "connect")
        def _enable_foreign_keys(dbapi_connection, _):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()
    return new_engine


# SQL echo only when SQL_DEBUG=true
engine = build_engine(settings.DATABASE_URI)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)
