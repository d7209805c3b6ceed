"""Async SQLAlchemy engine and session factory.

Sessions are opened per backing-store call (see SqlProductStore); there is
no request scope to hang them on.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from config.settings import settings


class Base(DeclarativeBase):
    """Shared declarative base for all ORM models across modules."""

    pass


engine: AsyncEngine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    pool_size=20,
    max_overflow=10,
)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def ping_database(target: AsyncEngine = engine) -> None:
    """Round-trip SELECT 1; raises the driver error if the DB is unreachable."""
    async with target.connect() as conn:
        await conn.execute(text("SELECT 1"))
