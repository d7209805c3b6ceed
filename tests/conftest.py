"""Shared test fixtures.

session_factory: real SQLAlchemy sessions against an in-memory SQLite
database (aiosqlite). StaticPool keeps the single connection alive so every
session sees the same database for the duration of a test.
"""

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from src.mc_cache.infrastructure.memory_store import MemoryCache, reset_memory_cache
from src.mc_common.database import Base
from src.mc_product.infrastructure import db_models  # noqa: F401  -- registers products table


class FakeClock:
    """Manually advanced monotonic clock (seconds)."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, *, minutes: float = 0, seconds: float = 0) -> None:
        self.now += minutes * 60 + seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> MemoryCache:
    return MemoryCache(clock=clock)


@pytest.fixture(autouse=True)
def _fresh_shared_cache():
    """Never leak the process-wide MemoryCache between tests."""
    reset_memory_cache()
    yield
    reset_memory_cache()


@pytest_asyncio.fixture
async def session_factory() -> async_sessionmaker[AsyncSession]:  # type: ignore[misc]
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()
