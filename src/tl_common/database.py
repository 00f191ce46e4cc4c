"""Async engine and session factory shared by every module.

Two ways a session is used:
  - request handlers receive one through ``get_db_session`` (reads, signup)
  - TransferExecutor opens its own per attempt from ``async_session_factory``

READ COMMITTED is pinned on the engine: transfer correctness comes from the
explicit row locks, not from the isolation level, and the retry
classification assumes no serialization failures on plain reads.
"""

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from config.settings import settings


class Base(DeclarativeBase):
    pass


engine: AsyncEngine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    isolation_level="READ COMMITTED",
    pool_size=settings.DB_POOL_SIZE,
    max_overflow=settings.DB_MAX_OVERFLOW,
    pool_pre_ping=True,
)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    async with async_session_factory() as session:
        yield session
