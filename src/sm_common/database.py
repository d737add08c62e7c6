"""Async SQLAlchemy engine and the per-request session dependency.

Every connection carries a lock_timeout so a settlement queued behind a
long-held listing or account lock fails instead of hanging the request.
"""

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from config.settings import settings

engine: AsyncEngine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    pool_size=settings.DB_POOL_SIZE,
    max_overflow=settings.DB_MAX_OVERFLOW,
    pool_pre_ping=True,
    connect_args={
        "server_settings": {"lock_timeout": str(settings.DB_LOCK_TIMEOUT_MS)},
    },
)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency. Services own commit/rollback; this only closes."""
    async with async_session_factory() as session:
        yield session
