"""
Database session management
The process-wide async engine and session factory; the engine is disposed
by the application lifespan on shutdown.
"""
from typing import AsyncGenerator
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    create_async_engine,
    async_sessionmaker,
)

from ledger.app.core.config import settings


engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.LOG_LEVEL == "DEBUG",
    pool_pre_ping=True,
)

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Session dependency for read-only request handlers

    Yields:
        AsyncSession: async database session

    Example:
        @router.get("/contracts")
        async def list_contracts(db: AsyncSession = Depends(get_db)):
            ...
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """
    Session factory dependency for the ledger services

    The transfer engine and deposit guard open their own session per call so
    each payment or deposit runs in exactly one transaction.
    """
    return AsyncSessionLocal
