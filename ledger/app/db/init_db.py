"""
Database initialization
Creates the ledger tables at application startup.
"""
import logging
from sqlalchemy.ext.asyncio import AsyncEngine

from ledger.app.db.base import Base
from ledger.app.db.session import engine as default_engine
import ledger.app.models  # noqa: F401  (registers every table on Base.metadata)

logger = logging.getLogger(__name__)


async def create_tables(engine: AsyncEngine = default_engine) -> None:
    """
    Create every table that does not exist yet

    Args:
        engine: Target engine (the process-wide one by default)
    """
    logger.info("📦 Creating ledger tables...")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    logger.info("✅ Ledger tables ready")


async def init_db() -> None:
    """Database initialization entry point"""
    try:
        logger.info("🚀 Initializing database...")
        await create_tables()
        logger.info("✅ Database initialized")
    except Exception as e:
        logger.error(f"❌ Database initialization failed: {e}", exc_info=True)
        raise
