import logging
from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession

from src.database.engine import async_session

logger = logging.getLogger(__name__)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency that yields a request-scoped database session.

    Services that report failures through ``ActionResult`` roll the session
    back themselves before returning, so the commit here only persists
    successful mutations.
    """
    async with async_session() as session:
        try:
            yield session
            if session.in_transaction():
                await session.commit()
        except Exception:
            logger.warning("Rolling back request session after unhandled error")
            await session.rollback()
            raise
