from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession

from bureauto.db.session import async_session_factory


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield one session per request.

    Anything left uncommitted when the handler raises is rolled back before the
    session goes back to the pool.
    """
    async with async_session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
