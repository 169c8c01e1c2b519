"""Database session management for FastAPI dependency injection.

One session, and therefore one transaction, spans a whole request: every
repository call of a request shares it, and it is committed only after the
route handler returned successfully.
"""

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession

from src.infrastructure.database.config import get_session_factory


async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield a request-scoped database session.

    Commits when the request handler completes and rolls back when it raises.

    Yields:
        AsyncSession instance

    Example:
        ```python
        @router.get("/downtime/{window_id}")
        async def get_window(
            window_id: str,
            session: AsyncSession = Depends(get_async_session),
        ):
            ...
        ```

    Raises:
        RuntimeError: If the database has not been initialized
    """
    session_factory = get_session_factory()

    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
