"""Database health check module.

This module provides health check utilities for verifying database connectivity.
"""

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession


async def check_database_health_with_session(session: AsyncSession) -> bool:
    """Check database health using an existing session.

    Executes a simple SELECT 1 query to verify the database is reachable
    and responding to queries.

    Args:
        session: AsyncSession to use for health check

    Returns:
        True if database is healthy, False otherwise
    """
    try:
        result = await session.execute(text("SELECT 1"))
        return result.scalar() == 1
    except (SQLAlchemyError, OSError):
        return False
