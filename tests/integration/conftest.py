"""Integration test fixtures for database testing.

Each test gets its own SQLite database file (aiosqlite), created with the
same metadata that ``sli-reporting db init`` uses.
"""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from src.infrastructure.database.config import (
    create_async_db_engine,
    create_async_session_factory,
    create_tables,
)


@pytest.fixture
def database_url(tmp_path: Path) -> str:
    """SQLite database URL in the test's temporary directory."""
    return f"sqlite+aiosqlite:///{tmp_path / 'sli-reporting.db'}"


@pytest.fixture
async def db_engine(database_url: str) -> AsyncGenerator[AsyncEngine, None]:
    """Create async database engine with all tables for each test.

    Args:
        database_url: SQLite connection URL

    Yields:
        AsyncEngine instance
    """
    engine = create_async_db_engine(database_url)
    await create_tables(engine)

    yield engine

    await engine.dispose()


@pytest.fixture
async def db_session(db_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Create async database session for each test.

    Changes are not committed unless the test commits explicitly.

    Args:
        db_engine: Database engine

    Yields:
        AsyncSession instance
    """
    session_factory = create_async_session_factory(db_engine)

    async with session_factory() as session:
        yield session
