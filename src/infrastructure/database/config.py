"""Database configuration module.

This module provides database engine and session configuration
for the application with connection pooling and async support.
"""

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine

from src.infrastructure.database.models import Base

DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///./data.db"


def create_async_db_engine(
    database_url: str = DEFAULT_DATABASE_URL,
    pool_size: int = 20,
    max_overflow: int = 10,
    echo: bool = False,
) -> AsyncEngine:
    """Create async SQLAlchemy engine.

    PostgreSQL engines get a bounded connection pool. SQLite engines use the
    driver's default pool, which does not accept sizing arguments.

    Args:
        database_url: SQLAlchemy async connection URL
        pool_size: Connection pool size (PostgreSQL only)
        max_overflow: Burst capacity (PostgreSQL only)
        echo: Enable SQL query logging (defaults to False)

    Returns:
        AsyncEngine instance
    """
    if make_url(database_url).get_backend_name() == "sqlite":
        return create_async_engine(database_url, echo=echo)

    return create_async_engine(
        database_url,
        pool_size=pool_size,
        max_overflow=max_overflow,
        pool_pre_ping=True,  # Validate connections before use
        pool_recycle=3600,  # Recycle connections every hour
        echo=echo,  # Set to True for SQL query logging (development only)
    )


def create_async_session_factory(
    engine: AsyncEngine,
) -> async_sessionmaker:
    """Create async session factory.

    Args:
        engine: AsyncEngine instance

    Returns:
        Async session factory (sessionmaker)
    """
    return async_sessionmaker(
        engine,
        expire_on_commit=False,  # Don't expire objects after commit
        autoflush=False,  # Manual flush control
    )


async def create_tables(engine: AsyncEngine) -> None:
    """Create all tables that do not exist yet.

    Args:
        engine: AsyncEngine connected to the target database
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


# Global engine and session factory (initialized by application startup)
_engine: AsyncEngine | None = None
_async_session_factory: async_sessionmaker | None = None


async def init_db(
    database_url: str = DEFAULT_DATABASE_URL,
    pool_size: int = 20,
    max_overflow: int = 10,
    echo: bool = False,
) -> None:
    """Initialize global database engine and session factory.

    This should be called once during application startup.

    Args:
        database_url: SQLAlchemy async connection URL
        pool_size: Connection pool size (PostgreSQL only)
        max_overflow: Burst capacity (PostgreSQL only)
        echo: Enable SQL query logging (defaults to False)
    """
    global _engine, _async_session_factory

    _engine = create_async_db_engine(
        database_url=database_url,
        pool_size=pool_size,
        max_overflow=max_overflow,
        echo=echo,
    )
    _async_session_factory = create_async_session_factory(_engine)


async def dispose_db() -> None:
    """Dispose database engine and close all connections.

    This should be called during application shutdown.
    """
    global _engine, _async_session_factory

    if _engine:
        await _engine.dispose()
        _engine = None
        _async_session_factory = None


def get_engine() -> AsyncEngine:
    """Get global database engine.

    Returns:
        AsyncEngine instance

    Raises:
        RuntimeError: If database has not been initialized
    """
    if _engine is None:
        raise RuntimeError(
            "Database engine not initialized. Call init_db() first."
        )
    return _engine


def get_session_factory() -> async_sessionmaker:
    """Get global async session factory.

    Returns:
        Async session factory

    Raises:
        RuntimeError: If database has not been initialized
    """
    if _async_session_factory is None:
        raise RuntimeError(
            "Database session factory not initialized. Call init_db() first."
        )
    return _async_session_factory
