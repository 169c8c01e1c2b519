"""E2E test fixtures.

Drives the full ASGI application (middleware, auth, routing, exception
handlers) over httpx. The database is a per-test SQLite file; Prometheus and
Lieutenant are replaced by in-memory fakes through dependency overrides.
"""

import base64
from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from src.infrastructure.api.dependencies import (
    get_cluster_fact_provider,
    get_metrics_service,
)
from src.infrastructure.api.main import create_app
from src.infrastructure.config.settings import APISettings, Settings
from src.infrastructure.database.config import (
    create_async_db_engine,
    create_async_session_factory,
    create_tables,
)
from src.infrastructure.database.session import get_async_session
from tests.fakes import StaticClusterFactProvider, StaticMetricsService

AUTH_USER = "reporter"
AUTH_PASS = "correct-horse"


def basic_auth_header(username: str, password: str) -> dict[str, str]:
    token = base64.b64encode(f"{username}:{password}".encode()).decode()
    return {"Authorization": f"Basic {token}"}


@pytest.fixture
async def db_engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine, None]:
    """Create a fresh database with all tables for each test."""
    engine = create_async_db_engine(f"sqlite+aiosqlite:///{tmp_path / 'e2e.db'}")
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def fact_provider() -> StaticClusterFactProvider:
    return StaticClusterFactProvider(
        {
            "c-cloudscale-rma-1": {"cloud": "cloudscale", "region": "rma"},
            "c-exoscale-gva-1": {"cloud": "exoscale", "region": "ch-gva-2"},
        }
    )


@pytest.fixture
def metrics_service() -> StaticMetricsService:
    return StaticMetricsService()


@pytest.fixture
def app(
    db_engine: AsyncEngine,
    fact_provider: StaticClusterFactProvider,
    metrics_service: StaticMetricsService,
) -> FastAPI:
    """Create the application with test backends."""
    app = create_app(Settings(api=APISettings(auth_user=AUTH_USER, auth_pass=AUTH_PASS)))
    session_factory = create_async_session_factory(db_engine)

    async def override_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_async_session] = override_session
    app.dependency_overrides[get_metrics_service] = lambda: metrics_service
    app.dependency_overrides[get_cluster_fact_provider] = lambda: fact_provider
    return app


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Authenticated HTTP client."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        headers=basic_auth_header(AUTH_USER, AUTH_PASS),
    ) as c:
        yield c


@pytest.fixture
async def anonymous_client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client without credentials."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c
