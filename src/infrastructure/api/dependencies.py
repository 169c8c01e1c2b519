"""
Dependency injection for FastAPI routes.

Provides factory functions for creating use cases with their required dependencies.
Uses FastAPI's Depends() for dependency injection. Long-lived clients are
created once in the application lifespan and read from app.state.
"""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.application.use_cases.manage_downtime_windows import (
    ManageDowntimeWindowsUseCase,
)
from src.application.use_cases.query_cluster_sli import QueryClusterSliUseCase
from src.domain.repositories.cluster_fact_provider import ClusterFactProviderInterface
from src.domain.repositories.metrics_query_service import MetricsQueryServiceInterface
from src.domain.services.downtime_matcher import DowntimeMatcher
from src.domain.services.error_budget_calculator import ErrorBudgetCalculator
from src.infrastructure.database.repositories.downtime_window_repository import (
    DowntimeWindowRepository,
)
from src.infrastructure.database.session import get_async_session


# Client factories


def get_metrics_service(request: Request) -> MetricsQueryServiceInterface:
    """Get the Prometheus client created at startup."""
    return request.app.state.metrics_service


def get_cluster_fact_provider(request: Request) -> ClusterFactProviderInterface:
    """Get the Lieutenant client created at startup."""
    return request.app.state.cluster_fact_provider


# Repository factories


async def get_downtime_window_repository(
    session: AsyncSession = Depends(get_async_session),
) -> DowntimeWindowRepository:
    """Get DowntimeWindowRepository instance."""
    return DowntimeWindowRepository(session)


# Domain service factories


def get_downtime_matcher() -> DowntimeMatcher:
    """Get DowntimeMatcher instance."""
    return DowntimeMatcher()


def get_error_budget_calculator(
    matcher: DowntimeMatcher = Depends(get_downtime_matcher),
) -> ErrorBudgetCalculator:
    """Get ErrorBudgetCalculator instance."""
    return ErrorBudgetCalculator(matcher)


# Use case factories


async def get_manage_downtime_windows_use_case(
    repository: DowntimeWindowRepository = Depends(get_downtime_window_repository),
    fact_provider: ClusterFactProviderInterface = Depends(get_cluster_fact_provider),
    matcher: DowntimeMatcher = Depends(get_downtime_matcher),
) -> ManageDowntimeWindowsUseCase:
    """Get ManageDowntimeWindowsUseCase instance."""
    return ManageDowntimeWindowsUseCase(
        repository=repository,
        fact_provider=fact_provider,
        matcher=matcher,
    )


async def get_query_cluster_sli_use_case(
    downtime_store: ManageDowntimeWindowsUseCase = Depends(
        get_manage_downtime_windows_use_case
    ),
    metrics_service: MetricsQueryServiceInterface = Depends(get_metrics_service),
    calculator: ErrorBudgetCalculator = Depends(get_error_budget_calculator),
) -> QueryClusterSliUseCase:
    """Get QueryClusterSliUseCase instance."""
    return QueryClusterSliUseCase(
        downtime_store=downtime_store,
        metrics_service=metrics_service,
        calculator=calculator,
    )
