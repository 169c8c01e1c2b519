"""Repository interfaces - Abstract data access contracts."""

from src.domain.repositories.cluster_fact_provider import ClusterFactProviderInterface
from src.domain.repositories.downtime_window_repository import (
    DowntimeWindowRepositoryInterface,
)
from src.domain.repositories.metrics_query_service import (
    MetricsQueryServiceInterface,
)

__all__ = [
    "DowntimeWindowRepositoryInterface",
    "ClusterFactProviderInterface",
    "MetricsQueryServiceInterface",
]
