"""Interface for querying the metrics backend.

This interface abstracts the metrics source (Prometheus, Mimir, Thanos, ...)
allowing the domain layer to remain independent of a specific client.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta

from src.domain.entities.metric_sample import QueryResult


class MetricsQueryServiceInterface(ABC):
    """Interface for instant and range queries against a metrics backend."""

    @abstractmethod
    async def query(self, expr: str, ts: datetime) -> QueryResult:
        """Evaluate an instant query.

        Args:
            expr: PromQL expression
            ts: Evaluation timestamp

        Returns:
            Query result of whatever type the backend produced

        Raises:
            UpstreamError: If the backend is unreachable or the query fails
        """
        pass

    @abstractmethod
    async def query_range(
        self, expr: str, start: datetime, end: datetime, step: timedelta
    ) -> QueryResult:
        """Evaluate a range query.

        Args:
            expr: PromQL expression
            start: Range start (inclusive)
            end: Range end (inclusive)
            step: Resolution step

        Returns:
            Query result of whatever type the backend produced

        Raises:
            UpstreamError: If the backend is unreachable or the query fails
        """
        pass
