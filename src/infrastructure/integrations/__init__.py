"""External integrations.

This package contains clients for the systems the service reads from:
the Prometheus-compatible metrics backend and the Lieutenant cluster inventory.
"""

from src.infrastructure.integrations.lieutenant_client import (
    LieutenantClusterFactProvider,
    LieutenantError,
)
from src.infrastructure.integrations.prometheus_client import (
    InvalidQueryResultError,
    PrometheusMetricsClient,
    PrometheusQueryError,
)

__all__ = [
    "LieutenantClusterFactProvider",
    "LieutenantError",
    "PrometheusMetricsClient",
    "PrometheusQueryError",
    "InvalidQueryResultError",
]
