"""Domain entities - Core business objects."""

from src.domain.entities.downtime_window import AffectedClusterMatcher, DowntimeWindow
from src.domain.entities.metric_sample import (
    InstantVector,
    MetricSample,
    MetricSeries,
    QueryResult,
    RangeMatrix,
    SamplePair,
    ScalarResult,
    StringResult,
)
from src.domain.entities.sli_report import (
    ClusterSliReport,
    ServiceSliReport,
    SliDataPoint,
)

__all__ = [
    # Downtime windows
    "DowntimeWindow",
    "AffectedClusterMatcher",
    # Metrics query results
    "InstantVector",
    "MetricSample",
    "MetricSeries",
    "QueryResult",
    "RangeMatrix",
    "SamplePair",
    "ScalarResult",
    "StringResult",
    # SLI reports
    "ClusterSliReport",
    "ServiceSliReport",
    "SliDataPoint",
]
