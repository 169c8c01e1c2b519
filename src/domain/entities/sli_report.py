"""Domain entities for per-cluster SLI error budget reports."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class SliDataPoint:
    """Hourly error rate data point of a service.

    Attributes:
        timestamp: Sample timestamp as provided by the metrics backend
        error_rate_1h: Error rate over the past hour, adjusted for downtime
        real_error_rate_1h: Raw error rate over the past hour (NaN reported as 0)
        cumulative_average_error_rate: Running sum of adjusted error rates so
            far, divided by the total hours of the requested window
    """

    timestamp: datetime
    error_rate_1h: float
    real_error_rate_1h: float
    cumulative_average_error_rate: float


@dataclass
class ServiceSliReport:
    """Error budget figures of a single service over the requested window.

    Budget fields are None when no objective was found for the service.

    Attributes:
        objective: SLO objective as a ratio (e.g. 0.98)
        error_rate_window: Average adjusted error rate over the whole window
        error_budget_remaining_window: (1 - objective) - error_rate_window;
            negative when the budget was exceeded
        error_budget_remaining_window_percent: Remaining budget as a fraction
            of the allotted budget; negative when the budget was exceeded
        data_points: Hourly data points in timestamp order
    """

    objective: float | None = None
    error_rate_window: float = 0.0
    error_budget_remaining_window: float | None = None
    error_budget_remaining_window_percent: float | None = None
    data_points: list[SliDataPoint] = field(default_factory=list)


@dataclass
class ClusterSliReport:
    """SLI report of all matching services of a cluster.

    Attributes:
        cluster_id: Cluster the report was generated for
        sli_data: Service label to service report
    """

    cluster_id: str
    sli_data: dict[str, ServiceSliReport] = field(default_factory=dict)
