"""DTOs for cluster SLI error budget reports."""

from dataclasses import dataclass
from datetime import datetime

DEFAULT_SERVICE_FILTER = ".*"


@dataclass
class QueryClusterRequest:
    """Request for an SLI report of a cluster.

    Attributes:
        cluster_id: Cluster to report on
        from_: Window start (timezone-aware, truncated to the hour)
        to: Window end (timezone-aware, truncated to the hour)
        service_filter: Regular expression over the service label
    """

    cluster_id: str
    from_: datetime
    to: datetime
    service_filter: str = DEFAULT_SERVICE_FILTER
