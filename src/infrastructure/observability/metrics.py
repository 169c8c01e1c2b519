"""Prometheus metrics instrumentation.

Defines and exports Prometheus metrics for monitoring the application.
Avoids high cardinality by omitting cluster and window IDs from labels.
"""

from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

# HTTP Request Metrics
http_requests_total = Counter(
    name="sli_reporting_http_requests_total",
    documentation="Total number of HTTP requests",
    labelnames=["method", "endpoint", "status_code"],
)

http_request_duration_seconds = Histogram(
    name="sli_reporting_http_request_duration_seconds",
    documentation="HTTP request duration in seconds",
    labelnames=["method", "endpoint", "status_code"],
    buckets=(
        0.005,  # 5ms
        0.01,  # 10ms
        0.025,  # 25ms
        0.05,  # 50ms
        0.1,  # 100ms
        0.25,  # 250ms
        0.5,  # 500ms
        1.0,  # 1s
        2.5,  # 2.5s
        5.0,  # 5s
        10.0,  # 10s
    ),
)

# Downtime Window Metrics
downtime_window_writes_total = Counter(
    name="sli_reporting_downtime_window_writes_total",
    documentation="Total number of downtime window writes",
    labelnames=["operation"],  # create, update, patch
)

# Report Metrics
cluster_reports_total = Counter(
    name="sli_reporting_cluster_reports_total",
    documentation="Total number of cluster SLI report requests",
    labelnames=["status"],  # success, failure
)

cluster_report_duration_seconds = Histogram(
    name="sli_reporting_cluster_report_duration_seconds",
    documentation="Cluster SLI report generation duration in seconds",
    buckets=(
        0.05,  # 50ms
        0.1,  # 100ms
        0.25,  # 250ms
        0.5,  # 500ms
        1.0,  # 1s
        2.5,  # 2.5s
        5.0,  # 5s
        10.0,  # 10s
        30.0,  # 30s
    ),
)

cluster_report_services = Histogram(
    name="sli_reporting_cluster_report_services",
    documentation="Number of services contained in a cluster SLI report",
    buckets=(0, 1, 2, 5, 10, 25, 50, 100),
)


def get_metrics_content() -> tuple[bytes, str]:
    """Generate Prometheus metrics in exposition format.

    Returns:
        Tuple of (metrics_bytes, content_type)
    """
    return generate_latest(), CONTENT_TYPE_LATEST


def record_http_request(
    method: str,
    endpoint: str,
    status_code: int,
    duration: float,
) -> None:
    """Record HTTP request metrics.

    Args:
        method: HTTP method (GET, POST, etc.)
        endpoint: API route template
        status_code: HTTP status code
        duration: Request duration in seconds
    """
    http_requests_total.labels(
        method=method,
        endpoint=endpoint,
        status_code=str(status_code),
    ).inc()

    http_request_duration_seconds.labels(
        method=method,
        endpoint=endpoint,
        status_code=str(status_code),
    ).observe(duration)


def record_downtime_window_write(operation: str) -> None:
    """Record a successful downtime window write.

    Args:
        operation: Write operation (create, update, patch)
    """
    downtime_window_writes_total.labels(operation=operation).inc()


def record_cluster_report(
    status: str,
    duration: float,
    services: int = 0,
) -> None:
    """Record cluster SLI report metrics.

    Args:
        status: Report status (success or failure)
        duration: Generation duration in seconds
        services: Number of services in the report (success only)
    """
    cluster_reports_total.labels(status=status).inc()
    cluster_report_duration_seconds.observe(duration)
    if status == "success":
        cluster_report_services.observe(services)
