"""Use case for generating downtime-adjusted SLI reports of a cluster."""

import logging
import math
from datetime import UTC, datetime, timedelta

from src.application.dtos.sli_report_dto import QueryClusterRequest
from src.application.use_cases.manage_downtime_windows import (
    ManageDowntimeWindowsUseCase,
)
from src.domain.entities.metric_sample import InstantVector, RangeMatrix, SamplePair
from src.domain.entities.sli_report import ClusterSliReport
from src.domain.exceptions import UpstreamError, ValidationError
from src.domain.repositories.metrics_query_service import MetricsQueryServiceInterface
from src.domain.services.error_budget_calculator import ErrorBudgetCalculator

logger = logging.getLogger(__name__)

SERVICE_LABEL = "sloth_service"
ERROR_RATE_METRIC = "slo:sli_error:ratio_rate1h"
OBJECTIVE_METRIC = "slo:objective:ratio"
STEP = timedelta(hours=1)


def truncate_to_hour(ts: datetime) -> datetime:
    """Convert a timezone-aware timestamp to UTC and truncate it to the hour."""
    if ts.tzinfo is None:
        raise ValidationError("timestamps must be timezone-aware")
    return ts.astimezone(UTC).replace(minute=0, second=0, microsecond=0)


def _escape_label_value(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")


def build_selector(metric: str, cluster_id: str, service_filter: str) -> str:
    """Build the PromQL selector of a cluster's SLO series.

    Example:
        >>> build_selector("slo:objective:ratio", "c-1", ".*")
        'slo:objective:ratio{cluster_id="c-1",sloth_service=~".*"}'
    """
    return (
        f'{metric}{{cluster_id="{_escape_label_value(cluster_id)}",'
        f'{SERVICE_LABEL}=~"{_escape_label_value(service_filter)}"}}'
    )


class QueryClusterSliUseCase:
    """Generate the SLI error budget report of a cluster.

    Flow:
    1. Truncate the window to whole hours (UTC) and require at least one hour
    2. Load the downtime windows that affect the cluster
    3. Range-query the hourly error rate per service
    4. Instant-query the objective per service at the window end
    5. Adjust error rates for downtime and compute remaining budget per service

    A failure in any step fails the whole report.
    """

    def __init__(
        self,
        downtime_store: ManageDowntimeWindowsUseCase,
        metrics_service: MetricsQueryServiceInterface,
        calculator: ErrorBudgetCalculator | None = None,
    ):
        """Initialize use case with dependencies.

        Args:
            downtime_store: Source of downtime windows applicable to a cluster
            metrics_service: Prometheus-compatible query backend
            calculator: Error budget calculator (defaults to a new instance)
        """
        self.downtime_store = downtime_store
        self.metrics_service = metrics_service
        self.calculator = calculator or ErrorBudgetCalculator()

    async def execute(self, request: QueryClusterRequest) -> ClusterSliReport:
        """Execute the report generation.

        Args:
            request: Cluster, time window and service filter

        Returns:
            ClusterSliReport keyed by service label

        Raises:
            ValidationError: If the window is naive or shorter than one hour
            UpstreamError: If a backend fails or returns an unexpected shape
        """
        from_ = truncate_to_hour(request.from_)
        to = truncate_to_hour(request.to)
        if to - from_ < STEP:
            raise ValidationError(
                "the queried time window must be at least one hour after truncation"
            )
        total_hours = int((to - from_) / STEP)

        downtimes = await self.downtime_store.list_windows_matching_cluster_facts(
            from_, to, request.cluster_id
        )

        matrix = await self.metrics_service.query_range(
            build_selector(ERROR_RATE_METRIC, request.cluster_id, request.service_filter),
            from_,
            to,
            STEP,
        )
        if not isinstance(matrix, RangeMatrix):
            raise UpstreamError(
                f"expected a matrix from the error rate query, got {matrix.result_type}"
            )

        objectives_result = await self.metrics_service.query(
            build_selector(OBJECTIVE_METRIC, request.cluster_id, request.service_filter),
            to,
        )
        if not isinstance(objectives_result, InstantVector):
            raise UpstreamError(
                "expected a vector from the objective query, "
                f"got {objectives_result.result_type}"
            )

        objectives = self._objectives_by_service(objectives_result)
        samples_by_service = self._samples_by_service(matrix)

        report = ClusterSliReport(cluster_id=request.cluster_id)
        for service, samples in samples_by_service.items():
            data_points = self.calculator.build_data_points(samples, downtimes, total_hours)
            objective = objectives.get(service)
            if objective is None:
                logger.warning(
                    f"No objective found for service {service} on cluster "
                    f"{request.cluster_id}, skipping error budget"
                )
            report.sli_data[service] = self.calculator.compute_report(
                data_points, objective, total_hours
            )

        logger.info(
            f"Generated SLI report for cluster {request.cluster_id}: "
            f"{len(report.sli_data)} services, {len(downtimes)} downtime windows, "
            f"{total_hours}h"
        )
        return report

    @staticmethod
    def _samples_by_service(matrix: RangeMatrix) -> dict[str, list[SamplePair]]:
        """Concatenate the points of all series of each service.

        A service may be backed by several series, e.g. one per SLO.

        Raises:
            UpstreamError: If a series carries an infinite error rate
        """
        samples: dict[str, list[SamplePair]] = {}
        for series in matrix.series:
            service = series.labels.get(SERVICE_LABEL)
            if not service:
                logger.warning(
                    f"Skipping error rate series without {SERVICE_LABEL} label: {series.labels}"
                )
                continue
            if any(math.isinf(pair.value) for pair in series.values):
                raise UpstreamError(
                    f"error rate series of service {service} contains an infinite value: "
                    f"{series.labels}"
                )
            samples.setdefault(service, []).extend(series.values)
        return samples

    @staticmethod
    def _objectives_by_service(vector: InstantVector) -> dict[str, float]:
        objectives: dict[str, float] = {}
        for sample in vector.samples:
            service = sample.labels.get(SERVICE_LABEL)
            if not service:
                logger.warning(
                    f"Skipping objective sample without {SERVICE_LABEL} label: {sample.labels}"
                )
                continue
            objectives[service] = sample.value
        return objectives
