"""Error budget calculator for downtime-adjusted SLI reports.

Turns the hourly raw error rate series of a service into downtime-adjusted
data points and the aggregate error budget figures for the requested window.
"""

import logging
import math
from collections.abc import Iterable, Sequence

from src.domain.entities.downtime_window import DowntimeWindow
from src.domain.entities.metric_sample import SamplePair
from src.domain.entities.sli_report import ServiceSliReport, SliDataPoint
from src.domain.services.downtime_matcher import DowntimeMatcher

logger = logging.getLogger(__name__)


class ErrorBudgetCalculator:
    """Computes adjusted error rates and remaining error budget.

    Algorithm per service:
    1. Walk the hourly samples in timestamp order
    2. Treat NaN samples as 0
    3. Force samples inside a downtime window to 0
    4. Accumulate a running average over the total hours of the window
    5. Derive the window error rate and the remaining budget from the objective

    All averages divide by the total hours of the requested window, not by
    the number of samples: missing hours count as zero error rate.
    """

    def __init__(self, matcher: DowntimeMatcher | None = None):
        """Initialize calculator.

        Args:
            matcher: Downtime matcher (defaults to a new DowntimeMatcher)
        """
        self._matcher = matcher or DowntimeMatcher()

    def build_data_points(
        self,
        samples: Iterable[SamplePair],
        downtimes: Sequence[DowntimeWindow],
        total_hours: int,
    ) -> list[SliDataPoint]:
        """Build the downtime-adjusted hourly data points of a service.

        Args:
            samples: Raw hourly error rate samples (any order)
            downtimes: Downtime windows applicable to the cluster
            total_hours: Total hours of the requested window (> 0)

        Returns:
            Data points in timestamp order

        Raises:
            ValueError: If total_hours is not positive
        """
        if total_hours <= 0:
            raise ValueError(f"total_hours must be positive, got {total_hours}")

        data_points: list[SliDataPoint] = []
        running_sum = 0.0

        for pair in sorted(samples, key=lambda p: p.timestamp):
            raw = 0.0 if math.isnan(pair.value) else pair.value
            adjusted = raw
            if self._matcher.timestamp_in_downtime(pair.timestamp, downtimes):
                adjusted = 0.0

            running_sum += adjusted
            data_points.append(
                SliDataPoint(
                    timestamp=pair.timestamp,
                    error_rate_1h=adjusted,
                    real_error_rate_1h=raw,
                    cumulative_average_error_rate=running_sum / total_hours,
                )
            )

        return data_points

    def compute_report(
        self,
        data_points: list[SliDataPoint],
        objective: float | None,
        total_hours: int,
    ) -> ServiceSliReport:
        """Compute the aggregate error budget figures of a service.

        Args:
            data_points: Adjusted data points of the service
            objective: SLO objective ratio in [0, 1), or None if unknown
            total_hours: Total hours of the requested window (> 0)

        Returns:
            ServiceSliReport; budget fields are None when objective is None
        """
        if total_hours <= 0:
            raise ValueError(f"total_hours must be positive, got {total_hours}")

        error_rate_window = sum(dp.error_rate_1h for dp in data_points) / total_hours
        report = ServiceSliReport(
            error_rate_window=error_rate_window,
            data_points=data_points,
        )
        if objective is None:
            return report

        allotted_budget = 1.0 - objective
        report.objective = objective
        report.error_budget_remaining_window = allotted_budget - error_rate_window
        if allotted_budget > 0:
            report.error_budget_remaining_window_percent = (
                report.error_budget_remaining_window / allotted_budget
            )
        else:
            # Objective of 100% leaves no budget to take a fraction of
            logger.warning(
                "Objective %s leaves no error budget, skipping remaining percentage",
                objective,
            )

        return report
