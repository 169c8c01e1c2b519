"""Pydantic schemas for the cluster SLI report endpoint."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from src.domain.entities.sli_report import ClusterSliReport, ServiceSliReport


class SliDataPointApiModel(BaseModel):
    """Hourly data point of a service."""

    timestamp: datetime = Field(..., description="Sample timestamp as reported by Prometheus")
    error_rate_1h: float = Field(
        ..., description="Error rate of the past hour, zeroed during downtime"
    )
    real_error_rate_1h: float = Field(
        ..., description="Raw error rate of the past hour (NaN reported as 0)"
    )
    cumulative_average_error_rate: float = Field(
        ...,
        description="Sum of adjusted error rates so far divided by the window hours",
    )


class ServiceSliApiModel(BaseModel):
    """Error budget figures of one service.

    The objective and budget fields are null when no objective is known for
    the service.
    """

    objective: float | None = Field(None, description="SLO objective, e.g. 0.98")
    error_rate_window: float = Field(
        ..., description="Adjusted average error rate over the window"
    )
    error_budget_remaining_window: float | None = Field(
        None, description="(1 - objective) - error_rate_window; negative when exceeded"
    )
    error_budget_remaining_window_percent: float | None = Field(
        None, description="Remaining budget as a fraction of the allotted budget"
    )
    data_points: list[SliDataPointApiModel] = Field(default_factory=list)

    @classmethod
    def from_entity(cls, report: ServiceSliReport) -> "ServiceSliApiModel":
        return cls(
            objective=report.objective,
            error_rate_window=report.error_rate_window,
            error_budget_remaining_window=report.error_budget_remaining_window,
            error_budget_remaining_window_percent=report.error_budget_remaining_window_percent,
            data_points=[
                SliDataPointApiModel(
                    timestamp=dp.timestamp,
                    error_rate_1h=dp.error_rate_1h,
                    real_error_rate_1h=dp.real_error_rate_1h,
                    cumulative_average_error_rate=dp.cumulative_average_error_rate,
                )
                for dp in report.data_points
            ],
        )


class QueryClusterApiResponse(BaseModel):
    """SLI report of a cluster keyed by service."""

    cluster_id: str = Field(..., description="Cluster identifier")
    sli_data: dict[str, ServiceSliApiModel] = Field(
        default_factory=dict, description="Report per sloth_service label"
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "cluster_id": "c-green-test-1234",
                "sli_data": {
                    "ingress": {
                        "objective": 0.98,
                        "error_rate_window": 0.0188,
                        "error_budget_remaining_window": 0.0012,
                        "error_budget_remaining_window_percent": 0.059,
                        "data_points": [
                            {
                                "timestamp": "2020-01-01T00:00:00Z",
                                "error_rate_1h": 1.0,
                                "real_error_rate_1h": 1.0,
                                "cumulative_average_error_rate": 0.0013,
                            }
                        ],
                    }
                },
            }
        }
    )

    @classmethod
    def from_entity(cls, report: ClusterSliReport) -> "QueryClusterApiResponse":
        """Build the API representation of a cluster report."""
        return cls(
            cluster_id=report.cluster_id,
            sli_data={
                service: ServiceSliApiModel.from_entity(service_report)
                for service, service_report in report.sli_data.items()
            },
        )
