"""Cluster SLI report API route."""

import time

from fastapi import APIRouter, Depends, Path, Query

from src.application.dtos.sli_report_dto import DEFAULT_SERVICE_FILTER, QueryClusterRequest
from src.application.use_cases.query_cluster_sli import QueryClusterSliUseCase
from src.infrastructure.api.dependencies import get_query_cluster_sli_use_case
from src.infrastructure.api.middleware.auth import verify_basic_auth
from src.infrastructure.api.schemas.error_schema import ProblemDetails
from src.infrastructure.api.schemas.sli_report_schema import QueryClusterApiResponse
from src.infrastructure.api.time_params import parse_time_param
from src.infrastructure.observability.metrics import record_cluster_report

router = APIRouter(dependencies=[Depends(verify_basic_auth)])


@router.get(
    "/cluster/{cluster_id}",
    response_model=QueryClusterApiResponse,
    summary="Get the SLI report of a cluster",
    description=(
        "Compute downtime-adjusted error rates and remaining error budget per "
        "service over [from, to), both truncated to the hour"
    ),
    responses={
        400: {"model": ProblemDetails, "description": "Invalid or too narrow time window"},
        401: {"model": ProblemDetails, "description": "Missing or invalid credentials"},
        502: {"model": ProblemDetails, "description": "Prometheus or Lieutenant failed"},
    },
)
async def query_cluster(
    cluster_id: str = Path(..., description="Cluster identifier"),
    from_: str | None = Query(None, alias="from", description="Window start (RFC 3339)"),
    to: str | None = Query(None, description="Window end (RFC 3339)"),
    service_filter: str | None = Query(
        None,
        alias="filter",
        description="Regular expression over the sloth_service label (default .*)",
    ),
    use_case: QueryClusterSliUseCase = Depends(get_query_cluster_sli_use_case),
) -> QueryClusterApiResponse:
    """Generate the SLI report of a cluster."""
    request = QueryClusterRequest(
        cluster_id=cluster_id,
        from_=parse_time_param("from", from_),
        to=parse_time_param("to", to),
        service_filter=service_filter or DEFAULT_SERVICE_FILTER,
    )

    start = time.perf_counter()
    try:
        report = await use_case.execute(request)
    except Exception:
        record_cluster_report("failure", time.perf_counter() - start)
        raise

    record_cluster_report(
        "success", time.perf_counter() - start, services=len(report.sli_data)
    )
    return QueryClusterApiResponse.from_entity(report)
