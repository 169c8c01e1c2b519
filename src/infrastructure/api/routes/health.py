"""
Health check endpoints.

Provides liveness and readiness probes for Kubernetes.
Also provides Prometheus metrics endpoint.
"""

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from src.infrastructure.database.health import check_database_health_with_session
from src.infrastructure.database.session import get_async_session
from src.infrastructure.observability.metrics import get_metrics_content

router = APIRouter()


@router.get(
    "/health",
    status_code=status.HTTP_200_OK,
    summary="Liveness probe",
    description="Check if the service is alive",
    tags=["Health"],
)
async def liveness() -> dict:
    """
    Liveness probe - check if the process is running.

    This endpoint always returns 200 if the process is alive.
    """
    return {
        "status": "healthy",
        "service": "sli-reporting",
    }


@router.get(
    "/health/ready",
    status_code=status.HTTP_200_OK,
    summary="Readiness probe",
    description="Check if the service is ready to accept traffic",
    tags=["Health"],
    responses={
        200: {"description": "Service is ready"},
        503: {"description": "Service is not ready (database unavailable)"},
    },
)
async def readiness(
    session: AsyncSession = Depends(get_async_session),
) -> JSONResponse:
    """
    Readiness probe - check if the service can handle requests.

    Only the database is checked: Prometheus and Lieutenant outages fail
    individual requests with 502 but do not take the pod out of rotation.
    """
    db_healthy = await check_database_health_with_session(session)
    checks = {"database": "healthy" if db_healthy else "unhealthy"}

    if db_healthy:
        return JSONResponse(
            status_code=status.HTTP_200_OK,
            content={"status": "ready", "checks": checks},
        )
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"status": "not_ready", "checks": checks},
    )


@router.get(
    "/metrics",
    status_code=status.HTTP_200_OK,
    summary="Prometheus metrics",
    description="Export Prometheus metrics in exposition format",
    tags=["Observability"],
    response_class=Response,
)
async def metrics() -> Response:
    """
    Prometheus metrics endpoint.

    Metrics include HTTP request counts and durations, downtime window
    writes and cluster report generation.
    """
    metrics_bytes, content_type = get_metrics_content()

    return Response(
        content=metrics_bytes,
        media_type=content_type,
    )
