"""Downtime window API routes.

Implements listing, cluster-scoped listing, creation, full update and
partial update of planned downtime windows.
"""

from fastapi import APIRouter, Depends, Path, Query, status

from src.application.use_cases.manage_downtime_windows import (
    ManageDowntimeWindowsUseCase,
)
from src.infrastructure.api.dependencies import get_manage_downtime_windows_use_case
from src.infrastructure.api.middleware.auth import verify_basic_auth
from src.infrastructure.api.schemas.downtime_schema import DowntimeWindowApiModel
from src.infrastructure.api.schemas.error_schema import ProblemDetails
from src.infrastructure.api.time_params import parse_time_param
from src.infrastructure.observability.logging import get_logger
from src.infrastructure.observability.metrics import record_downtime_window_write

logger = get_logger(__name__)

router = APIRouter(dependencies=[Depends(verify_basic_auth)])

ERROR_RESPONSES = {
    400: {"model": ProblemDetails, "description": "Invalid request"},
    401: {"model": ProblemDetails, "description": "Missing or invalid credentials"},
}


@router.get(
    "",
    response_model=list[DowntimeWindowApiModel],
    summary="List downtime windows",
    description="List all downtime windows overlapping [from, to)",
    responses=ERROR_RESPONSES,
)
async def list_downtime(
    from_: str | None = Query(None, alias="from", description="Interval start (RFC 3339)"),
    to: str | None = Query(None, description="Interval end (RFC 3339)"),
    use_case: ManageDowntimeWindowsUseCase = Depends(
        get_manage_downtime_windows_use_case
    ),
) -> list[DowntimeWindowApiModel]:
    """List downtime windows in a time interval."""
    windows = await use_case.list_windows(
        parse_time_param("from", from_), parse_time_param("to", to)
    )
    return [DowntimeWindowApiModel.from_entity(w) for w in windows]


@router.get(
    "/cluster/{cluster_id}",
    response_model=list[DowntimeWindowApiModel],
    summary="List downtime windows of a cluster",
    description=(
        "List downtime windows overlapping [from, to) whose matchers match "
        "the facts of the cluster"
    ),
    responses={
        **ERROR_RESPONSES,
        502: {"model": ProblemDetails, "description": "Cluster facts unavailable"},
    },
)
async def list_downtime_for_cluster(
    cluster_id: str = Path(..., description="Cluster identifier"),
    from_: str | None = Query(None, alias="from", description="Interval start (RFC 3339)"),
    to: str | None = Query(None, description="Interval end (RFC 3339)"),
    use_case: ManageDowntimeWindowsUseCase = Depends(
        get_manage_downtime_windows_use_case
    ),
) -> list[DowntimeWindowApiModel]:
    """List downtime windows affecting a cluster."""
    windows = await use_case.list_windows_matching_cluster_facts(
        parse_time_param("from", from_), parse_time_param("to", to), cluster_id
    )
    return [DowntimeWindowApiModel.from_entity(w) for w in windows]


@router.post(
    "",
    response_model=DowntimeWindowApiModel,
    status_code=status.HTTP_201_CREATED,
    summary="Create a downtime window",
    description=(
        "Store a new downtime window. If another window carries the same "
        "external_id, that window is updated instead."
    ),
    responses=ERROR_RESPONSES,
)
async def create_downtime(
    body: DowntimeWindowApiModel,
    use_case: ManageDowntimeWindowsUseCase = Depends(
        get_manage_downtime_windows_use_case
    ),
) -> DowntimeWindowApiModel:
    """Create (or idempotently update by external ID) a downtime window."""
    window = await use_case.store_new_window(body.to_entity())
    record_downtime_window_write("create")
    logger.info("Downtime window stored", window_id=window.id, external_id=window.external_id)
    return DowntimeWindowApiModel.from_entity(window)


@router.get(
    "/{window_id}",
    response_model=DowntimeWindowApiModel,
    summary="Get a downtime window",
    responses={
        **ERROR_RESPONSES,
        404: {"model": ProblemDetails, "description": "Window not found"},
    },
)
async def get_downtime(
    window_id: str = Path(..., description="Window identifier"),
    use_case: ManageDowntimeWindowsUseCase = Depends(
        get_manage_downtime_windows_use_case
    ),
) -> DowntimeWindowApiModel:
    """Get a downtime window by ID."""
    window = await use_case.get_window(window_id)
    return DowntimeWindowApiModel.from_entity(window)


@router.post(
    "/{window_id}",
    response_model=DowntimeWindowApiModel,
    summary="Replace a downtime window",
    description="Replace all fields of an existing downtime window",
    responses={
        **ERROR_RESPONSES,
        404: {"model": ProblemDetails, "description": "Window not found"},
        409: {"model": ProblemDetails, "description": "external_id used by another window"},
    },
)
async def update_downtime(
    body: DowntimeWindowApiModel,
    window_id: str = Path(..., description="Window identifier"),
    use_case: ManageDowntimeWindowsUseCase = Depends(
        get_manage_downtime_windows_use_case
    ),
) -> DowntimeWindowApiModel:
    """Fully update a downtime window."""
    window = await use_case.update_window(body.to_entity(window_id))
    record_downtime_window_write("update")
    logger.info("Downtime window updated", window_id=window.id)
    return DowntimeWindowApiModel.from_entity(window)


@router.patch(
    "/{window_id}",
    response_model=DowntimeWindowApiModel,
    summary="Patch a downtime window",
    description=(
        "Apply the non-empty fields of the body to an existing downtime window. "
        "Timestamps can be changed but not removed."
    ),
    responses={
        **ERROR_RESPONSES,
        404: {"model": ProblemDetails, "description": "Window not found"},
        409: {"model": ProblemDetails, "description": "external_id used by another window"},
    },
)
async def patch_downtime(
    body: DowntimeWindowApiModel,
    window_id: str = Path(..., description="Window identifier"),
    use_case: ManageDowntimeWindowsUseCase = Depends(
        get_manage_downtime_windows_use_case
    ),
) -> DowntimeWindowApiModel:
    """Partially update a downtime window."""
    window = await use_case.patch_window(body.to_entity(window_id))
    record_downtime_window_write("patch")
    logger.info("Downtime window patched", window_id=window.id)
    return DowntimeWindowApiModel.from_entity(window)
