"""Global error handling middleware.

Converts all exceptions to RFC 7807 Problem Details format for consistent error responses.
Includes correlation IDs for request tracing.
"""

import logging
import uuid

from fastapi import Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, OperationalError
from starlette.exceptions import HTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from src.domain.exceptions import (
    ExternalIdConflictError,
    InternalError,
    NotFoundError,
    UpstreamError,
    ValidationError,
)
from src.infrastructure.api.schemas.error_schema import ProblemDetails

logger = logging.getLogger(__name__)

STATUS_TEXTS = {
    400: "Bad Request",
    401: "Unauthorized",
    403: "Forbidden",
    404: "Not Found",
    405: "Method Not Allowed",
    409: "Conflict",
    422: "Unprocessable Entity",
    500: "Internal Server Error",
    502: "Bad Gateway",
    503: "Service Unavailable",
}

# Checked in order; subclasses must come before their bases
DOMAIN_ERROR_STATUS: list[tuple[type[Exception], int]] = [
    (ExternalIdConflictError, status.HTTP_409_CONFLICT),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (UpstreamError, status.HTTP_502_BAD_GATEWAY),
    (InternalError, status.HTTP_500_INTERNAL_SERVER_ERROR),
]


def get_correlation_id(request: Request) -> str:
    """Return the request's correlation ID, assigning one if missing."""
    correlation_id = getattr(request.state, "correlation_id", None)
    if not correlation_id:
        correlation_id = str(uuid.uuid4())
        request.state.correlation_id = correlation_id
    return correlation_id


def exception_to_problem(
    exc: Exception, request: Request, correlation_id: str
) -> ProblemDetails:
    """Convert exception to RFC 7807 Problem Details.

    Args:
        exc: Exception that was raised
        request: Request that caused the exception
        correlation_id: Correlation ID for tracing

    Returns:
        ProblemDetails object
    """
    if isinstance(exc, HTTPException):
        return problem(
            exc.status_code,
            exc.detail if isinstance(exc.detail, str) else str(exc.detail),
            request,
            correlation_id,
            type_="about:blank",
        )

    for error_type, status_code in DOMAIN_ERROR_STATUS:
        if isinstance(exc, error_type):
            detail = str(exc)
            if status_code == status.HTTP_500_INTERNAL_SERVER_ERROR:
                detail = "An internal error occurred"
            return problem(status_code, detail, request, correlation_id)

    if isinstance(exc, IntegrityError):
        # Database constraint violation
        return problem(
            status.HTTP_409_CONFLICT,
            "Resource conflict or constraint violation",
            request,
            correlation_id,
        )

    if isinstance(exc, OperationalError):
        # Database connection/operational error
        return problem(
            status.HTTP_503_SERVICE_UNAVAILABLE,
            "Database is temporarily unavailable",
            request,
            correlation_id,
        )

    return problem(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "An unexpected error occurred",
        request,
        correlation_id,
    )


def problem(
    status_code: int,
    detail: str,
    request: Request,
    correlation_id: str,
    type_: str | None = None,
) -> ProblemDetails:
    """Build a ProblemDetails object for a status code."""
    return ProblemDetails(
        type=type_ or f"https://httpstatuses.com/{status_code}",
        title=STATUS_TEXTS.get(status_code, "Error"),
        status=status_code,
        detail=detail,
        instance=request.url.path,
        correlation_id=correlation_id,
    )


def problem_response(
    problem_details: ProblemDetails, headers: dict[str, str] | None = None
) -> JSONResponse:
    """Create JSONResponse from ProblemDetails.

    Args:
        problem_details: Problem Details object
        headers: Extra response headers (e.g. WWW-Authenticate)

    Returns:
        JSONResponse with appropriate status code and headers
    """
    return JSONResponse(
        status_code=problem_details.status,
        content=problem_details.model_dump(exclude_none=True),
        media_type="application/problem+json",
        headers={
            **(headers or {}),
            "X-Correlation-ID": problem_details.correlation_id or "",
        },
    )


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Middleware to handle all exceptions and return RFC 7807 Problem Details."""

    async def dispatch(self, request: Request, call_next):
        """Catch all exceptions and convert to Problem Details format.

        Args:
            request: Incoming HTTP request
            call_next: Next middleware/handler in chain

        Returns:
            Response with Problem Details format on error
        """
        correlation_id = get_correlation_id(request)

        try:
            response = await call_next(request)
            response.headers["X-Correlation-ID"] = correlation_id
            return response

        except Exception as exc:
            logger.error(
                f"Request failed with correlation_id={correlation_id}",
                exc_info=exc,
                extra={
                    "correlation_id": correlation_id,
                    "path": request.url.path,
                    "method": request.method,
                },
            )
            return problem_response(
                exception_to_problem(exc, request, correlation_id)
            )
