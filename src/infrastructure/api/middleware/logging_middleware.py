"""Logging middleware for structured request/response logging.

Logs every HTTP request with its correlation ID, duration, and status code.
Probe and scrape requests are logged at debug level only.
"""

import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from src.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

QUIET_PATHS = frozenset({"/health", "/health/ready", "/metrics"})


class LoggingMiddleware(BaseHTTPMiddleware):
    """Middleware to log HTTP requests and responses.

    Logs:
    - Request method, path and client address
    - Upstream request ID (X-Request-ID) when present
    - Authenticated user
    - Response status code and duration
    """

    async def dispatch(
        self, request: Request, call_next: Callable
    ) -> Response:
        """Process request and log details.

        Args:
            request: Incoming HTTP request
            call_next: Next middleware/handler in chain

        Returns:
            HTTP response
        """
        start_time = time.perf_counter()
        log = logger.bind(
            method=request.method,
            path=request.url.path,
            client_ip=self._get_client_ip(request),
            request_id=request.headers.get("X-Request-ID"),
            correlation_id=getattr(request.state, "correlation_id", None),
        )

        try:
            response = await call_next(request)
        except Exception as e:
            log.error(
                "HTTP request failed",
                duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
                error=str(e),
            )
            raise

        emit = log.debug if request.url.path in QUIET_PATHS else log.info
        emit(
            "HTTP request completed",
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
            user=getattr(request.state, "client_id", None),
        )
        return response

    def _get_client_ip(self, request: Request) -> str:
        """Extract client IP address from request.

        Checks X-Forwarded-For header first (for proxy/load balancer),
        falls back to direct client address.
        """
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            return forwarded_for.split(",")[0].strip()

        if request.client:
            return request.client.host

        return "unknown"
