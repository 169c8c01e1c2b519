"""Metrics middleware for recording HTTP request metrics.

Records Prometheus metrics for all HTTP requests including duration,
status codes, and endpoints.
"""

import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from src.infrastructure.observability.metrics import record_http_request

UNMATCHED_ENDPOINT = "unmatched"


class MetricsMiddleware(BaseHTTPMiddleware):
    """Middleware to record HTTP request metrics.

    Labels: method, endpoint, status_code
    Note: endpoint is the route template (e.g. /downtime/{window_id}), never
    the concrete path, to keep cluster and window IDs out of the labels
    """

    async def dispatch(
        self, request: Request, call_next: Callable
    ) -> Response:
        """Process request and record metrics.

        Args:
            request: Incoming HTTP request
            call_next: Next middleware/handler in chain

        Returns:
            HTTP response
        """
        start_time = time.perf_counter()

        response = await call_next(request)

        record_http_request(
            method=request.method,
            endpoint=self._route_template(request),
            status_code=response.status_code,
            duration=time.perf_counter() - start_time,
        )

        return response

    def _route_template(self, request: Request) -> str:
        """Return the path template of the matched route.

        Requests that matched no route share a single label value.
        """
        route = request.scope.get("route")
        return getattr(route, "path", UNMATCHED_ENDPOINT)
