"""Prometheus HTTP API integration.

This module provides a client for the query endpoints of a Prometheus
compatible metrics backend (Prometheus, Thanos, Mimir, Cortex).

Responses follow the Prometheus HTTP API envelope:
- {"status": "success", "data": {"resultType": "matrix", "result": [...]}}
- {"status": "error", "errorType": "bad_data", "error": "..."}

Sample values are transmitted as strings and may be "NaN" or "+Inf".
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any

import httpx

from src.domain.entities.metric_sample import (
    InstantVector,
    MetricSample,
    MetricSeries,
    QueryResult,
    RangeMatrix,
    SamplePair,
    ScalarResult,
    StringResult,
)
from src.domain.exceptions import UpstreamError
from src.domain.repositories.metrics_query_service import MetricsQueryServiceInterface

logger = logging.getLogger(__name__)


class PrometheusQueryError(UpstreamError):
    """Prometheus rejected a query or could not be reached."""

    pass


class InvalidQueryResultError(PrometheusQueryError):
    """Prometheus response is malformed."""

    pass


def _parse_timestamp(raw: Any) -> datetime:
    return datetime.fromtimestamp(float(raw), tz=timezone.utc)


def _parse_pair(raw: Any) -> tuple[datetime, float]:
    ts, value = raw
    return _parse_timestamp(ts), float(value)


def parse_query_result(data: dict[str, Any]) -> QueryResult:
    """Parse the ``data`` member of a successful query response.

    Args:
        data: Decoded ``data`` object with ``resultType`` and ``result``

    Returns:
        Typed query result

    Raises:
        InvalidQueryResultError: If the result type is unknown or malformed
    """
    result_type = data.get("resultType")
    result = data.get("result")

    try:
        if result_type == "vector":
            samples = []
            for item in result:
                ts, value = _parse_pair(item["value"])
                samples.append(
                    MetricSample(labels=dict(item.get("metric", {})), timestamp=ts, value=value)
                )
            return InstantVector(samples=samples)

        if result_type == "matrix":
            series = []
            for item in result:
                values = [SamplePair(*_parse_pair(pair)) for pair in item.get("values", [])]
                series.append(MetricSeries(labels=dict(item.get("metric", {})), values=values))
            return RangeMatrix(series=series)

        if result_type == "scalar":
            ts, value = _parse_pair(result)
            return ScalarResult(timestamp=ts, value=value)

        if result_type == "string":
            ts, value = result
            return StringResult(timestamp=_parse_timestamp(ts), value=str(value))

    except (KeyError, TypeError, ValueError) as e:
        raise InvalidQueryResultError(
            f"Malformed {result_type} result from Prometheus: {e}"
        ) from e

    raise InvalidQueryResultError(f"Unknown Prometheus result type: {result_type!r}")


class PrometheusMetricsClient(MetricsQueryServiceInterface):
    """Client for the Prometheus instant and range query endpoints.

    Queries are not retried; the only deadline is the HTTP client timeout.

    Attributes:
        prometheus_url: Prometheus server URL
        timeout: Query timeout in seconds
    """

    def __init__(
        self,
        prometheus_url: str = "http://localhost:9090",
        timeout: float = 30.0,
        headers: dict[str, str] | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the Prometheus client.

        Args:
            prometheus_url: Prometheus server URL
            timeout: Query timeout in seconds
            headers: Extra headers sent with every request (e.g. X-Scope-OrgID)
            client: Preconfigured HTTP client (built from the other arguments if omitted)
        """
        self.prometheus_url = prometheus_url.rstrip("/")
        self.timeout = timeout
        self.client = client or httpx.AsyncClient(
            timeout=self.timeout, headers=headers or {}
        )

    async def close(self) -> None:
        """Close the HTTP client connection."""
        await self.client.aclose()

    async def __aenter__(self) -> "PrometheusMetricsClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Async context manager exit."""
        await self.close()

    async def query(self, expr: str, ts: datetime) -> QueryResult:
        """Evaluate an instant query.

        Args:
            expr: PromQL expression
            ts: Evaluation timestamp

        Returns:
            Typed query result (normally an InstantVector)

        Raises:
            PrometheusQueryError: If the query fails
        """
        return await self._get(
            "/api/v1/query", {"query": expr, "time": ts.timestamp()}
        )

    async def query_range(
        self, expr: str, start: datetime, end: datetime, step: timedelta
    ) -> QueryResult:
        """Evaluate a range query.

        Args:
            expr: PromQL expression
            start: Range start (inclusive)
            end: Range end (inclusive)
            step: Resolution step

        Returns:
            Typed query result (normally a RangeMatrix)

        Raises:
            PrometheusQueryError: If the query fails
        """
        return await self._get(
            "/api/v1/query_range",
            {
                "query": expr,
                "start": start.timestamp(),
                "end": end.timestamp(),
                "step": step.total_seconds(),
            },
        )

    async def _get(self, path: str, params: dict[str, Any]) -> QueryResult:
        """Send a query request and decode the response envelope.

        Args:
            path: API path
            params: Query parameters

        Returns:
            Typed query result

        Raises:
            PrometheusQueryError: If Prometheus is unreachable or rejects the query
            InvalidQueryResultError: If the response is malformed
        """
        url = f"{self.prometheus_url}{path}"
        try:
            response = await self.client.get(url, params=params)
        except httpx.RequestError as e:
            logger.error("Prometheus connection error: %s", str(e))
            raise PrometheusQueryError(f"Failed to connect to Prometheus: {e}") from e

        try:
            body = response.json()
        except ValueError:
            body = None

        if isinstance(body, dict) and body.get("status") == "error":
            error_msg = f"{body.get('errorType', 'unknown')}: {body.get('error', '')}"
            logger.error(
                "Prometheus query failed: status_code=%s error=%s query=%s",
                response.status_code,
                error_msg,
                params.get("query"),
            )
            raise PrometheusQueryError(f"Prometheus query failed: {error_msg}")

        if response.is_error:
            logger.error(
                "Prometheus HTTP error: status_code=%s", response.status_code
            )
            raise PrometheusQueryError(
                f"Prometheus returned error: {response.status_code}"
            )

        if not isinstance(body, dict) or body.get("status") != "success":
            raise InvalidQueryResultError("Prometheus returned an invalid response body")

        for warning in body.get("warnings", []):
            logger.warning("Prometheus query warning: %s", warning)

        return parse_query_result(body.get("data", {}))
