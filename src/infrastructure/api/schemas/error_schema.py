"""
RFC 7807 Problem Details error response schemas.

Implements standard error response format for the API.
"""

from pydantic import BaseModel, ConfigDict, Field


class ProblemDetails(BaseModel):
    """
    RFC 7807 Problem Details for HTTP APIs.

    Standard error response format that provides machine-readable details
    about errors in a consistent structure.
    """

    type: str = Field(
        ...,
        description="URI reference that identifies the problem type",
        examples=["https://httpstatuses.com/400"],
    )
    title: str = Field(..., description="Short, human-readable summary of the problem")
    status: int = Field(..., description="HTTP status code", ge=100, le=599)
    detail: str = Field(
        ..., description="Human-readable explanation specific to this occurrence"
    )
    instance: str = Field(
        ..., description="URI reference that identifies the specific occurrence"
    )
    correlation_id: str | None = Field(
        None, description="Correlation ID for request tracing"
    )

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "type": "https://httpstatuses.com/400",
                    "title": "Bad Request",
                    "status": 400,
                    "detail": "end time must be after start time",
                    "instance": "/downtime",
                },
                {
                    "type": "https://httpstatuses.com/409",
                    "title": "Conflict",
                    "status": 409,
                    "detail": "external ID 'CHG-1234' conflicts with existing downtime window '4c1f...'",
                    "instance": "/downtime/0b8a...",
                },
                {
                    "type": "https://httpstatuses.com/502",
                    "title": "Bad Gateway",
                    "status": 502,
                    "detail": "Failed to connect to Prometheus: connection refused",
                    "instance": "/query/cluster/c-green-test-1234",
                },
            ]
        }
    )
