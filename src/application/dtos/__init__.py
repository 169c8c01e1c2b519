"""Application layer DTOs.

This package contains data transfer objects (DTOs) for the application layer.
Uses dataclasses (not Pydantic) per Clean Architecture principles.
"""

from src.application.dtos.sli_report_dto import (
    DEFAULT_SERVICE_FILTER,
    QueryClusterRequest,
)

__all__ = [
    "DEFAULT_SERVICE_FILTER",
    "QueryClusterRequest",
]
