"""Use cases - Application-specific business rules.

This package contains use cases that orchestrate domain logic
and implement application-specific workflows.
"""

from src.application.use_cases.manage_downtime_windows import (
    ManageDowntimeWindowsUseCase,
)
from src.application.use_cases.query_cluster_sli import QueryClusterSliUseCase

__all__ = [
    "ManageDowntimeWindowsUseCase",
    "QueryClusterSliUseCase",
]
