"""Repository implementations module.

This module exports all repository implementations.
"""

from src.infrastructure.database.repositories.downtime_window_repository import (
    DowntimeWindowRepository,
)

__all__ = [
    "DowntimeWindowRepository",
]
