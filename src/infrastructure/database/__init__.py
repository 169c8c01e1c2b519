"""Database infrastructure for downtime window persistence.

This package contains:
- SQLAlchemy models
- Repository implementations
- Database configuration and session management
"""

from src.infrastructure.database.models import (
    Base,
    DowntimeWindowModel,
    UtcDateTime,
)

__all__ = [
    "Base",
    "DowntimeWindowModel",
    "UtcDateTime",
]
