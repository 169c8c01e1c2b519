"""Downtime window repository interface module.

This module defines the abstract persistence contract for DowntimeWindow entities.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.domain.entities.downtime_window import DowntimeWindow


class DowntimeWindowRepositoryInterface(ABC):
    """Repository interface for DowntimeWindow persistence.

    Implementations must enforce uniqueness of non-empty external IDs at the
    storage level, so that concurrent writers can never store two windows
    with the same external ID.
    """

    @abstractmethod
    async def get_by_id(self, window_id: str) -> "DowntimeWindow | None":
        """Get a downtime window by its ID.

        Args:
            window_id: Window identifier

        Returns:
            DowntimeWindow if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_by_external_id(self, external_id: str) -> "DowntimeWindow | None":
        """Get the downtime window carrying the given external ID.

        Args:
            external_id: Non-empty external reference

        Returns:
            DowntimeWindow if found, None otherwise
        """
        pass

    @abstractmethod
    async def add(self, window: "DowntimeWindow") -> "DowntimeWindow":
        """Insert a new downtime window.

        Args:
            window: Window with an assigned ID

        Returns:
            The stored window as read back from storage

        Raises:
            ExternalIdConflictError: If the external ID is already stored
        """
        pass

    @abstractmethod
    async def replace(self, window: "DowntimeWindow") -> "DowntimeWindow":
        """Fully replace the stored window with the same ID.

        Args:
            window: Window with the new field values

        Returns:
            The stored window as read back from storage

        Raises:
            NotFoundError: If no window with this ID exists
            ExternalIdConflictError: If the external ID is used by another window
        """
        pass

    @abstractmethod
    async def list_overlapping(
        self, from_: datetime, to: datetime
    ) -> list["DowntimeWindow"]:
        """List windows overlapping the half-open interval [from_, to).

        A window overlaps if (end_time is unset or end_time > from_) and
        start_time < to.

        Args:
            from_: Interval start (inclusive)
            to: Interval end (exclusive)

        Returns:
            Overlapping windows ordered by start time
        """
        pass
