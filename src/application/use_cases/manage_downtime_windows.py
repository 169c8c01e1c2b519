"""Use case for managing planned downtime windows.

Implements creation with idempotent upsert by external ID, full updates,
partial patches, interval listing and cluster-scoped listing.
"""

import logging
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime
from uuid import uuid4

from src.domain.entities.downtime_window import DowntimeWindow
from src.domain.exceptions import (
    ExternalIdConflictError,
    NotFoundError,
    UpstreamError,
    ValidationError,
)
from src.domain.repositories.cluster_fact_provider import ClusterFactProviderInterface
from src.domain.repositories.downtime_window_repository import (
    DowntimeWindowRepositoryInterface,
)
from src.domain.services.downtime_matcher import DowntimeMatcher

logger = logging.getLogger(__name__)


def _new_window_id() -> str:
    return str(uuid4())


class ManageDowntimeWindowsUseCase:
    """Store of downtime windows.

    All operations run inside the caller's database transaction. Uniqueness
    of external IDs is additionally enforced by the repository's storage
    constraint, so a concurrent writer that slips between the lookup and the
    write fails instead of storing a duplicate.

    Creation and explicit updates treat external ID collisions differently:
    - store_new_window redirects into an update of the existing window, so
      re-submitting the same external event is idempotent
    - update_window and patch_window reject the collision, so two distinct
      windows are never merged by accident
    """

    def __init__(
        self,
        repository: DowntimeWindowRepositoryInterface,
        fact_provider: ClusterFactProviderInterface,
        matcher: DowntimeMatcher | None = None,
        id_factory: Callable[[], str] = _new_window_id,
    ):
        """Initialize use case with dependencies.

        Args:
            repository: Downtime window persistence
            fact_provider: Cluster fact lookup
            matcher: Downtime matcher (defaults to a new DowntimeMatcher)
            id_factory: Generator for new window IDs
        """
        self.repository = repository
        self.fact_provider = fact_provider
        self.matcher = matcher or DowntimeMatcher()
        self._id_factory = id_factory

    async def store_new_window(self, window: DowntimeWindow) -> DowntimeWindow:
        """Store a new downtime window.

        If another window already carries the same non-empty external ID,
        that window is updated instead and its ID is adopted.

        Args:
            window: Window to store; an empty ID is replaced by a fresh one.
                The argument itself is left untouched.

        Returns:
            The stored window

        Raises:
            ValidationError: If the window violates an invariant
        """
        if not window.id:
            window = replace(window, id=self._id_factory())

        window.validate()

        existing_id = await self._id_for_external_id(window.external_id)
        if existing_id and existing_id != window.id:
            logger.info(
                f"Downtime window with external_id={window.external_id} exists "
                f"as {existing_id}, updating instead of creating"
            )
            return await self.repository.replace(replace(window, id=existing_id))

        stored = await self.repository.add(window)
        logger.info(f"Stored downtime window {stored.id} ({stored.title!r})")
        return stored

    async def update_window(self, window: DowntimeWindow) -> DowntimeWindow:
        """Fully replace a stored downtime window.

        Args:
            window: New field values; window.id selects the stored record

        Returns:
            The updated window

        Raises:
            ValidationError: If the window violates an invariant
            ExternalIdConflictError: If the external ID belongs to another window
            NotFoundError: If no window with this ID exists
        """
        window.validate()
        await self._ensure_external_id_available(window)

        updated = await self.repository.replace(window)
        logger.info(f"Updated downtime window {updated.id}")
        return updated

    async def patch_window(self, patch: DowntimeWindow) -> DowntimeWindow:
        """Merge the non-empty fields of a patch onto a stored window.

        Args:
            patch: Partial window; patch.id selects the stored record

        Returns:
            The patched window

        Raises:
            NotFoundError: If no window with this ID exists
            ValidationError: If the merged window violates an invariant
            ExternalIdConflictError: If the external ID belongs to another window
        """
        existing = await self.get_window(patch.id)
        merged = existing.merge_patch(patch)

        merged.validate()
        await self._ensure_external_id_available(merged)

        patched = await self.repository.replace(merged)
        logger.info(f"Patched downtime window {patched.id}")
        return patched

    async def get_window(self, window_id: str) -> DowntimeWindow:
        """Get a downtime window by ID.

        Raises:
            NotFoundError: If no window with this ID exists
        """
        window = await self.repository.get_by_id(window_id) if window_id else None
        if window is None:
            raise NotFoundError(f"downtime window '{window_id}' not found")
        return window

    async def list_windows(self, from_: datetime, to: datetime) -> list[DowntimeWindow]:
        """List all downtime windows overlapping [from_, to).

        Args:
            from_: Interval start (inclusive, timezone-aware)
            to: Interval end (exclusive, timezone-aware)

        Returns:
            Overlapping windows ordered by start time

        Raises:
            ValidationError: If the interval is naive or empty
        """
        self._validate_interval(from_, to)
        return await self.repository.list_overlapping(from_, to)

    async def list_windows_matching_cluster_facts(
        self, from_: datetime, to: datetime, cluster_id: str
    ) -> list[DowntimeWindow]:
        """List downtime windows overlapping [from_, to) that affect a cluster.

        Args:
            from_: Interval start (inclusive, timezone-aware)
            to: Interval end (exclusive, timezone-aware)
            cluster_id: Cluster whose facts are matched against the windows

        Returns:
            Matching windows ordered by start time

        Raises:
            ValidationError: If the interval is naive or empty
            UpstreamError: If the cluster facts cannot be looked up
        """
        self._validate_interval(from_, to)
        try:
            facts = await self.fact_provider.get_cluster_facts(cluster_id)
        except UpstreamError:
            raise
        except Exception as e:
            raise UpstreamError(
                f"could not look up facts of cluster '{cluster_id}': {e}"
            ) from e

        windows = await self.repository.list_overlapping(from_, to)
        matched = self.matcher.filter_for_cluster(windows, facts)
        logger.debug(
            f"Cluster {cluster_id}: {len(matched)} of {len(windows)} downtime windows match"
        )
        return matched

    def window_matches_cluster_facts(
        self, window: DowntimeWindow, facts: dict[str, str]
    ) -> bool:
        """Check whether a window affects a cluster with the given facts."""
        return self.matcher.window_matches_cluster_facts(window, facts)

    async def _id_for_external_id(self, external_id: str) -> str | None:
        """Return the ID of the window carrying an external ID, if any.

        Empty external IDs are never considered.
        """
        if not external_id:
            return None
        existing = await self.repository.get_by_external_id(external_id)
        return existing.id if existing else None

    async def _ensure_external_id_available(self, window: DowntimeWindow) -> None:
        existing_id = await self._id_for_external_id(window.external_id)
        if existing_id and existing_id != window.id:
            raise ExternalIdConflictError(
                f"external ID '{window.external_id}' conflicts with existing "
                f"downtime window '{existing_id}'"
            )

    @staticmethod
    def _validate_interval(from_: datetime, to: datetime) -> None:
        if from_.tzinfo is None or to.tzinfo is None:
            raise ValidationError("`from` and `to` must be timezone-aware")
        if from_ >= to:
            raise ValidationError("`to` must be after `from`")
