"""Domain entities for planned downtime windows.

A downtime window declares a period during which error-rate impact on the
clusters it affects is disregarded for error budget accounting.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Mapping

from src.domain.exceptions import ValidationError

# Unix epoch; a start time must be strictly after it.
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass(frozen=True)
class AffectedClusterMatcher:
    """A set of fact constraints that a cluster must all satisfy.

    An empty matcher has no constraints and therefore matches every cluster.

    Attributes:
        constraints: Mapping of fact key to required fact value
    """

    constraints: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        """Freeze the constraint mapping and validate key/value types."""
        for key, value in self.constraints.items():
            if not isinstance(key, str) or not isinstance(value, str):
                raise ValidationError(
                    f"Matcher constraints must map strings to strings, got {key!r}: {value!r}"
                )
        object.__setattr__(
            self, "constraints", MappingProxyType(dict(self.constraints))
        )

    @property
    def is_wildcard(self) -> bool:
        """True if the matcher has no constraints."""
        return len(self.constraints) == 0

    def matches(self, facts: Mapping[str, str]) -> bool:
        """Check whether every constraint is satisfied by the given facts.

        Args:
            facts: Cluster fact mapping

        Returns:
            True if all constraints hold (vacuously true for a wildcard)
        """
        return all(
            key in facts and facts[key] == value
            for key, value in self.constraints.items()
        )

    def to_dict(self) -> dict[str, str]:
        """Plain dict representation for serialization."""
        return dict(self.constraints)

    def __hash__(self) -> int:
        return hash(frozenset(self.constraints.items()))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AffectedClusterMatcher):
            return NotImplemented
        return dict(self.constraints) == dict(other.constraints)


@dataclass
class DowntimeWindow:
    """A planned downtime window.

    Attributes:
        id: Opaque unique identifier (assigned by the store when empty)
        start_time: Start of the window (required, timezone-aware)
        end_time: End of the window; None means open-ended
        title: Short human-readable title
        description: Free text description
        external_id: External reference (e.g. ticket ID) used for deduplication
        external_link: Link to the external reference
        affects: Ordered list of matchers; a cluster is affected if any matches
    """

    id: str = ""
    start_time: datetime | None = None
    end_time: datetime | None = None
    title: str = ""
    description: str = ""
    external_id: str = ""
    external_link: str = ""
    affects: list[AffectedClusterMatcher] = field(default_factory=list)

    def validate(self) -> None:
        """Check the time invariants of the window.

        Raises:
            ValidationError: If start time is missing, not after the epoch,
                or end time is not strictly after start time
        """
        if self.start_time is None:
            raise ValidationError("start time must be set")
        if self.start_time.tzinfo is None:
            raise ValidationError("start time must be timezone-aware")
        if self.start_time <= EPOCH:
            raise ValidationError("start time must be after the Unix epoch")
        if self.end_time is not None:
            if self.end_time.tzinfo is None:
                raise ValidationError("end time must be timezone-aware")
            if self.end_time <= self.start_time:
                raise ValidationError("end time must be after start time")

    def contains(self, ts: datetime) -> bool:
        """Check whether a sample timestamp falls inside this window.

        Prometheus rate samples look back from their timestamp, so the window
        is matched as (start, end]: exclusive of the start instant and
        inclusive of the end instant. Unset bounds are unbounded.

        Args:
            ts: Sample timestamp

        Returns:
            True if the timestamp is covered by the window
        """
        after_start = self.start_time is None or ts > self.start_time
        before_end = self.end_time is None or ts <= self.end_time
        return after_start and before_end

    def merge_patch(self, patch: "DowntimeWindow") -> "DowntimeWindow":
        """Return a copy of this window with the non-empty fields of a patch applied.

        Timestamps are only replaced when the patch supplies them, so a patch
        can set but never clear a timestamp.

        Args:
            patch: Partial window; empty/None fields leave values untouched

        Returns:
            Merged DowntimeWindow (this instance is not modified)
        """
        return DowntimeWindow(
            id=self.id,
            start_time=patch.start_time if patch.start_time is not None else self.start_time,
            end_time=patch.end_time if patch.end_time is not None else self.end_time,
            title=patch.title or self.title,
            description=patch.description or self.description,
            external_id=patch.external_id or self.external_id,
            external_link=patch.external_link or self.external_link,
            affects=list(patch.affects) if patch.affects else list(self.affects),
        )
