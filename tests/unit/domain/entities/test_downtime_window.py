"""Unit tests for DowntimeWindow and AffectedClusterMatcher entities."""

from datetime import datetime, timedelta, timezone

import pytest

from src.domain.entities.downtime_window import AffectedClusterMatcher, DowntimeWindow
from src.domain.exceptions import ValidationError


def utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


class TestAffectedClusterMatcher:
    """Tests for AffectedClusterMatcher."""

    def test_empty_matcher_is_wildcard(self):
        """An empty matcher matches every cluster."""
        matcher = AffectedClusterMatcher()

        assert matcher.is_wildcard
        assert matcher.matches({})
        assert matcher.matches({"cloud": "cloudscale"})

    def test_all_constraints_must_hold(self):
        """Every constraint of a matcher must be satisfied."""
        matcher = AffectedClusterMatcher({"cloud": "cloudscale", "region": "lpg"})

        assert matcher.matches({"cloud": "cloudscale", "region": "lpg", "x": "y"})
        assert not matcher.matches({"cloud": "cloudscale"})
        assert not matcher.matches({"cloud": "cloudscale", "region": "rma"})

    def test_constraints_are_immutable(self):
        """Mutating the source dict does not change the matcher."""
        source = {"cloud": "exoscale"}
        matcher = AffectedClusterMatcher(source)
        source["cloud"] = "cloudscale"

        assert matcher.to_dict() == {"cloud": "exoscale"}
        with pytest.raises(TypeError):
            matcher.constraints["cloud"] = "other"

    def test_non_string_values_rejected(self):
        """Constraint values must be strings."""
        with pytest.raises(ValidationError):
            AffectedClusterMatcher({"replicas": 3})

    def test_equality_and_hash(self):
        """Matchers with the same constraints are equal and hash alike."""
        a = AffectedClusterMatcher({"cloud": "x"})
        b = AffectedClusterMatcher({"cloud": "x"})

        assert a == b
        assert len({a, b}) == 1
        assert a != AffectedClusterMatcher()


class TestDowntimeWindowValidate:
    """Tests for DowntimeWindow.validate."""

    def test_valid_closed_window(self):
        """A window with start before end is valid."""
        DowntimeWindow(start_time=utc(2024, 1, 1), end_time=utc(2024, 1, 2)).validate()

    def test_open_ended_window_is_valid(self):
        """A window without end time is valid."""
        DowntimeWindow(start_time=utc(2024, 1, 1)).validate()

    def test_missing_start_rejected(self):
        """Start time is required."""
        with pytest.raises(ValidationError, match="start time"):
            DowntimeWindow(end_time=utc(2024, 1, 2)).validate()

    def test_epoch_start_rejected(self):
        """Start time must be strictly after the Unix epoch."""
        with pytest.raises(ValidationError):
            DowntimeWindow(start_time=utc(1970, 1, 1)).validate()

    def test_end_equal_to_start_rejected(self):
        """End time must be strictly after start time."""
        with pytest.raises(ValidationError, match="end time"):
            DowntimeWindow(start_time=utc(2024, 1, 1), end_time=utc(2024, 1, 1)).validate()

    def test_end_before_start_rejected(self):
        with pytest.raises(ValidationError):
            DowntimeWindow(start_time=utc(2024, 1, 2), end_time=utc(2024, 1, 1)).validate()

    def test_naive_start_rejected(self):
        """Timestamps must carry a timezone."""
        with pytest.raises(ValidationError, match="timezone"):
            DowntimeWindow(start_time=datetime(2024, 1, 1)).validate()


class TestDowntimeWindowContains:
    """Tests for DowntimeWindow.contains (start exclusive, end inclusive)."""

    @pytest.fixture
    def window(self):
        return DowntimeWindow(start_time=utc(2024, 1, 1, 6), end_time=utc(2024, 1, 1, 12))

    def test_start_instant_excluded(self, window):
        assert not window.contains(utc(2024, 1, 1, 6))

    def test_end_instant_included(self, window):
        assert window.contains(utc(2024, 1, 1, 12))

    def test_inside(self, window):
        assert window.contains(utc(2024, 1, 1, 7))

    def test_after_end(self, window):
        assert not window.contains(utc(2024, 1, 1, 12) + timedelta(seconds=1))

    def test_open_ended_contains_far_future(self):
        window = DowntimeWindow(start_time=utc(2024, 1, 1))

        assert window.contains(utc(2999, 1, 1))


class TestDowntimeWindowMergePatch:
    """Tests for DowntimeWindow.merge_patch."""

    @pytest.fixture
    def existing(self):
        return DowntimeWindow(
            id="w-1",
            start_time=utc(2024, 1, 1),
            end_time=utc(2024, 1, 2),
            title="Maintenance",
            description="Monthly patching",
            external_id="CHG-1",
            external_link="https://tickets.example.com/CHG-1",
            affects=[AffectedClusterMatcher({"cloud": "cloudscale"})],
        )

    def test_empty_patch_keeps_everything(self, existing):
        merged = existing.merge_patch(DowntimeWindow(id="w-1"))

        assert merged == existing
        assert merged is not existing

    def test_non_empty_fields_replace(self, existing):
        """Supplied fields overwrite, omitted fields are kept."""
        merged = existing.merge_patch(
            DowntimeWindow(
                title="Extended maintenance",
                end_time=utc(2024, 1, 3),
                affects=[AffectedClusterMatcher()],
            )
        )

        assert merged.id == "w-1"
        assert merged.title == "Extended maintenance"
        assert merged.end_time == utc(2024, 1, 3)
        assert merged.start_time == utc(2024, 1, 1)
        assert merged.description == "Monthly patching"
        assert merged.external_id == "CHG-1"
        assert merged.affects == [AffectedClusterMatcher()]

    def test_original_not_modified(self, existing):
        existing.merge_patch(DowntimeWindow(title="Changed"))

        assert existing.title == "Maintenance"
