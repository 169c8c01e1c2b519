"""Unit tests for timestamp query parameter parsing."""

from datetime import datetime, timedelta, timezone

import pytest

from src.domain.exceptions import ValidationError
from src.infrastructure.api.time_params import parse_time_param


class TestParseTimeParam:
    """Tests for parse_time_param."""

    def test_utc_suffix(self):
        assert parse_time_param("from", "2024-01-01T00:00:00Z") == datetime(
            2024, 1, 1, tzinfo=timezone.utc
        )

    def test_offset_preserved(self):
        parsed = parse_time_param("to", "2024-01-01T10:00:00+02:00")

        assert parsed.utcoffset() == timedelta(hours=2)
        assert parsed == datetime(2024, 1, 1, 8, tzinfo=timezone.utc)

    @pytest.mark.parametrize("value", [None, ""])
    def test_missing(self, value):
        with pytest.raises(ValidationError, match="`from`"):
            parse_time_param("from", value)

    @pytest.mark.parametrize(
        "value",
        ["yesterday", "2024-W01-1T00:00:00Z", "2024-001T00:00:00Z", "2024-13-01T00:00:00Z"],
    )
    def test_malformed(self, value):
        with pytest.raises(ValidationError, match="`to`"):
            parse_time_param("to", value)

    def test_offset_required(self):
        with pytest.raises(ValidationError, match="offset"):
            parse_time_param("from", "2024-01-01T00:00:00")
