"""Tests for ISO 8601 duration parsing."""

import pytest

from nichescout.scoring.duration import duration_minutes, parse_duration


class TestParseDuration:
    def test_full_duration(self):
        assert parse_duration("PT1H2M3S") == 3723

    def test_seconds_only(self):
        assert parse_duration("PT45S") == 45

    def test_minutes_only(self):
        assert parse_duration("PT5M") == 300

    def test_hours_only(self):
        assert parse_duration("PT2H") == 7200

    def test_hours_and_seconds(self):
        assert parse_duration("PT1H5S") == 3605

    def test_bare_prefix_is_zero(self):
        assert parse_duration("PT") == 0

    @pytest.mark.parametrize("value", ["", None, "garbage", "P1D", "PT5X", "15:33"])
    def test_unparseable_is_zero(self, value):
        assert parse_duration(value) == 0


class TestDurationMinutes:
    def test_fractional_minutes(self):
        assert duration_minutes("PT1M30S") == pytest.approx(1.5)

    def test_unparseable(self):
        assert duration_minutes("nope") == 0.0
