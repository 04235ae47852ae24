"""
Tests for Time Window Resolver
Tests window boundaries, timestamp parsing and window end calculation
"""

import pytest
from datetime import datetime, date, time, timedelta, timezone

from tools.care_models import TimeWindow, WINDOW_ORDER
from tools.engine_config import EngineConfig
from tools.time_windows import (
    FALLBACK_WINDOW,
    current_window,
    get_time_window,
    parse_timestamp,
    resolve_window,
    window_bounds,
    window_end,
    window_for_clock,
)


DAY = date(2024, 3, 12)


def at(hour: int, minute: int = 0) -> datetime:
    return datetime.combine(DAY, time(hour, minute))


# =============================================================================
# Window boundaries
# =============================================================================

class TestWindowBoundaries:
    """Starts are inclusive, ends exclusive"""

    @pytest.mark.parametrize("clock,expected", [
        (time(4, 59), TimeWindow.NIGHT),
        (time(5, 0), TimeWindow.MORNING),
        (time(11, 59), TimeWindow.MORNING),
        (time(12, 0), TimeWindow.AFTERNOON),
        (time(16, 59), TimeWindow.AFTERNOON),
        (time(17, 0), TimeWindow.EVENING),
        (time(20, 59), TimeWindow.EVENING),
        (time(21, 0), TimeWindow.NIGHT),
        (time(23, 59), TimeWindow.NIGHT),
        (time(0, 0), TimeWindow.NIGHT),
    ])
    def test_boundary_minutes(self, clock, expected):
        assert window_for_clock(clock) == expected

    def test_windows_cover_every_minute_once(self):
        """Every minute of the day falls in exactly one window, in order"""
        seen = []
        for minute in range(24 * 60):
            window = window_for_clock(time(minute // 60, minute % 60))
            assert window in WINDOW_ORDER
            if not seen or seen[-1] != window:
                seen.append(window)
        # night (00:00-04:59), morning, afternoon, evening, night again
        assert seen == [
            TimeWindow.NIGHT,
            TimeWindow.MORNING,
            TimeWindow.AFTERNOON,
            TimeWindow.EVENING,
            TimeWindow.NIGHT,
        ]

    def test_custom_boundaries(self):
        config = EngineConfig(morning_start=time(6, 0))
        assert window_for_clock(time(5, 30), config) == TimeWindow.NIGHT
        assert window_for_clock(time(6, 0), config) == TimeWindow.MORNING

    def test_window_bounds(self):
        assert window_bounds(TimeWindow.MORNING) == (time(5, 0), time(12, 0))
        assert window_bounds(TimeWindow.NIGHT) == (time(21, 0), time(5, 0))

    def test_current_window(self):
        assert current_window(at(10)) == TimeWindow.MORNING
        assert current_window(at(22, 30)) == TimeWindow.NIGHT


# =============================================================================
# Timestamp parsing
# =============================================================================

class TestParseTimestamp:
    """parse_timestamp never raises"""

    def test_datetime_passthrough(self):
        value = at(9)
        assert parse_timestamp(value) is value

    def test_iso_string(self):
        assert parse_timestamp("2024-03-12T09:15:00") == at(9, 15)

    def test_utc_suffix(self):
        parsed = parse_timestamp("2024-03-12T09:15:00Z")
        assert parsed.tzinfo is not None
        assert parsed.utcoffset() == timedelta(0)

    def test_date_becomes_midnight(self):
        assert parse_timestamp(DAY) == at(0)

    def test_clock_needs_reference_date(self):
        assert parse_timestamp("08:30") is None
        assert parse_timestamp("08:30", DAY) == at(8, 30)

    def test_am_pm_clock(self):
        assert parse_timestamp("8:00 PM", DAY) == at(20)
        assert parse_timestamp("8:00pm", DAY) == at(20)

    @pytest.mark.parametrize("value", [None, "", "   ", "soon", "25:99", 42])
    def test_unparseable(self, value):
        assert parse_timestamp(value, DAY) is None


# =============================================================================
# Window resolution
# =============================================================================

class TestResolveWindow:
    """Tests for resolve_window and its fallback flag"""

    def test_datetime(self):
        resolution = resolve_window(at(13))
        assert resolution.window == TimeWindow.AFTERNOON
        assert resolution.fallback_used is False

    def test_clock_strings(self):
        assert resolve_window("21:30").window == TimeWindow.NIGHT
        assert resolve_window("8:15 pm").window == TimeWindow.EVENING

    def test_time_value(self):
        assert resolve_window(time(13, 0)).window == TimeWindow.AFTERNOON

    @pytest.mark.parametrize("value", [None, "", "after lunch", "2024-13-45"])
    def test_fallback(self, value):
        resolution = resolve_window(value)
        assert resolution.window == FALLBACK_WINDOW == TimeWindow.MORNING
        assert resolution.fallback_used is True

    def test_get_time_window(self):
        assert get_time_window("garbage") == TimeWindow.MORNING
        assert get_time_window(at(18)) == TimeWindow.EVENING


# =============================================================================
# Window end
# =============================================================================

class TestWindowEnd:
    """Moment the containing window closes"""

    def test_morning(self):
        assert window_end(at(9)) == at(12)

    def test_evening(self):
        assert window_end(at(17)) == at(21)

    def test_late_night_closes_next_morning(self):
        assert window_end(at(22)) == at(5) + timedelta(days=1)

    def test_early_night_closes_same_morning(self):
        assert window_end(at(2)) == at(5)

    def test_keeps_timezone(self):
        aware = datetime(2024, 3, 12, 9, 0, tzinfo=timezone.utc)
        end = window_end(aware)
        assert end == datetime(2024, 3, 12, 12, 0, tzinfo=timezone.utc)
