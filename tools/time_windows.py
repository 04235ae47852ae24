"""
Time Window Resolver
Maps wall-clock timestamps to morning / afternoon / evening / night windows.

Window starts are inclusive and ends exclusive, so with the default
boundaries 05:00 is morning, 12:00 afternoon, 17:00 evening and 21:00 night.
Night wraps midnight (21:00-04:59). Anything that cannot be parsed resolves
to morning; callers that care can check WindowResolution.fallback_used.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Optional, Tuple

from tools.care_models import TimeWindow, Timestamp
from tools.engine_config import EngineConfig, default_engine_config


logger = logging.getLogger(__name__)

FALLBACK_WINDOW = TimeWindow.MORNING

_CLOCK_FORMATS = ("%H:%M", "%H:%M:%S", "%I:%M %p", "%I:%M%p")


@dataclass(frozen=True)
class WindowResolution:
    """Resolved window plus whether the fallback was used"""
    window: TimeWindow
    fallback_used: bool = False


def _parse_clock(text: str) -> Optional[time]:
    for fmt in _CLOCK_FORMATS:
        try:
            return datetime.strptime(text, fmt).time()
        except ValueError:
            continue
    return None


def parse_timestamp(value: Timestamp, reference_date: Optional[date] = None) -> Optional[datetime]:
    """
    Parse a timestamp without raising.

    Accepts datetimes, ISO-8601 strings and, when a reference date is given,
    bare clock strings ("08:00", "8:00 PM"). Returns None if nothing fits.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None

    iso = text[:-1] + "+00:00" if text.endswith("Z") else text
    try:
        return datetime.fromisoformat(iso)
    except ValueError:
        pass

    clock = _parse_clock(text.upper())
    if clock is not None and reference_date is not None:
        return datetime.combine(reference_date, clock)
    return None


def window_for_clock(clock: time, config: EngineConfig = default_engine_config) -> TimeWindow:
    """Window containing a clock time"""
    clock = clock.replace(tzinfo=None)
    if config.morning_start <= clock < config.afternoon_start:
        return TimeWindow.MORNING
    if config.afternoon_start <= clock < config.evening_start:
        return TimeWindow.AFTERNOON
    if config.evening_start <= clock < config.night_start:
        return TimeWindow.EVENING
    return TimeWindow.NIGHT


def resolve_window(value: Timestamp, config: EngineConfig = default_engine_config) -> WindowResolution:
    """Resolve a timestamp to its window, recording any fallback"""
    parsed = parse_timestamp(value)
    if parsed is not None:
        return WindowResolution(window_for_clock(parsed.time(), config))

    if isinstance(value, time):
        return WindowResolution(window_for_clock(value, config))
    if isinstance(value, str):
        clock = _parse_clock(value.strip().upper())
        if clock is not None:
            return WindowResolution(window_for_clock(clock, config))

    logger.debug(f"Unparseable timestamp {value!r}; using {FALLBACK_WINDOW.value} window")
    return WindowResolution(FALLBACK_WINDOW, fallback_used=True)


def get_time_window(value: Timestamp, config: EngineConfig = default_engine_config) -> TimeWindow:
    """Window for a timestamp, morning when it cannot be parsed"""
    return resolve_window(value, config).window


def current_window(now: datetime, config: EngineConfig = default_engine_config) -> TimeWindow:
    """Window the caller's clock is in"""
    return window_for_clock(now.time(), config)


def window_bounds(window: TimeWindow, config: EngineConfig = default_engine_config) -> Tuple[time, time]:
    """(start, end) clock times of a window; night's end is on the next day"""
    bounds = {
        TimeWindow.MORNING: (config.morning_start, config.afternoon_start),
        TimeWindow.AFTERNOON: (config.afternoon_start, config.evening_start),
        TimeWindow.EVENING: (config.evening_start, config.night_start),
        TimeWindow.NIGHT: (config.night_start, config.morning_start),
    }
    return bounds[window]


def window_end(scheduled: datetime, config: EngineConfig = default_engine_config) -> datetime:
    """
    Moment the window containing `scheduled` closes.

    A night item scheduled after the night start closes the following
    morning; one scheduled after midnight closes the same morning.
    """
    window = window_for_clock(scheduled.time(), config)
    _, end = window_bounds(window, config)
    end_date = scheduled.date()
    if window == TimeWindow.NIGHT and scheduled.time().replace(tzinfo=None) >= config.night_start:
        end_date = end_date + timedelta(days=1)
    return datetime.combine(end_date, end, tzinfo=scheduled.tzinfo)
