"""
Trend Detector
Scans daily samples for red flags worth surfacing to a caregiver:

- decline: a monitored metric strictly decreasing over the most recent
  consecutive days
- out_of_range: a vital abnormal on each of the most recent consecutive days

Both need at least `red_flag_min_days` (3) consecutive calendar days of
evidence ending at the latest sample, so two bad days never raise a flag.
"""

import logging
from collections import OrderedDict
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple

from tools.care_models import DailySample, RangeClassification, Severity, VitalReading
from tools.engine_config import EngineConfig, default_engine_config
from tools.time_windows import parse_timestamp
from tools.vital_ranges import (
    VITAL_REFERENCE_RANGES,
    classify_vital,
    normalize_value,
    resolve_kind,
    vital_severity,
)


logger = logging.getLogger(__name__)


class FlagType(str, Enum):
    """What kind of trend raised the flag"""
    DECLINE = "decline"
    OUT_OF_RANGE = "out_of_range"


@dataclass(frozen=True)
class RedFlag:
    """A detected trend; display wording is left to renderers"""
    category: str
    flag_type: FlagType
    severity: Severity
    evidence: Tuple[DailySample, ...]

    @property
    def first_day(self) -> date:
        return self.evidence[0].day

    @property
    def last_day(self) -> date:
        return self.evidence[-1].day


def _number(value) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    return None


def _one_per_day(samples: Iterable[DailySample]) -> List[DailySample]:
    # Later samples for the same day replace earlier ones
    by_day: Dict[date, DailySample] = {}
    for sample in samples:
        by_day[sample.day] = sample
    return [by_day[day] for day in sorted(by_day)]


def _recent_run(series: List[DailySample], qualifies) -> List[DailySample]:
    """Longest run of consecutive days ending at the latest sample where qualifies(prev, current) holds"""
    if not series:
        return []
    run = [series[-1]]
    for sample in reversed(series[:-1]):
        if (run[0].day - sample.day).days != 1 or not qualifies(sample, run[0]):
            break
        run.insert(0, sample)
    return run


def detect_decline(series: List[DailySample], min_days: int) -> Optional[RedFlag]:
    """Decline flag when values strictly decrease across the last `min_days`+ consecutive days"""
    if len(series) < min_days or _number(series[-1].value) is None:
        return None

    def decreasing(earlier: DailySample, later: DailySample) -> bool:
        # A non-numeric sample ends the run
        value = _number(earlier.value)
        return value is not None and value > _number(later.value)

    run = _recent_run(series, decreasing)
    if len(run) < min_days:
        return None
    return RedFlag(
        category=series[-1].metric,
        flag_type=FlagType.DECLINE,
        severity=Severity.MEDIUM,
        evidence=tuple(run),
    )


def detect_out_of_range(series: List[DailySample], min_days: int) -> Optional[RedFlag]:
    """Out-of-range flag when the vital is abnormal on the last `min_days`+ consecutive days"""
    if len(series) < min_days:
        return None

    def abnormal(sample: DailySample) -> bool:
        return classify_vital(sample.metric, sample.value) == RangeClassification.ABNORMAL

    if not abnormal(series[-1]):
        return None
    run = _recent_run(series, lambda earlier, later: abnormal(earlier))
    if len(run) < min_days:
        return None

    severities = [vital_severity(sample.metric, sample.value) for sample in run]
    severity = Severity.HIGH if Severity.HIGH in severities else Severity.MEDIUM
    return RedFlag(
        category=series[-1].metric,
        flag_type=FlagType.OUT_OF_RANGE,
        severity=severity,
        evidence=tuple(run),
    )


def detect_red_flags(
    daily_samples: Iterable[DailySample],
    config: EngineConfig = default_engine_config,
) -> List[RedFlag]:
    """
    Red flags for every metric in the samples.

    Samples are grouped per metric and reduced to one per day (last wins).
    Decline is checked for the configured monitored metrics, out-of-range
    for any metric that is a known vital kind.
    """
    by_metric: "OrderedDict[str, List[DailySample]]" = OrderedDict()
    for sample in daily_samples:
        by_metric.setdefault(sample.metric, []).append(sample)

    flags: List[RedFlag] = []
    for metric, samples in by_metric.items():
        series = _one_per_day(samples)
        if metric in config.decline_metrics:
            flag = detect_decline(series, config.red_flag_min_days)
            if flag:
                flags.append(flag)
        if resolve_kind(metric) is not None:
            flag = detect_out_of_range(series, config.red_flag_min_days)
            if flag:
                flags.append(flag)

    if flags:
        logger.info(f"Detected {len(flags)} red flag(s): {', '.join(f.category for f in flags)}")
    return flags


_SEVERITY_RANK = {Severity.HIGH: 3, Severity.MEDIUM: 2}


def build_daily_vital_samples(readings: Iterable[VitalReading]) -> List[DailySample]:
    """
    Reduce raw readings to one sample per (vital kind, day).

    The most severe reading of the day is kept so a single bad reading is
    not hidden by a later normal one; among equals the latest wins.
    Readings with unparseable timestamps are dropped.
    """
    chosen: Dict[Tuple[str, date], Tuple[int, DailySample]] = {}
    for reading in readings:
        taken_at = parse_timestamp(reading.timestamp)
        if taken_at is None:
            continue
        kind = resolve_kind(reading.kind)
        metric = kind.value if kind else str(reading.kind).strip().lower()
        value = normalize_value(metric, reading.value, reading.unit)

        if classify_vital(metric, value) == RangeClassification.UNKNOWN:
            rank = 0
        else:
            rank = _SEVERITY_RANK.get(vital_severity(metric, value), 1)

        unit = reading.unit
        if value is not reading.value and kind in VITAL_REFERENCE_RANGES:
            unit = VITAL_REFERENCE_RANGES[kind].unit

        key = (metric, taken_at.date())
        sample = DailySample(day=taken_at.date(), metric=metric, value=value, unit=unit)
        current = chosen.get(key)
        if current is None or rank >= current[0]:
            chosen[key] = (rank, sample)

    return sorted((sample for _, sample in chosen.values()), key=lambda s: (s.metric, s.day))
