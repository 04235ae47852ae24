"""
Adherence Calculator
Per-medication and aggregate adherence over a lookback window
"""

import logging
import math
from collections import defaultdict
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Optional, Sequence

from tools.care_models import DailySample, ItemKind, Medication, ScheduledItem
from tools.engine_config import EngineConfig, default_engine_config
from tools.errors import InvalidLookbackError
from tools.time_windows import parse_timestamp, window_end


logger = logging.getLogger(__name__)

ADHERENCE_METRIC = "medication_adherence"


@dataclass(frozen=True)
class AdherenceRecord:
    """Adherence counts for one medication (or the aggregate when medication_id is None)"""
    medication_id: Optional[str]
    scheduled_count: int
    taken_count: int
    late_count: int
    percentage: Optional[int]
    medication_name: str = ""

    @property
    def missed_count(self) -> int:
        return self.scheduled_count - self.taken_count


@dataclass(frozen=True)
class _Occurrence:
    medication_id: str
    day: date
    counted: bool
    taken: bool
    late: bool


def adherence_percentage(taken: int, scheduled: int) -> Optional[int]:
    """round(taken / scheduled * 100), halves rounding up; None when nothing was scheduled"""
    if scheduled <= 0:
        return None
    return int(math.floor(taken / scheduled * 100 + 0.5))


def lookback_start(now: datetime, lookback_days: int) -> date:
    """First day of a lookback of `lookback_days` calendar days ending today"""
    if isinstance(lookback_days, bool) or not isinstance(lookback_days, int) or lookback_days < 1:
        raise InvalidLookbackError(f"Lookback must be a positive number of days, got {lookback_days!r}")
    return now.date() - timedelta(days=lookback_days - 1)


def _occurrences(
    items: Iterable[ScheduledItem],
    medication_ids: Iterable[str],
    now: datetime,
    start: date,
    config: EngineConfig,
) -> List[_Occurrence]:
    wanted = set(medication_ids)
    occurrences = []
    for item in items:
        if ItemKind(item.kind) != ItemKind.MEDICATION or item.medication_id not in wanted:
            continue
        scheduled = parse_timestamp(item.scheduled_time, now.date())
        if scheduled is None:
            logger.debug(f"Skipping medication item {item.id} with unparseable time")
            continue
        if scheduled.tzinfo is not None and now.tzinfo is None:
            scheduled = scheduled.replace(tzinfo=None)
        elif scheduled.tzinfo is None and now.tzinfo is not None:
            scheduled = scheduled.replace(tzinfo=now.tzinfo)
        if not start <= scheduled.date() <= now.date():
            continue

        taken = item.completed_at is not None
        # An occurrence counts once its window has closed, or earlier if already taken
        counted = taken or now >= window_end(scheduled, config)
        late = False
        if taken:
            completed_at = item.completed_at
            if completed_at.tzinfo is not None and scheduled.tzinfo is None:
                completed_at = completed_at.replace(tzinfo=None)
            elif completed_at.tzinfo is None and scheduled.tzinfo is not None:
                completed_at = completed_at.replace(tzinfo=scheduled.tzinfo)
            late = completed_at > scheduled + config.grace_period

        occurrences.append(_Occurrence(item.medication_id, scheduled.date(), counted, taken, late))
    return occurrences


def _record(medication_id: Optional[str], occurrences: Sequence[_Occurrence], name: str = "") -> AdherenceRecord:
    counted = [occ for occ in occurrences if occ.counted]
    scheduled = len(counted)
    taken = sum(1 for occ in counted if occ.taken)
    late = sum(1 for occ in counted if occ.late)
    return AdherenceRecord(
        medication_id=medication_id,
        scheduled_count=scheduled,
        taken_count=taken,
        late_count=late,
        percentage=adherence_percentage(taken, scheduled),
        medication_name=name,
    )


def compute_adherence(
    medications: Sequence[Medication],
    items: Sequence[ScheduledItem],
    lookback_days: int,
    now: datetime,
    config: EngineConfig = default_engine_config,
) -> List[AdherenceRecord]:
    """
    Adherence for each active medication over the last `lookback_days`
    calendar days, today included.

    Args:
        medications: Medications on the care plan; inactive ones are skipped
        items: Scheduled items; only medication items are considered
        lookback_days: Window length in days (typically 7, 14 or 30)
        now: Evaluation time

    Returns:
        One AdherenceRecord per active medication, in input order
    """
    start = lookback_start(now, lookback_days)
    active = [med for med in medications if med.active]
    by_medication: Dict[str, List[_Occurrence]] = defaultdict(list)
    for occ in _occurrences(items, [med.id for med in active], now, start, config):
        by_medication[occ.medication_id].append(occ)

    return [_record(med.id, by_medication.get(med.id, []), med.name) for med in active]


def aggregate_adherence(records: Iterable[AdherenceRecord]) -> AdherenceRecord:
    """Overall adherence: counts are summed before dividing"""
    records = list(records)
    scheduled = sum(record.scheduled_count for record in records)
    taken = sum(record.taken_count for record in records)
    late = sum(record.late_count for record in records)
    return AdherenceRecord(
        medication_id=None,
        scheduled_count=scheduled,
        taken_count=taken,
        late_count=late,
        percentage=adherence_percentage(taken, scheduled),
    )


def daily_adherence_samples(
    medications: Sequence[Medication],
    items: Sequence[ScheduledItem],
    lookback_days: int,
    now: datetime,
    config: EngineConfig = default_engine_config,
) -> List[DailySample]:
    """One aggregate adherence percentage per day that had counted doses"""
    start = lookback_start(now, lookback_days)
    active_ids = [med.id for med in medications if med.active]
    by_day: Dict[date, List[_Occurrence]] = defaultdict(list)
    for occ in _occurrences(items, active_ids, now, start, config):
        by_day[occ.day].append(occ)

    samples = []
    for day in sorted(by_day):
        record = _record(None, by_day[day])
        if record.percentage is not None:
            samples.append(DailySample(day=day, metric=ADHERENCE_METRIC, value=record.percentage, unit="%"))
    return samples
