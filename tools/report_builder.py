"""
Report Builder
Composes one immutable, renderer-agnostic ReportData from items, vitals,
medications, notes and team activity.

Nothing here formats text. Every renderer (plain text, structured markup,
interactive view) consumes the same ReportData so they cannot disagree.
"""

import logging
from dataclasses import asdict, dataclass, field, is_dataclass
from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from tools.adherence_calculator import (
    AdherenceRecord,
    aggregate_adherence,
    compute_adherence,
    daily_adherence_samples,
)
from tools.care_models import (
    ActivityEntry,
    CareNote,
    DailySample,
    ItemKind,
    Medication,
    RangeClassification,
    ScheduledItem,
    Severity,
    VitalReading,
)
from tools.engine_config import EngineConfig, default_engine_config
from tools.status_classifier import ItemClassification, classify_items
from tools.time_windows import parse_timestamp
from tools.trend_detector import RedFlag, build_daily_vital_samples, detect_red_flags
from tools.vital_ranges import classify_vital, normalize_value, resolve_kind, vital_severity


logger = logging.getLogger(__name__)

DEFAULT_REPORT_DAYS = 7
MEAL_CATEGORY = "meal"


class WarningCode(str, Enum):
    """Data quality problems found while building a report"""
    TIME_WINDOW_FALLBACK = "time_window_fallback"
    VITAL_TIMESTAMP_UNPARSEABLE = "vital_timestamp_unparseable"
    MISSING_MEDICATION = "missing_medication"


@dataclass(frozen=True)
class DataQualityWarning:
    """A degraded input the report was still built from"""
    code: WarningCode
    subject_id: Optional[str] = None
    raw_value: Optional[str] = None


@dataclass(frozen=True)
class ReportSummary:
    """Top-line counts for the summary day"""
    day: date
    meds_taken: int = 0
    meds_total: int = 0
    vitals_recorded: bool = False
    meals_logged: int = 0
    appointments_today: int = 0


@dataclass(frozen=True)
class ClassifiedVital:
    """A reading with its normalised value and range judgment"""
    reading: VitalReading
    kind: str
    value: Any
    classification: RangeClassification
    severity: Optional[Severity] = None


@dataclass(frozen=True)
class ReportData:
    """Everything a clinician report shows, computed once"""
    generated_at: datetime
    period_start: date
    period_end: date
    summary: ReportSummary
    overall_adherence: AdherenceRecord
    adherence: Tuple[AdherenceRecord, ...] = ()
    vitals: Tuple[ClassifiedVital, ...] = ()
    red_flags: Tuple[RedFlag, ...] = ()
    item_statuses: Tuple[ItemClassification, ...] = ()
    notes: Tuple[CareNote, ...] = ()
    activity: Tuple[ActivityEntry, ...] = ()
    warnings: Tuple[DataQualityWarning, ...] = field(default_factory=tuple)

    @property
    def has_data_quality_warnings(self) -> bool:
        return bool(self.warnings)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready structure"""
        return _jsonable(asdict(self))


def _jsonable(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if is_dataclass(value) and not isinstance(value, type):
        return _jsonable(asdict(value))
    if isinstance(value, dict):
        return {str(_jsonable(key)): _jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(item) for item in value]
    return value


def _on_day(value, day: date) -> bool:
    parsed = parse_timestamp(value, day)
    return parsed is not None and parsed.date() == day


def _summary(
    items: Sequence[ScheduledItem],
    vitals: Sequence[VitalReading],
    activity: Sequence[ActivityEntry],
    day: date,
) -> ReportSummary:
    todays = [item for item in items if _on_day(item.scheduled_time, day)]
    meds = [item for item in todays if ItemKind(item.kind) == ItemKind.MEDICATION]
    return ReportSummary(
        day=day,
        meds_taken=sum(1 for item in meds if item.completed_at is not None),
        meds_total=len(meds),
        vitals_recorded=any(_on_day(reading.timestamp, day) for reading in vitals),
        meals_logged=sum(
            1 for entry in activity
            if entry.category.strip().lower() == MEAL_CATEGORY and _on_day(entry.created_at, day)
        ),
        appointments_today=sum(1 for item in todays if ItemKind(item.kind) == ItemKind.APPOINTMENT),
    )


def _classify_vitals(vitals: Sequence[VitalReading]) -> List[ClassifiedVital]:
    classified = []
    for reading in vitals:
        kind = resolve_kind(reading.kind)
        metric = kind.value if kind else str(reading.kind).strip().lower()
        value = normalize_value(metric, reading.value, reading.unit)
        classified.append(ClassifiedVital(
            reading=reading,
            kind=metric,
            value=value,
            classification=classify_vital(metric, value),
            severity=vital_severity(metric, value),
        ))
    return classified


def _warnings(
    items: Sequence[ScheduledItem],
    classifications: Dict[str, ItemClassification],
    vitals: Sequence[VitalReading],
    medications: Sequence[Medication],
) -> List[DataQualityWarning]:
    warnings = []
    for item in items:
        if classifications[item.id].fallback_used:
            warnings.append(DataQualityWarning(
                WarningCode.TIME_WINDOW_FALLBACK, item.id, str(item.scheduled_time)
            ))

    known_medications = {med.id for med in medications}
    for item in items:
        if ItemKind(item.kind) == ItemKind.MEDICATION and item.medication_id not in known_medications:
            warnings.append(DataQualityWarning(
                WarningCode.MISSING_MEDICATION, item.id, item.medication_id
            ))

    for reading in vitals:
        if parse_timestamp(reading.timestamp) is None:
            warnings.append(DataQualityWarning(
                WarningCode.VITAL_TIMESTAMP_UNPARSEABLE, reading.id, str(reading.timestamp)
            ))
    return warnings


def build_report(
    items: Sequence[ScheduledItem],
    vitals: Sequence[VitalReading],
    medications: Sequence[Medication],
    notes: Iterable[CareNote],
    activity: Iterable[ActivityEntry],
    now: datetime,
    period_start: Optional[date] = None,
    period_end: Optional[date] = None,
    daily_samples: Iterable[DailySample] = (),
    config: EngineConfig = default_engine_config,
) -> ReportData:
    """
    Build the report for a period.

    Args:
        items: Scheduled items of the period
        vitals: Vital readings of the period
        medications: Medications on the care plan
        notes: Caregiver notes, passed through unmodified
        activity: Team activity entries, passed through unmodified
        now: Evaluation time
        period_start: First day (default: six days before period_end)
        period_end: Last day (default: today)
        daily_samples: Extra daily aggregates (mood, energy...) for trend detection

    Returns:
        Immutable ReportData; an empty snapshot yields zeroed fields
    """
    items = list(items)
    vitals = list(vitals)
    medications = list(medications)
    notes = tuple(notes)
    activity = tuple(activity)

    period_end = period_end or now.date()
    period_start = period_start or period_end - timedelta(days=DEFAULT_REPORT_DAYS - 1)
    if period_start > period_end:
        raise ValueError(f"Report period starts after it ends: {period_start} > {period_end}")

    # Past periods are evaluated as of the end of their last day
    as_of = now if period_end >= now.date() else datetime.combine(period_end, time.max, tzinfo=now.tzinfo)
    if period_start > as_of.date():
        raise ValueError(f"Report period {period_start} starts in the future")
    lookback_days = (as_of.date() - period_start).days + 1

    classifications = classify_items(items, as_of, config)
    adherence = compute_adherence(medications, items, lookback_days, as_of, config)

    samples: List[DailySample] = build_daily_vital_samples(vitals)
    samples.extend(daily_adherence_samples(medications, items, lookback_days, as_of, config))
    samples.extend(daily_samples)

    warnings = _warnings(items, classifications, vitals, medications)
    if warnings:
        logger.warning(
            f"Report for {period_start}..{period_end} built with {len(warnings)} data quality warning(s)"
        )

    report = ReportData(
        generated_at=now,
        period_start=period_start,
        period_end=period_end,
        summary=_summary(items, vitals, activity, as_of.date()),
        overall_adherence=aggregate_adherence(adherence),
        adherence=tuple(adherence),
        vitals=tuple(_classify_vitals(vitals)),
        red_flags=tuple(detect_red_flags(samples, config)),
        item_statuses=tuple(classifications.values()),
        notes=notes,
        activity=activity,
        warnings=tuple(warnings),
    )
    logger.info(
        f"Built report {period_start}..{period_end}: {len(items)} items, "
        f"{len(vitals)} vitals, {len(report.red_flags)} red flags"
    )
    return report
