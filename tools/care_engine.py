"""
Care Engine
Single entry point for callers (API, report exporters) over the pure
timeline, adherence, trend and report components.

The engine holds only its configuration. Every call receives the data
snapshot and `now` explicitly.
"""

import logging
from datetime import date, datetime
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from tools.adherence_calculator import (
    AdherenceRecord,
    aggregate_adherence,
    compute_adherence,
)
from tools.care_models import (
    ActivityEntry,
    CareNote,
    DailySample,
    ItemKind,
    Medication,
    OverduePolicy,
    RangeClassification,
    ScheduledItem,
    VitalReading,
    VitalValue,
)
from tools.completion import CompletionTransaction
from tools.engine_config import EngineConfig
from tools.report_builder import ReportData, build_report
from tools.status_classifier import ItemClassification, classify_items
from tools.store import CareDataStore
from tools.timeline_assembler import (
    DashboardState,
    Timeline,
    assemble_dashboard_state,
    assemble_timeline,
)
from tools.trend_detector import RedFlag, detect_red_flags
from tools.vital_ranges import classify_vital, normalize_value


logger = logging.getLogger(__name__)


class CareEngine:
    """Facade binding the engine components to one configuration"""

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or EngineConfig()

    def classify(
        self,
        items: Sequence[ScheduledItem],
        now: datetime,
        policy_table: Optional[Mapping[ItemKind, OverduePolicy]] = None,
    ) -> Dict[str, ItemClassification]:
        return classify_items(items, now, self.config, policy_table)

    def assemble_dashboard_state(
        self,
        items: Sequence[ScheduledItem],
        now: datetime,
        policy_table: Optional[Mapping[ItemKind, OverduePolicy]] = None,
    ) -> DashboardState:
        return assemble_dashboard_state(items, now, self.config, policy_table)

    def assemble_timeline(
        self,
        items: Sequence[ScheduledItem],
        now: datetime,
        policy_table: Optional[Mapping[ItemKind, OverduePolicy]] = None,
    ) -> Timeline:
        return assemble_timeline(items, now, self.config, policy_table)

    def compute_adherence(
        self,
        medications: Sequence[Medication],
        items: Sequence[ScheduledItem],
        lookback_days: int,
        now: datetime,
    ) -> List[AdherenceRecord]:
        return compute_adherence(medications, items, lookback_days, now, self.config)

    def aggregate_adherence(self, records: Iterable[AdherenceRecord]) -> AdherenceRecord:
        return aggregate_adherence(records)

    def classify_vital(self, kind: str, value: VitalValue, unit: str = "") -> RangeClassification:
        """Classify a reading, converting units first when given"""
        return classify_vital(kind, normalize_value(kind, value, unit))

    def detect_red_flags(self, daily_samples: Iterable[DailySample]) -> List[RedFlag]:
        return detect_red_flags(daily_samples, self.config)

    def build_report(
        self,
        items: Sequence[ScheduledItem],
        vitals: Sequence[VitalReading],
        medications: Sequence[Medication],
        notes: Iterable[CareNote],
        activity: Iterable[ActivityEntry],
        now: datetime,
        period_start: Optional[date] = None,
        period_end: Optional[date] = None,
        daily_samples: Iterable[DailySample] = (),
    ) -> ReportData:
        return build_report(
            items,
            vitals,
            medications,
            notes,
            activity,
            now,
            period_start=period_start,
            period_end=period_end,
            daily_samples=daily_samples,
            config=self.config,
        )

    def completion_transaction(self, store: CareDataStore) -> CompletionTransaction:
        """New completion transaction over `store`; it owns the pending undo"""
        return CompletionTransaction(store, self.config)


def create_care_engine(settings=None) -> CareEngine:
    """Engine configured from application settings"""
    if settings is None:
        from config import settings
    engine = CareEngine(EngineConfig.from_settings(settings))
    logger.debug(f"Care engine configured with grace period {engine.config.grace_period_minutes} min")
    return engine
