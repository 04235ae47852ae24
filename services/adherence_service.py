"""
Adherence Service
Medication adherence over a lookback window, read from the care data store
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional, Tuple

from config import settings
from services.care_store_service import SQLAlchemyCareStore
from tools.adherence_calculator import AdherenceRecord, daily_adherence_samples, lookback_start
from tools.care_engine import CareEngine, create_care_engine
from tools.care_models import DailySample
from tools.store import CareDataStore


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AdherenceOverview:
    """Per-medication records plus the aggregate for one lookback window"""
    lookback_days: int
    period_start: date
    period_end: date
    overall: AdherenceRecord
    medications: Tuple[AdherenceRecord, ...] = ()
    daily: Tuple[DailySample, ...] = field(default_factory=tuple)


class AdherenceService:
    """
    Service for adherence tracking
    """

    def __init__(self, store: Optional[CareDataStore] = None, engine: Optional[CareEngine] = None):
        self.store = store if store is not None else SQLAlchemyCareStore()
        self.engine = engine or create_care_engine()

    async def get_adherence(
        self,
        now: datetime,
        lookback_days: Optional[int] = None,
    ) -> AdherenceOverview:
        """
        Adherence for each active medication

        Args:
            now: Evaluation time
            lookback_days: Window length (default from settings)

        Returns:
            AdherenceOverview with per-medication, aggregate and daily values
        """
        lookback_days = lookback_days if lookback_days is not None else settings.DEFAULT_LOOKBACK_DAYS
        start = lookback_start(now, lookback_days)

        medications = self.store.get_medications()
        items = self.store.get_scheduled_items(start, now.date())

        records = self.engine.compute_adherence(medications, items, lookback_days, now)
        overall = self.engine.aggregate_adherence(records)
        daily = daily_adherence_samples(medications, items, lookback_days, now, self.engine.config)

        logger.info(
            f"Adherence over {lookback_days} days: {overall.taken_count}/{overall.scheduled_count} "
            f"across {len(records)} medications"
        )
        return AdherenceOverview(
            lookback_days=lookback_days,
            period_start=start,
            period_end=now.date(),
            overall=overall,
            medications=tuple(records),
            daily=tuple(daily),
        )

    async def get_medication_adherence(
        self,
        medication_id: str,
        now: datetime,
        lookback_days: Optional[int] = None,
    ) -> Optional[AdherenceRecord]:
        """Record for one medication, None if it is not an active medication"""
        overview = await self.get_adherence(now, lookback_days)
        for record in overview.medications:
            if record.medication_id == medication_id:
                return record
        return None

    async def get_daily_adherence(
        self,
        now: datetime,
        lookback_days: Optional[int] = None,
    ) -> List[DailySample]:
        overview = await self.get_adherence(now, lookback_days)
        return list(overview.daily)


# Singleton instance
adherence_service = AdherenceService()
