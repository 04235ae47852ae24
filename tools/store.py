"""
Care Data Store
Interface the engine reads snapshots from and writes completions back to,
plus an in-memory implementation for tests and embedding.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import replace
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional

from tools.care_models import (
    ActivityEntry,
    CareNote,
    DailySample,
    Medication,
    ScheduledItem,
    VitalReading,
)
from tools.errors import ItemNotFoundError
from tools.time_windows import parse_timestamp


logger = logging.getLogger(__name__)


class CareDataStore(ABC):
    """
    Persistence collaborator owned by the caller.

    Date ranges are inclusive calendar dates.
    """

    @abstractmethod
    def get_scheduled_items(self, start: date, end: date) -> List[ScheduledItem]:
        """Scheduled items whose date falls in the range"""

    @abstractmethod
    def get_scheduled_item(self, item_id: str) -> Optional[ScheduledItem]:
        """Current snapshot of a single item, None if unknown"""

    @abstractmethod
    def get_vital_readings(self, start: date, end: date) -> List[VitalReading]:
        """Vital readings taken in the range"""

    @abstractmethod
    def get_medications(self) -> List[Medication]:
        """All medications on the care plan"""

    @abstractmethod
    def record_completion(self, item_id: str, timestamp: datetime) -> None:
        """Set the item's completed_at"""

    @abstractmethod
    def clear_completion(self, item_id: str) -> None:
        """Clear the item's completed_at"""

    def get_care_notes(self, start: date, end: date) -> List[CareNote]:
        return []

    def get_team_activity(self, start: date, end: date) -> List[ActivityEntry]:
        return []

    def get_daily_samples(self, start: date, end: date) -> List[DailySample]:
        """Daily aggregates (mood, energy...) recorded in the range"""
        return []


def _in_range(value, start: date, end: date) -> bool:
    parsed = parse_timestamp(value)
    # Undated records are returned so the engine can flag them
    if parsed is None:
        return True
    return start <= parsed.date() <= end


class InMemoryCareStore(CareDataStore):
    """Dictionary-backed store; keeps insertion order"""

    def __init__(
        self,
        items: Iterable[ScheduledItem] = (),
        vitals: Iterable[VitalReading] = (),
        medications: Iterable[Medication] = (),
        notes: Iterable[CareNote] = (),
        activity: Iterable[ActivityEntry] = (),
        daily_samples: Iterable[DailySample] = (),
    ):
        self._items: Dict[str, ScheduledItem] = {item.id: item for item in items}
        self._vitals: List[VitalReading] = list(vitals)
        self._medications: List[Medication] = list(medications)
        self._notes: List[CareNote] = list(notes)
        self._activity: List[ActivityEntry] = list(activity)
        self._daily_samples: List[DailySample] = list(daily_samples)

    def add_item(self, item: ScheduledItem) -> None:
        self._items[item.id] = item

    def get_scheduled_items(self, start: date, end: date) -> List[ScheduledItem]:
        return [item for item in self._items.values() if _in_range(item.scheduled_time, start, end)]

    def get_scheduled_item(self, item_id: str) -> Optional[ScheduledItem]:
        return self._items.get(item_id)

    def get_vital_readings(self, start: date, end: date) -> List[VitalReading]:
        return [reading for reading in self._vitals if _in_range(reading.timestamp, start, end)]

    def get_medications(self) -> List[Medication]:
        return list(self._medications)

    def record_completion(self, item_id: str, timestamp: datetime) -> None:
        item = self._require(item_id)
        self._items[item_id] = replace(item, completed_at=timestamp)

    def clear_completion(self, item_id: str) -> None:
        item = self._require(item_id)
        self._items[item_id] = replace(item, completed_at=None)

    def get_care_notes(self, start: date, end: date) -> List[CareNote]:
        return [note for note in self._notes if _in_range(note.created_at, start, end)]

    def get_team_activity(self, start: date, end: date) -> List[ActivityEntry]:
        return [entry for entry in self._activity if _in_range(entry.created_at, start, end)]

    def get_daily_samples(self, start: date, end: date) -> List[DailySample]:
        return [sample for sample in self._daily_samples if start <= sample.day <= end]

    def _require(self, item_id: str) -> ScheduledItem:
        item = self._items.get(item_id)
        if item is None:
            raise ItemNotFoundError(item_id)
        return item
