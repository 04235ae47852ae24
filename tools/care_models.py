"""
Care Models
Plain data types shared by the timeline engine components
"""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Optional, Tuple, Union


class ItemKind(str, Enum):
    """Kinds of scheduled caregiving items"""
    MEDICATION = "medication"
    VITALS = "vitals"
    WELLNESS = "wellness"
    APPOINTMENT = "appointment"
    NOTE = "note"


class OverduePolicy(str, Enum):
    """How an unfinished item behaves once its time has passed"""
    STRICT = "strict"   # becomes overdue after the grace period
    SOFT = "soft"       # becomes available once its window closes, never overdue


class TimeWindow(str, Enum):
    """Named segments partitioning a day"""
    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"
    NIGHT = "night"


# Display and grouping order
WINDOW_ORDER: Tuple[TimeWindow, ...] = (
    TimeWindow.MORNING,
    TimeWindow.AFTERNOON,
    TimeWindow.EVENING,
    TimeWindow.NIGHT,
)


class ItemStatus(str, Enum):
    """Lifecycle status of a scheduled item, derived on every evaluation"""
    UPCOMING = "upcoming"
    NEXT = "next"
    AVAILABLE = "available"
    OVERDUE = "overdue"
    DONE = "done"
    MISSED = "missed"
    SKIPPED = "skipped"


# Statuses that need no further action today
CLOSED_STATUSES = frozenset({ItemStatus.DONE, ItemStatus.SKIPPED, ItemStatus.MISSED})

# Statuses still waiting on the caregiver
PENDING_STATUSES = frozenset({ItemStatus.NEXT, ItemStatus.UPCOMING})


class RangeClassification(str, Enum):
    """Normal/abnormal judgment of a vital reading"""
    NORMAL = "normal"
    ABNORMAL = "abnormal"
    UNKNOWN = "unknown"


class Severity(str, Enum):
    """Red flag severity"""
    MEDIUM = "medium"
    HIGH = "high"


# Timestamps may arrive as datetimes or as raw strings from the store
Timestamp = Union[datetime, str, None]

# Blood pressure is a (systolic, diastolic) pair; other vitals are single numbers
VitalValue = Union[float, int, Tuple[float, float], str]


@dataclass(frozen=True)
class ScheduledItem:
    """A concrete scheduled occurrence of a caregiving task"""
    id: str
    kind: ItemKind
    scheduled_time: Timestamp
    completed_at: Optional[datetime] = None
    skipped: bool = False
    policy: Optional[OverduePolicy] = None
    medication_id: Optional[str] = None
    title: str = ""

    @property
    def is_completed(self) -> bool:
        return self.completed_at is not None


@dataclass(frozen=True)
class Medication:
    """An active or inactive medication on the care plan"""
    id: str
    name: str
    dosage: str = ""
    active: bool = True


@dataclass(frozen=True)
class VitalReading:
    """A single vital sign measurement"""
    kind: str
    value: VitalValue
    unit: str = ""
    timestamp: Timestamp = None
    id: Optional[str] = None


@dataclass(frozen=True)
class CareNote:
    """Caregiver note, passed through reports verbatim"""
    text: str
    author: str = ""
    created_at: Optional[datetime] = None
    id: Optional[str] = None


@dataclass(frozen=True)
class ActivityEntry:
    """Care team activity entry (meal logged, visit, handoff...)"""
    category: str
    detail: str = ""
    actor: str = ""
    created_at: Optional[datetime] = None
    id: Optional[str] = None


@dataclass(frozen=True)
class DailySample:
    """One day's aggregate value of a monitored metric (mood score, a vital...)"""
    day: date
    metric: str
    value: VitalValue
    unit: str = ""
