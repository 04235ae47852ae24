"""
Database Models
SQLAlchemy ORM models for the CareTimeline reference data store
"""

import uuid
from datetime import datetime

from sqlalchemy import Column, String, Boolean, Float, DateTime, Text, Date, Enum, Index

from database import Base
from tools.care_models import (
    ActivityEntry,
    CareNote,
    DailySample,
    ItemKind,
    Medication,
    OverduePolicy,
    ScheduledItem,
    VitalReading,
)
from tools.time_windows import parse_timestamp


def _new_id() -> str:
    return uuid.uuid4().hex


# ==================== MODELS ====================

class MedicationRecord(Base):
    """Medication on the care plan"""
    __tablename__ = "medications"

    id = Column(String(64), primary_key=True, default=_new_id)
    name = Column(String(255), nullable=False)
    dosage = Column(String(100), default="")
    instructions = Column(Text)

    active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_domain(self) -> Medication:
        return Medication(
            id=self.id,
            name=self.name,
            dosage=self.dosage or "",
            active=bool(self.active),
        )


class ScheduledItemRecord(Base):
    """One scheduled occurrence of a caregiving task"""
    __tablename__ = "scheduled_items"

    id = Column(String(64), primary_key=True, default=_new_id)
    kind = Column(Enum(ItemKind), nullable=False)
    title = Column(String(255), default="")

    # Timing
    scheduled_date = Column(Date)
    scheduled_time = Column(String(32), nullable=False)  # "08:00", "8:00 PM"

    # No foreign key: dangling references are reported, not rejected
    medication_id = Column(String(64), index=True)
    policy = Column(Enum(OverduePolicy))  # overrides the per-kind policy

    # Completion state
    completed_at = Column(DateTime)
    skipped = Column(Boolean, default=False)

    notes = Column(Text)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        Index("ix_scheduled_items_date", "scheduled_date"),
    )

    def to_domain(self) -> ScheduledItem:
        # Date plus clock when both parse; the raw text otherwise so the engine can flag it
        scheduled = self.scheduled_time
        if self.scheduled_date is not None:
            scheduled = parse_timestamp(self.scheduled_time, self.scheduled_date) or self.scheduled_time
        return ScheduledItem(
            id=self.id,
            kind=self.kind,
            scheduled_time=scheduled,
            completed_at=self.completed_at,
            skipped=bool(self.skipped),
            policy=self.policy,
            medication_id=self.medication_id,
            title=self.title or "",
        )


class VitalReadingRecord(Base):
    """A single vital sign measurement"""
    __tablename__ = "vital_readings"

    id = Column(String(64), primary_key=True, default=_new_id)
    kind = Column(String(50), nullable=False, index=True)

    # Blood pressure stores systolic in value and diastolic in secondary_value
    value = Column(Float, nullable=False)
    secondary_value = Column(Float)
    unit = Column(String(20), default="")

    taken_at = Column(DateTime)
    notes = Column(Text)
    created_at = Column(DateTime, default=datetime.utcnow)

    __table_args__ = (
        Index("ix_vital_readings_kind_date", "kind", "taken_at"),
    )

    def to_domain(self) -> VitalReading:
        value = self.value
        if self.secondary_value is not None:
            value = (self.value, self.secondary_value)
        return VitalReading(
            kind=self.kind,
            value=value,
            unit=self.unit or "",
            timestamp=self.taken_at,
            id=self.id,
        )


class DailyObservationRecord(Base):
    """Daily aggregate of a monitored metric (mood, energy, sleep hours)"""
    __tablename__ = "daily_observations"

    id = Column(String(64), primary_key=True, default=_new_id)
    day = Column(Date, nullable=False)
    metric = Column(String(50), nullable=False)
    value = Column(Float, nullable=False)
    unit = Column(String(20), default="")
    created_at = Column(DateTime, default=datetime.utcnow)

    __table_args__ = (
        Index("ix_daily_observations_metric_day", "metric", "day"),
    )

    def to_domain(self) -> DailySample:
        return DailySample(day=self.day, metric=self.metric, value=self.value, unit=self.unit or "")


class CareNoteRecord(Base):
    """Free-text caregiver note"""
    __tablename__ = "care_notes"

    id = Column(String(64), primary_key=True, default=_new_id)
    text = Column(Text, nullable=False)
    author = Column(String(100), default="")
    created_at = Column(DateTime, default=datetime.utcnow)

    def to_domain(self) -> CareNote:
        return CareNote(text=self.text, author=self.author or "", created_at=self.created_at, id=self.id)


class TeamActivityRecord(Base):
    """Care team activity (meal logged, visit, handoff)"""
    __tablename__ = "team_activity"

    id = Column(String(64), primary_key=True, default=_new_id)
    category = Column(String(50), nullable=False, index=True)
    detail = Column(Text, default="")
    actor = Column(String(100), default="")
    created_at = Column(DateTime, default=datetime.utcnow)

    def to_domain(self) -> ActivityEntry:
        return ActivityEntry(
            category=self.category,
            detail=self.detail or "",
            actor=self.actor or "",
            created_at=self.created_at,
            id=self.id,
        )
