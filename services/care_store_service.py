"""
Care Store Service
SQLAlchemy-backed Care Data Store the engine reads from and writes to
"""

import logging
from contextlib import contextmanager
from datetime import date, datetime, time, timedelta
from typing import Callable, Generator, List, Optional

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from database import SessionLocal
import models
from tools.care_models import (
    ActivityEntry,
    CareNote,
    DailySample,
    Medication,
    ScheduledItem,
    VitalReading,
)
from tools.errors import ItemNotFoundError
from tools.store import CareDataStore


logger = logging.getLogger(__name__)


def _day_bounds(start: date, end: date):
    return datetime.combine(start, time.min), datetime.combine(end + timedelta(days=1), time.min)


class SQLAlchemyCareStore(CareDataStore):
    """
    Care data store over the ORM models.

    Each operation runs in its own short-lived session so one store can be
    shared across requests and by a long-lived completion transaction.
    """

    def __init__(self, session_factory: Callable[[], Session] = SessionLocal):
        self._session_factory = session_factory

    @contextmanager
    def _session(self) -> Generator[Session, None, None]:
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def get_scheduled_items(self, start: date, end: date) -> List[ScheduledItem]:
        with self._session() as session:
            rows = session.query(models.ScheduledItemRecord).filter(
                or_(
                    models.ScheduledItemRecord.scheduled_date.is_(None),
                    and_(
                        models.ScheduledItemRecord.scheduled_date >= start,
                        models.ScheduledItemRecord.scheduled_date <= end,
                    ),
                )
            ).order_by(
                models.ScheduledItemRecord.created_at,
                models.ScheduledItemRecord.id,
            ).all()
            return [row.to_domain() for row in rows]

    def get_scheduled_item(self, item_id: str) -> Optional[ScheduledItem]:
        with self._session() as session:
            row = session.get(models.ScheduledItemRecord, item_id)
            return row.to_domain() if row else None

    def get_vital_readings(self, start: date, end: date) -> List[VitalReading]:
        range_start, range_end = _day_bounds(start, end)
        with self._session() as session:
            rows = session.query(models.VitalReadingRecord).filter(
                or_(
                    models.VitalReadingRecord.taken_at.is_(None),
                    and_(
                        models.VitalReadingRecord.taken_at >= range_start,
                        models.VitalReadingRecord.taken_at < range_end,
                    ),
                )
            ).order_by(models.VitalReadingRecord.taken_at).all()
            return [row.to_domain() for row in rows]

    def get_medications(self) -> List[Medication]:
        with self._session() as session:
            rows = session.query(models.MedicationRecord).order_by(
                models.MedicationRecord.created_at,
                models.MedicationRecord.id,
            ).all()
            return [row.to_domain() for row in rows]

    def record_completion(self, item_id: str, timestamp: datetime) -> None:
        with self._session() as session:
            row = session.get(models.ScheduledItemRecord, item_id)
            if row is None:
                raise ItemNotFoundError(item_id)
            row.completed_at = timestamp
        logger.debug(f"Stored completion for item {item_id}")

    def clear_completion(self, item_id: str) -> None:
        with self._session() as session:
            row = session.get(models.ScheduledItemRecord, item_id)
            if row is None:
                raise ItemNotFoundError(item_id)
            row.completed_at = None
        logger.debug(f"Cleared completion for item {item_id}")

    def get_care_notes(self, start: date, end: date) -> List[CareNote]:
        range_start, range_end = _day_bounds(start, end)
        with self._session() as session:
            rows = session.query(models.CareNoteRecord).filter(
                models.CareNoteRecord.created_at >= range_start,
                models.CareNoteRecord.created_at < range_end,
            ).order_by(models.CareNoteRecord.created_at).all()
            return [row.to_domain() for row in rows]

    def get_team_activity(self, start: date, end: date) -> List[ActivityEntry]:
        range_start, range_end = _day_bounds(start, end)
        with self._session() as session:
            rows = session.query(models.TeamActivityRecord).filter(
                models.TeamActivityRecord.created_at >= range_start,
                models.TeamActivityRecord.created_at < range_end,
            ).order_by(models.TeamActivityRecord.created_at).all()
            return [row.to_domain() for row in rows]

    def get_daily_samples(self, start: date, end: date) -> List[DailySample]:
        with self._session() as session:
            rows = session.query(models.DailyObservationRecord).filter(
                models.DailyObservationRecord.day >= start,
                models.DailyObservationRecord.day <= end,
            ).order_by(
                models.DailyObservationRecord.day,
                models.DailyObservationRecord.created_at,
            ).all()
            return [row.to_domain() for row in rows]
