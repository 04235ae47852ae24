"""
Pytest Configuration and Shared Fixtures
========================================

This module provides shared fixtures for all CareTimeline tests.
Fixtures include engine configuration, item factories, database sessions,
a seeded SQLAlchemy care store and an API test client.
"""

import os
import sys
from datetime import datetime, date, time, timedelta
from typing import Callable, Generator

# Keep the application database in memory while testing
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from database import Base
from models import (
    MedicationRecord, ScheduledItemRecord, VitalReadingRecord,
    DailyObservationRecord, CareNoteRecord, TeamActivityRecord
)
from app import app
from api.deps import get_adherence_service, get_care_engine, get_report_service, get_timeline_service
from services.adherence_service import AdherenceService
from services.care_store_service import SQLAlchemyCareStore
from services.report_service import ReportService
from services.timeline_service import TimelineService
from tools.care_engine import CareEngine
from tools.care_models import ItemKind, ScheduledItem
from tools.engine_config import EngineConfig


# Tuesday mid-morning
NOW = datetime(2024, 3, 12, 10, 0)
TODAY = NOW.date()


# ==================== ENGINE FIXTURES ====================

@pytest.fixture
def engine_config() -> EngineConfig:
    """Default engine configuration"""
    return EngineConfig()


@pytest.fixture
def care_engine(engine_config: EngineConfig) -> CareEngine:
    return CareEngine(engine_config)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def make_item() -> Callable[..., ScheduledItem]:
    """Factory for scheduled items; clock strings are placed on TODAY"""

    def _make(item_id: str, kind: ItemKind = ItemKind.MEDICATION, at="09:00", **kwargs) -> ScheduledItem:
        scheduled = at
        if isinstance(at, str) and len(at) == 5 and at[2] == ":":
            scheduled = datetime.combine(TODAY, time.fromisoformat(at))
        return ScheduledItem(id=item_id, kind=kind, scheduled_time=scheduled, **kwargs)

    return _make


# ==================== DATABASE FIXTURES ====================

@pytest.fixture(scope="function")
def test_engine():
    """Create a test database engine with in-memory SQLite"""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False
    )

    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(bind=engine)

    yield engine

    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(test_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


@pytest.fixture(scope="function")
def db_session(session_factory):
    """Create a test database session"""
    session = session_factory()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def sql_store(session_factory) -> SQLAlchemyCareStore:
    return SQLAlchemyCareStore(session_factory)


@pytest.fixture
def seeded_store(db_session, sql_store) -> SQLAlchemyCareStore:
    """
    A care day on TODAY, evaluated at NOW (10:00):

    - med-am: metformin 08:00, taken 08:10
    - vitals-am: 09:00 vitals check, not done (overdue at 10:00)
    - walk: wellness 15:00
    - med-pm: metformin 18:00
    - med-tomorrow: metformin 08:00 tomorrow
    """
    db_session.add(MedicationRecord(id="metformin", name="Metformin", dosage="500mg", active=True))
    db_session.add(MedicationRecord(id="old-med", name="Old Med", dosage="5mg", active=False))
    rows = [
        ScheduledItemRecord(id="med-am", kind=ItemKind.MEDICATION, title="Metformin",
                            scheduled_date=TODAY, scheduled_time="08:00", medication_id="metformin",
                            completed_at=datetime.combine(TODAY, time(8, 10)),
                            created_at=datetime(2024, 3, 1, 0, 0, 1)),
        ScheduledItemRecord(id="vitals-am", kind=ItemKind.VITALS, title="Check blood pressure",
                            scheduled_date=TODAY, scheduled_time="09:00",
                            created_at=datetime(2024, 3, 1, 0, 0, 2)),
        ScheduledItemRecord(id="walk", kind=ItemKind.WELLNESS, title="Walk",
                            scheduled_date=TODAY, scheduled_time="15:00",
                            created_at=datetime(2024, 3, 1, 0, 0, 3)),
        ScheduledItemRecord(id="med-pm", kind=ItemKind.MEDICATION, title="Metformin",
                            scheduled_date=TODAY, scheduled_time="18:00", medication_id="metformin",
                            created_at=datetime(2024, 3, 1, 0, 0, 4)),
        ScheduledItemRecord(id="med-tomorrow", kind=ItemKind.MEDICATION, title="Metformin",
                            scheduled_date=TODAY + timedelta(days=1), scheduled_time="08:00",
                            medication_id="metformin", created_at=datetime(2024, 3, 1, 0, 0, 5)),
    ]
    db_session.add_all(rows)
    db_session.add(VitalReadingRecord(id="bp-1", kind="blood_pressure", value=128, secondary_value=78,
                                      unit="mmHg", taken_at=datetime.combine(TODAY, time(8, 30))))
    db_session.add(VitalReadingRecord(id="hr-1", kind="heart_rate", value=112, unit="bpm",
                                      taken_at=datetime.combine(TODAY, time(8, 31))))
    for offset, score in enumerate([4, 5, 6]):
        db_session.add(DailyObservationRecord(day=TODAY - timedelta(days=offset), metric="mood", value=score))
    db_session.add(CareNoteRecord(id="note-1", text="Ate well at breakfast.", author="Maria",
                                  created_at=datetime.combine(TODAY, time(8, 45))))
    db_session.add(TeamActivityRecord(id="act-1", category="meal", detail="Breakfast", actor="Maria",
                                      created_at=datetime.combine(TODAY, time(8, 0))))
    db_session.commit()
    return sql_store


# ==================== API FIXTURES ====================

@pytest.fixture(scope="function")
def client(seeded_store: SQLAlchemyCareStore, care_engine: CareEngine) -> Generator[TestClient, None, None]:
    """FastAPI test client with services bound to the seeded store"""
    timeline = TimelineService(seeded_store, care_engine)
    adherence = AdherenceService(seeded_store, care_engine)
    reports = ReportService(seeded_store, care_engine)

    app.dependency_overrides[get_timeline_service] = lambda: timeline
    app.dependency_overrides[get_adherence_service] = lambda: adherence
    app.dependency_overrides[get_report_service] = lambda: reports
    app.dependency_overrides[get_care_engine] = lambda: care_engine

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def now_param() -> dict:
    """Query parameters pinning the evaluation time"""
    return {"now": NOW.isoformat()}
