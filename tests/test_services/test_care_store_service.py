"""
Tests for Care Store Service
Tests the SQLAlchemy care data store against an in-memory database
"""

import pytest
from datetime import datetime, date, time, timedelta

from models import ScheduledItemRecord, VitalReadingRecord
from services.care_store_service import SQLAlchemyCareStore
from tools.care_models import ItemKind, OverduePolicy
from tools.errors import ItemNotFoundError

from tests.conftest import TODAY

TOMORROW = TODAY + timedelta(days=1)
YESTERDAY = TODAY - timedelta(days=1)


# =============================================================================
# Scheduled items
# =============================================================================

class TestScheduledItems:
    """Reads of scheduled items"""

    def test_items_for_today_in_insertion_order(self, seeded_store: SQLAlchemyCareStore):
        items = seeded_store.get_scheduled_items(TODAY, TODAY)
        assert [item.id for item in items] == ["med-am", "vitals-am", "walk", "med-pm"]

    def test_range_is_inclusive(self, seeded_store):
        items = seeded_store.get_scheduled_items(TODAY, TOMORROW)
        assert [item.id for item in items][-1] == "med-tomorrow"
        assert seeded_store.get_scheduled_items(YESTERDAY, YESTERDAY) == []

    def test_date_and_clock_combined(self, seeded_store):
        item = seeded_store.get_scheduled_item("vitals-am")
        assert item.kind == ItemKind.VITALS
        assert item.scheduled_time == datetime.combine(TODAY, time(9, 0))
        assert item.completed_at is None
        assert item.title == "Check blood pressure"

    def test_unknown_item(self, seeded_store):
        assert seeded_store.get_scheduled_item("nope") is None

    def test_undated_items_always_returned(self, db_session, sql_store):
        db_session.add(ScheduledItemRecord(id="odd", kind=ItemKind.NOTE, scheduled_time="after lunch",
                                           policy=OverduePolicy.SOFT))
        db_session.commit()

        items = sql_store.get_scheduled_items(YESTERDAY, YESTERDAY)
        assert [item.id for item in items] == ["odd"]
        assert items[0].scheduled_time == "after lunch"
        assert items[0].policy == OverduePolicy.SOFT

    def test_unparseable_clock_kept_raw(self, db_session, sql_store):
        db_session.add(ScheduledItemRecord(id="odd", kind=ItemKind.MEDICATION, scheduled_date=TODAY,
                                           scheduled_time="with breakfast", medication_id="metformin"))
        db_session.commit()
        assert sql_store.get_scheduled_item("odd").scheduled_time == "with breakfast"


# =============================================================================
# Completion writes
# =============================================================================

class TestCompletionWrites:
    """record_completion and clear_completion"""

    def test_record_and_clear(self, seeded_store):
        stamp = datetime.combine(TODAY, time(9, 45))
        seeded_store.record_completion("vitals-am", stamp)
        assert seeded_store.get_scheduled_item("vitals-am").completed_at == stamp

        seeded_store.clear_completion("vitals-am")
        assert seeded_store.get_scheduled_item("vitals-am").completed_at is None

    def test_unknown_item_raises(self, seeded_store):
        with pytest.raises(ItemNotFoundError):
            seeded_store.record_completion("nope", datetime.combine(TODAY, time(9)))
        with pytest.raises(ItemNotFoundError):
            seeded_store.clear_completion("nope")


# =============================================================================
# Other collections
# =============================================================================

class TestOtherCollections:
    """Vitals, medications, observations, notes and activity"""

    def test_vitals(self, seeded_store):
        readings = {reading.id: reading for reading in seeded_store.get_vital_readings(TODAY, TODAY)}

        assert readings["bp-1"].value == (128.0, 78.0)
        assert readings["bp-1"].unit == "mmHg"
        assert readings["hr-1"].value == 112.0
        assert seeded_store.get_vital_readings(YESTERDAY, YESTERDAY) == []

    def test_undated_vital_returned(self, db_session, sql_store):
        db_session.add(VitalReadingRecord(id="undated", kind="heart_rate", value=70))
        db_session.commit()
        readings = sql_store.get_vital_readings(YESTERDAY, YESTERDAY)
        assert [reading.id for reading in readings] == ["undated"]
        assert readings[0].timestamp is None

    def test_medications(self, seeded_store):
        medications = {med.id: med for med in seeded_store.get_medications()}
        assert medications["metformin"].active is True
        assert medications["old-med"].active is False

    def test_daily_samples(self, seeded_store):
        samples = seeded_store.get_daily_samples(TODAY - timedelta(days=2), TODAY)
        assert [(sample.day, sample.value) for sample in samples] == [
            (TODAY - timedelta(days=2), 6.0),
            (YESTERDAY, 5.0),
            (TODAY, 4.0),
        ]
        assert len(seeded_store.get_daily_samples(TODAY, TODAY)) == 1

    def test_notes_and_activity(self, seeded_store):
        notes = seeded_store.get_care_notes(TODAY, TODAY)
        assert [note.author for note in notes] == ["Maria"]

        activity = seeded_store.get_team_activity(TODAY, TODAY)
        assert [(entry.category, entry.detail) for entry in activity] == [("meal", "Breakfast")]
        assert seeded_store.get_team_activity(YESTERDAY, YESTERDAY) == []
