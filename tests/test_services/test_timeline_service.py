"""
Tests for Timeline Service
Tests the day view and completion flow over the SQLAlchemy store
"""

import pytest
from datetime import datetime, time, timedelta

from services.timeline_service import TimelineService
from tools.care_models import ItemStatus, TimeWindow
from tools.errors import CompletionConflictError, ItemNotFoundError, NothingToUndoError
from tools.timeline_assembler import DashboardMode

from tests.conftest import NOW, TODAY


@pytest.fixture
def timeline_service(seeded_store, care_engine):
    """Timeline service bound to the seeded store"""
    return TimelineService(seeded_store, care_engine)


# =============================================================================
# Day view
# =============================================================================

class TestDayView:
    """Timeline and dashboard at 10:00"""

    @pytest.mark.asyncio
    async def test_overdue_vitals_check_is_focus(self, timeline_service):
        state = await timeline_service.get_dashboard_state(NOW)

        assert state.mode == DashboardMode.UP_NEXT
        assert state.focus.item.id == "vitals-am"
        assert state.focus.status == ItemStatus.OVERDUE
        assert (state.total, state.closed, state.overdue) == (4, 1, 1)

    @pytest.mark.asyncio
    async def test_timeline_groups(self, timeline_service):
        timeline = await timeline_service.get_timeline(NOW)

        assert timeline.current_window == TimeWindow.MORNING
        assert [e.item.id for e in timeline.groups[TimeWindow.MORNING]] == ["med-am", "vitals-am"]
        assert [e.item.id for e in timeline.groups[TimeWindow.AFTERNOON]] == ["walk"]
        assert [e.item.id for e in timeline.groups[TimeWindow.EVENING]] == ["med-pm"]
        assert [e.item.id for e in timeline.tomorrow.entries] == ["med-tomorrow"]

    @pytest.mark.asyncio
    async def test_classify_day(self, timeline_service):
        statuses = {key: value.status for key, value in (await timeline_service.classify_day(NOW)).items()}
        assert statuses == {
            "med-am": ItemStatus.DONE,
            "vitals-am": ItemStatus.OVERDUE,
            "walk": ItemStatus.NEXT,
            "med-pm": ItemStatus.UPCOMING,
        }

    @pytest.mark.asyncio
    async def test_night_after_everything_done(self, timeline_service, seeded_store):
        for item_id in ("vitals-am", "walk", "med-pm"):
            seeded_store.record_completion(item_id, NOW)
        state = await timeline_service.get_dashboard_state(datetime.combine(TODAY, time(22, 0)))
        assert state.mode == DashboardMode.END_OF_DAY


# =============================================================================
# Completion
# =============================================================================

class TestCompletionFlow:
    """Complete, undo and conflicts through the service"""

    @pytest.mark.asyncio
    async def test_complete_moves_focus_and_undo_restores(self, timeline_service):
        result = await timeline_service.complete_item("vitals-am", NOW)
        assert result.completed_at == NOW
        assert timeline_service.can_undo

        state = await timeline_service.get_dashboard_state(NOW)
        assert state.focus.item.id == "walk"
        assert state.focus.status == ItemStatus.NEXT

        undo = await timeline_service.undo_last_completion()
        assert undo.item_id == "vitals-am"
        assert undo.restored_completed_at is None

        state = await timeline_service.get_dashboard_state(NOW)
        assert state.focus.item.id == "vitals-am"
        assert state.focus.status == ItemStatus.OVERDUE

    @pytest.mark.asyncio
    async def test_second_undo(self, timeline_service):
        await timeline_service.complete_item("vitals-am", NOW)
        await timeline_service.undo_last_completion()
        with pytest.raises(NothingToUndoError):
            await timeline_service.undo_last_completion()

    @pytest.mark.asyncio
    async def test_recompletion_undo_keeps_first_time(self, timeline_service, seeded_store):
        first = datetime.combine(TODAY, time(8, 10))
        await timeline_service.complete_item("med-am", first + timedelta(minutes=20))
        await timeline_service.undo_last_completion()
        assert seeded_store.get_scheduled_item("med-am").completed_at == first

    @pytest.mark.asyncio
    async def test_duplicate_tap(self, timeline_service):
        await timeline_service.complete_item("vitals-am", NOW)
        result = await timeline_service.complete_item("vitals-am", NOW + timedelta(seconds=1))
        assert result.duplicate is True

    @pytest.mark.asyncio
    async def test_unknown_item(self, timeline_service):
        with pytest.raises(ItemNotFoundError):
            await timeline_service.complete_item("nope", NOW)

    @pytest.mark.asyncio
    async def test_stale_expected_state(self, timeline_service):
        with pytest.raises(CompletionConflictError):
            await timeline_service.complete_item("med-am", NOW, expected_completed_at=None)
