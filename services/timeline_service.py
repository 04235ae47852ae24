"""
Timeline Service
Today's timeline, dashboard state and item completion over a care data store
"""

import logging
from datetime import datetime, timedelta
from typing import Dict, Optional

from services.care_store_service import SQLAlchemyCareStore
from tools.care_engine import CareEngine, create_care_engine
from tools.completion import UNSET, CompletionResult, UndoResult
from tools.status_classifier import ItemClassification
from tools.store import CareDataStore
from tools.timeline_assembler import DashboardState, Timeline


logger = logging.getLogger(__name__)


class TimelineService:
    """
    Service for the caregiver's day view.

    Holds one completion transaction so the single pending undo survives
    between requests.
    """

    def __init__(self, store: Optional[CareDataStore] = None, engine: Optional[CareEngine] = None):
        self.store = store if store is not None else SQLAlchemyCareStore()
        self.engine = engine or create_care_engine()
        self.transaction = self.engine.completion_transaction(self.store)

    def _items_around(self, now: datetime):
        # Today plus tomorrow for the preview
        return self.store.get_scheduled_items(now.date(), now.date() + timedelta(days=1))

    async def get_timeline(self, now: datetime) -> Timeline:
        """
        Timeline for the day containing `now`

        Args:
            now: Caller's clock

        Returns:
            Grouped entries, tomorrow preview and dashboard state
        """
        return self.engine.assemble_timeline(self._items_around(now), now)

    async def get_dashboard_state(self, now: datetime) -> DashboardState:
        return self.engine.assemble_dashboard_state(self._items_around(now), now)

    async def classify_day(self, now: datetime) -> Dict[str, ItemClassification]:
        """Window and status of every item of today"""
        items = self.store.get_scheduled_items(now.date(), now.date())
        return self.engine.classify(items, now)

    async def complete_item(
        self,
        item_id: str,
        timestamp: datetime,
        expected_completed_at: Optional[datetime] = UNSET,
    ) -> CompletionResult:
        """
        Mark an item complete

        Args:
            item_id: Scheduled item id
            timestamp: Completion time supplied by the caller
            expected_completed_at: Prior completion state the caller saw

        Returns:
            CompletionResult from the transaction
        """
        result = self.transaction.complete(item_id, timestamp, expected_completed_at)
        if not result.duplicate:
            logger.info(f"Item {item_id} completed via timeline service")
        return result

    async def undo_last_completion(self) -> UndoResult:
        """Reverse the most recent completion"""
        return self.transaction.undo()

    @property
    def can_undo(self) -> bool:
        return self.transaction.can_undo


# Singleton instance
timeline_service = TimelineService()
