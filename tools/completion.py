"""
Completion Transaction
The only write path of the engine: marks items complete with a single,
bounded undo.

- complete() is idempotent: completing a done item only moves its timestamp.
- undo() reverses the most recent completion and nothing else. A newer
  completion replaces the pending undo; there is no undo stack.
- Duplicate taps for the same item inside the debounce window are ignored
  when the store still holds the value this transaction wrote.
- Every write re-reads the item and checks its prior state first.
"""

import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from tools.engine_config import EngineConfig, default_engine_config
from tools.errors import CompletionConflictError, ItemNotFoundError, NothingToUndoError
from tools.store import CareDataStore


logger = logging.getLogger(__name__)

UNSET: Any = object()


def _wall_clock(value: Optional[datetime]) -> Optional[datetime]:
    # Stores may drop tzinfo on the way back, so compare wall-clock values
    return value.replace(tzinfo=None) if value is not None else None


def _same(a: Optional[datetime], b: Optional[datetime]) -> bool:
    return _wall_clock(a) == _wall_clock(b)


@dataclass(frozen=True)
class CompletionResult:
    """Outcome of a complete() call"""
    item_id: str
    completed_at: Optional[datetime]
    previous_completed_at: Optional[datetime]
    duplicate: bool = False


@dataclass(frozen=True)
class UndoResult:
    """Outcome of an undo() call"""
    item_id: str
    reverted_completed_at: datetime
    restored_completed_at: Optional[datetime]


@dataclass(frozen=True)
class _PendingUndo:
    item_id: str
    previous_completed_at: Optional[datetime]
    written_completed_at: datetime


class CompletionTransaction:
    """Completion and single-level undo against a care data store"""

    def __init__(self, store: CareDataStore, config: EngineConfig = default_engine_config):
        self._store = store
        self._config = config
        self._lock = threading.Lock()
        self._pending_undo: Optional[_PendingUndo] = None
        self._last_written: Dict[str, datetime] = {}

    @property
    def can_undo(self) -> bool:
        return self._pending_undo is not None

    @property
    def pending_undo_item(self) -> Optional[str]:
        return self._pending_undo.item_id if self._pending_undo else None

    def complete(
        self,
        item_id: str,
        timestamp: datetime,
        expected_completed_at: Optional[datetime] = UNSET,
    ) -> CompletionResult:
        """
        Mark an item complete at `timestamp`.

        Args:
            item_id: Scheduled item id
            timestamp: Completion time supplied by the caller
            expected_completed_at: If given, the write only happens when the
                store still holds this value (None for "not yet completed")

        Returns:
            CompletionResult; `duplicate` is True when the call was debounced
        """
        with self._lock:
            item = self._store.get_scheduled_item(item_id)
            if item is None:
                raise ItemNotFoundError(item_id)

            prior = item.completed_at
            if expected_completed_at is not UNSET and not _same(prior, expected_completed_at):
                raise CompletionConflictError(
                    item_id,
                    f"Item {item_id} completion changed: expected {expected_completed_at}, found {prior}",
                )

            if self._is_duplicate(item_id, prior, timestamp):
                logger.info(f"Ignoring duplicate completion for item {item_id}")
                return CompletionResult(
                    item_id=item_id,
                    completed_at=prior,
                    previous_completed_at=prior,
                    duplicate=True,
                )

            self._store.record_completion(item_id, timestamp)
            self._last_written[item_id] = timestamp

            if self._pending_undo is not None:
                logger.debug(f"Discarding pending undo for item {self._pending_undo.item_id}")
            self._pending_undo = _PendingUndo(item_id, prior, timestamp)

            logger.info(f"Completed item {item_id} at {timestamp.isoformat()}")
            return CompletionResult(
                item_id=item_id,
                completed_at=timestamp,
                previous_completed_at=prior,
            )

    def undo(self) -> UndoResult:
        """Reverse the most recent completion, restoring the item's prior completion state"""
        with self._lock:
            pending = self._pending_undo
            if pending is None:
                raise NothingToUndoError("No completion to undo")
            self._pending_undo = None

            item = self._store.get_scheduled_item(pending.item_id)
            if item is None:
                raise ItemNotFoundError(pending.item_id)
            if not _same(item.completed_at, pending.written_completed_at):
                raise CompletionConflictError(
                    pending.item_id,
                    f"Item {pending.item_id} changed since it was completed; undo abandoned",
                )

            if pending.previous_completed_at is None:
                self._store.clear_completion(pending.item_id)
            else:
                self._store.record_completion(pending.item_id, pending.previous_completed_at)
            self._last_written.pop(pending.item_id, None)

            logger.info(f"Undid completion of item {pending.item_id}")
            return UndoResult(
                item_id=pending.item_id,
                reverted_completed_at=pending.written_completed_at,
                restored_completed_at=pending.previous_completed_at,
            )

    def _is_duplicate(self, item_id: str, prior: Optional[datetime], timestamp: datetime) -> bool:
        last = self._last_written.get(item_id)
        if last is None or not _same(prior, last):
            return False
        return abs(_wall_clock(timestamp) - _wall_clock(last)) <= self._config.completion_debounce
