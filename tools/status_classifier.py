"""
Item Status Classifier
Derives exactly one lifecycle status per scheduled item for a given `now`.

Decision order, first match wins:
    done -> skipped -> (missed) -> overdue / available -> next -> upcoming

`next` depends on the whole pending set, so use classify_items() when the
next item matters; classify_item_status() on its own never returns `next`
unless told the item is next.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from tools.care_models import (
    ItemKind,
    ItemStatus,
    OverduePolicy,
    ScheduledItem,
    TimeWindow,
)
from tools.engine_config import EngineConfig, default_engine_config
from tools.time_windows import parse_timestamp, resolve_window, window_end


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ItemClassification:
    """Window and status of one item at one evaluation"""
    item_id: str
    window: TimeWindow
    status: ItemStatus
    fallback_used: bool = False


def resolve_policy(
    item: ScheduledItem,
    policy_table: Mapping[ItemKind, OverduePolicy],
) -> OverduePolicy:
    """Item's own policy tag wins; otherwise the table entry for its kind"""
    if item.policy is not None:
        return OverduePolicy(item.policy)
    kind = ItemKind(item.kind)
    if kind not in policy_table:
        raise ValueError(f"No overdue policy configured for item kind '{kind.value}'")
    return policy_table[kind]


def _align(scheduled: datetime, now: datetime) -> datetime:
    # Mixed naive/aware values are compared as wall-clock times
    if scheduled.tzinfo is not None and now.tzinfo is None:
        return scheduled.replace(tzinfo=None)
    if scheduled.tzinfo is None and now.tzinfo is not None:
        return scheduled.replace(tzinfo=now.tzinfo)
    return scheduled


def _settled_status(
    item: ScheduledItem,
    now: datetime,
    policy: OverduePolicy,
    config: EngineConfig,
) -> Optional[ItemStatus]:
    """Status that does not depend on the rest of the set, None while pending"""
    if item.completed_at is not None:
        return ItemStatus.DONE
    if item.skipped:
        return ItemStatus.SKIPPED

    # Bare clock strings are read as times on the evaluated day
    scheduled = parse_timestamp(item.scheduled_time, now.date())
    if scheduled is None:
        # Without a time the item can never time out; it stays pending
        return None
    scheduled = _align(scheduled, now)

    if config.mark_missed_after_day_end and scheduled.date() < now.date():
        return ItemStatus.MISSED

    if policy == OverduePolicy.STRICT:
        if now > scheduled + config.grace_period:
            return ItemStatus.OVERDUE
    elif policy == OverduePolicy.SOFT:
        if now >= window_end(scheduled, config):
            return ItemStatus.AVAILABLE
    else:
        raise ValueError(f"Unhandled overdue policy: {policy}")

    return None


def classify_item_status(
    item: ScheduledItem,
    now: datetime,
    config: EngineConfig = default_engine_config,
    policy: Optional[OverduePolicy] = None,
    is_next: bool = False,
) -> ItemStatus:
    """Status of a single item; pending items are `upcoming` unless `is_next`"""
    policy = policy or resolve_policy(item, config.policy_table)
    settled = _settled_status(item, now, policy, config)
    if settled is not None:
        return settled
    return ItemStatus.NEXT if is_next else ItemStatus.UPCOMING


def classify_items(
    items: Iterable[ScheduledItem],
    now: datetime,
    config: EngineConfig = default_engine_config,
    policy_table: Optional[Mapping[ItemKind, OverduePolicy]] = None,
) -> Dict[str, ItemClassification]:
    """
    Classify a set of items.

    Returns classifications keyed by item id in input order. The earliest
    pending item with a parseable time (ties broken by input order) is
    `next`; every other pending item is `upcoming`. A duplicated id keeps
    its last occurrence.
    """
    table = policy_table if policy_table is not None else config.policy_table

    items = list(items)
    # Only the last occurrence of a duplicated id is reported
    kept = {item.id: index for index, item in enumerate(items)}

    settled: List[Tuple[ScheduledItem, Optional[ItemStatus]]] = []
    next_candidate: Optional[Tuple[datetime, int]] = None

    for index, item in enumerate(items):
        status = _settled_status(item, now, resolve_policy(item, table), config)
        settled.append((item, status))
        if status is not None or kept[item.id] != index:
            continue
        scheduled = parse_timestamp(item.scheduled_time, now.date())
        if scheduled is None:
            continue
        key = (_align(scheduled, now), index)
        if next_candidate is None or key < next_candidate:
            next_candidate = key

    results: Dict[str, ItemClassification] = {}
    next_index = next_candidate[1] if next_candidate is not None else None
    for index, (item, status) in enumerate(settled):
        if status is None:
            status = ItemStatus.NEXT if index == next_index else ItemStatus.UPCOMING
        resolution = resolve_window(item.scheduled_time, config)
        if item.id in results:
            logger.warning(f"Duplicate scheduled item id {item.id}; keeping the last occurrence")
        results[item.id] = ItemClassification(
            item_id=item.id,
            window=resolution.window,
            status=status,
            fallback_used=resolution.fallback_used,
        )

    return results
