"""
Timeline Assembler
Groups classified items into today's windows, builds the tomorrow preview
and picks the dashboard macro state.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from tools.care_models import (
    CLOSED_STATUSES,
    WINDOW_ORDER,
    ItemKind,
    ItemStatus,
    OverduePolicy,
    ScheduledItem,
    TimeWindow,
)
from tools.engine_config import EngineConfig, default_engine_config
from tools.status_classifier import classify_items
from tools.time_windows import current_window, parse_timestamp


logger = logging.getLogger(__name__)


class DashboardMode(str, Enum):
    """Macro state of the today dashboard"""
    UP_NEXT = "up-next"
    END_OF_DAY = "end-of-day"
    CAUGHT_UP = "caught-up"
    EMPTY = "empty"


# Among actionable items, surface `next` first, then loggable, then later ones
_ACTIONABLE_RANK = {
    ItemStatus.NEXT: 0,
    ItemStatus.AVAILABLE: 1,
    ItemStatus.UPCOMING: 2,
}


@dataclass(frozen=True)
class TimelineEntry:
    """A scheduled item with its derived window and status"""
    item: ScheduledItem
    window: TimeWindow
    status: ItemStatus
    position: int
    scheduled_at: Optional[datetime] = None
    fallback_used: bool = False


@dataclass(frozen=True)
class DashboardState:
    """What the dashboard should say at a glance"""
    mode: DashboardMode
    focus: Optional[TimelineEntry] = None
    total: int = 0
    closed: int = 0
    overdue: int = 0
    actionable: int = 0


@dataclass(frozen=True)
class TomorrowPreview:
    """First few items of tomorrow plus how many there are in total"""
    entries: Tuple[TimelineEntry, ...] = ()
    total: int = 0


@dataclass(frozen=True)
class Timeline:
    """Today's items grouped by window, tomorrow's preview, dashboard state"""
    day: date
    current_window: TimeWindow
    groups: Dict[TimeWindow, Tuple[TimelineEntry, ...]] = field(default_factory=dict)
    tomorrow: TomorrowPreview = field(default_factory=TomorrowPreview)
    dashboard: DashboardState = field(default_factory=lambda: DashboardState(DashboardMode.EMPTY))

    @property
    def today_entries(self) -> List[TimelineEntry]:
        return [entry for window in WINDOW_ORDER for entry in self.groups.get(window, ())]


def _sort_key(entry: TimelineEntry, now: datetime):
    if entry.scheduled_at is None:
        return (1, datetime.min, entry.position)
    scheduled = entry.scheduled_at
    if scheduled.tzinfo is not None and now.tzinfo is None:
        scheduled = scheduled.replace(tzinfo=None)
    elif scheduled.tzinfo is None and now.tzinfo is not None:
        scheduled = scheduled.replace(tzinfo=now.tzinfo)
    return (0, scheduled, entry.position)


def sort_entries(entries: Iterable[TimelineEntry], now: datetime) -> List[TimelineEntry]:
    """Ascending by scheduled time, insertion order breaks ties, unparseable last"""
    return sorted(entries, key=lambda entry: _sort_key(entry, now))


def build_entries(
    items: Sequence[ScheduledItem],
    now: datetime,
    config: EngineConfig = default_engine_config,
    policy_table: Optional[Mapping[ItemKind, OverduePolicy]] = None,
) -> List[TimelineEntry]:
    """Classify the whole set and pair each item with its classification"""
    items = list(items)
    classifications = classify_items(items, now, config, policy_table)
    entries = []
    for position, item in enumerate(items):
        result = classifications[item.id]
        entries.append(TimelineEntry(
            item=item,
            window=result.window,
            status=result.status,
            position=position,
            scheduled_at=parse_timestamp(item.scheduled_time, now.date()),
            fallback_used=result.fallback_used,
        ))
    return entries


def _entries_for_day(entries: Iterable[TimelineEntry], day: date) -> List[TimelineEntry]:
    # Items without a full date are shown on the evaluated day
    return [
        entry for entry in entries
        if entry.scheduled_at is None or entry.scheduled_at.date() == day
    ]


def group_by_window(entries: Iterable[TimelineEntry], now: datetime) -> Dict[TimeWindow, Tuple[TimelineEntry, ...]]:
    """Every window present, each sorted"""
    groups: Dict[TimeWindow, List[TimelineEntry]] = {window: [] for window in WINDOW_ORDER}
    for entry in entries:
        groups[entry.window].append(entry)
    return {window: tuple(sort_entries(group, now)) for window, group in groups.items()}


def decide_dashboard(
    today: Sequence[TimelineEntry],
    now: datetime,
    config: EngineConfig = default_engine_config,
) -> DashboardState:
    """
    Pick the dashboard state from today's entries, first match wins:
    overdue -> up-next, actionable -> up-next, all closed at night ->
    end-of-day, all closed -> caught-up, nothing scheduled -> empty.
    """
    if not today:
        return DashboardState(DashboardMode.EMPTY)

    overdue = [entry for entry in today if entry.status == ItemStatus.OVERDUE]
    actionable = [entry for entry in today if entry.status in _ACTIONABLE_RANK]
    closed = [entry for entry in today if entry.status in CLOSED_STATUSES]
    counts = dict(
        total=len(today),
        closed=len(closed),
        overdue=len(overdue),
        actionable=len(actionable),
    )

    if overdue:
        # Earliest scheduled is the one waiting longest
        focus = sort_entries(overdue, now)[0]
        return DashboardState(DashboardMode.UP_NEXT, focus=focus, **counts)

    if actionable:
        focus = min(
            actionable,
            key=lambda entry: (_ACTIONABLE_RANK[entry.status],) + _sort_key(entry, now),
        )
        return DashboardState(DashboardMode.UP_NEXT, focus=focus, **counts)

    if current_window(now, config) == TimeWindow.NIGHT:
        return DashboardState(DashboardMode.END_OF_DAY, **counts)
    return DashboardState(DashboardMode.CAUGHT_UP, **counts)


def assemble_dashboard_state(
    items: Sequence[ScheduledItem],
    now: datetime,
    config: EngineConfig = default_engine_config,
    policy_table: Optional[Mapping[ItemKind, OverduePolicy]] = None,
) -> DashboardState:
    """Dashboard state for `now`, judged on today's items only"""
    entries = build_entries(items, now, config, policy_table)
    return decide_dashboard(_entries_for_day(entries, now.date()), now, config)


def assemble_timeline(
    items: Sequence[ScheduledItem],
    now: datetime,
    config: EngineConfig = default_engine_config,
    policy_table: Optional[Mapping[ItemKind, OverduePolicy]] = None,
) -> Timeline:
    """Full timeline view for the day containing `now`"""
    entries = build_entries(items, now, config, policy_table)
    today = _entries_for_day(entries, now.date())
    tomorrow_date = now.date() + timedelta(days=1)
    tomorrow = sort_entries(
        [
            entry for entry in entries
            if entry.scheduled_at is not None and entry.scheduled_at.date() == tomorrow_date
        ],
        now,
    )

    timeline = Timeline(
        day=now.date(),
        current_window=current_window(now, config),
        groups=group_by_window(today, now),
        tomorrow=TomorrowPreview(
            entries=tuple(tomorrow[:config.tomorrow_preview_limit]),
            total=len(tomorrow),
        ),
        dashboard=decide_dashboard(today, now, config),
    )
    logger.debug(
        f"Assembled timeline for {timeline.day}: {len(today)} today, "
        f"{len(tomorrow)} tomorrow, dashboard={timeline.dashboard.mode.value}"
    )
    return timeline
