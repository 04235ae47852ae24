"""
Timeline Schemas
Pydantic models for the day timeline and completion API
"""

from typing import Optional, List, Dict, Union
from datetime import datetime, date
from pydantic import BaseModel, ConfigDict

from tools.care_models import ItemKind, ItemStatus, OverduePolicy, TimeWindow
from tools.timeline_assembler import DashboardMode


# ==================== REQUEST SCHEMAS ====================

class CompleteItemRequest(BaseModel):
    """Schema for completing a scheduled item"""
    timestamp: Optional[datetime] = None
    # Only checked when sent, null meaning "not completed yet"
    expected_completed_at: Optional[datetime] = None


# ==================== RESPONSE SCHEMAS ====================

class ScheduledItemResponse(BaseModel):
    """Schema for a scheduled item"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    kind: ItemKind
    title: str = ""
    scheduled_time: Optional[Union[datetime, str]] = None
    completed_at: Optional[datetime] = None
    skipped: bool = False
    policy: Optional[OverduePolicy] = None
    medication_id: Optional[str] = None


class TimelineEntryResponse(BaseModel):
    """Schema for an item with its derived window and status"""
    model_config = ConfigDict(from_attributes=True)

    item: ScheduledItemResponse
    window: TimeWindow
    status: ItemStatus
    scheduled_at: Optional[datetime] = None
    fallback_used: bool = False


class DashboardStateResponse(BaseModel):
    """Schema for the dashboard macro state"""
    model_config = ConfigDict(from_attributes=True)

    mode: DashboardMode
    focus: Optional[TimelineEntryResponse] = None
    total: int = 0
    closed: int = 0
    overdue: int = 0
    actionable: int = 0


class TomorrowPreviewResponse(BaseModel):
    """Schema for the tomorrow preview"""
    model_config = ConfigDict(from_attributes=True)

    entries: List[TimelineEntryResponse] = []
    total: int = 0


class TimelineResponse(BaseModel):
    """Schema for the full day view"""
    model_config = ConfigDict(from_attributes=True)

    day: date
    current_window: TimeWindow
    groups: Dict[TimeWindow, List[TimelineEntryResponse]]
    tomorrow: TomorrowPreviewResponse
    dashboard: DashboardStateResponse
    can_undo: bool = False


class CompletionResponse(BaseModel):
    """Schema for a completion result"""
    model_config = ConfigDict(from_attributes=True)

    item_id: str
    completed_at: Optional[datetime] = None
    previous_completed_at: Optional[datetime] = None
    duplicate: bool = False
    can_undo: bool = True


class UndoResponse(BaseModel):
    """Schema for an undo result"""
    model_config = ConfigDict(from_attributes=True)

    item_id: str
    reverted_completed_at: datetime
    restored_completed_at: Optional[datetime] = None
