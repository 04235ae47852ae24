"""
Timeline API Router
Endpoints for the day view, item completion and undo
"""

from datetime import datetime
from typing import Dict, Optional

from fastapi import APIRouter, Depends, status

from api.deps import get_now, get_timeline_service
from api.schemas.timeline import (
    CompleteItemRequest,
    CompletionResponse,
    DashboardStateResponse,
    TimelineEntryResponse,
    TimelineResponse,
    TomorrowPreviewResponse,
    UndoResponse,
)
from services.timeline_service import TimelineService
from tools.care_models import ItemStatus
from tools.completion import UNSET


router = APIRouter(prefix="/timeline", tags=["timeline"])


@router.get("", response_model=TimelineResponse)
async def get_timeline(
    now: datetime = Depends(get_now),
    service: TimelineService = Depends(get_timeline_service),
):
    """
    Today's items grouped by window, the tomorrow preview and dashboard state
    """
    timeline = await service.get_timeline(now)
    return TimelineResponse(
        day=timeline.day,
        current_window=timeline.current_window,
        groups={
            window: [TimelineEntryResponse.model_validate(entry) for entry in entries]
            for window, entries in timeline.groups.items()
        },
        tomorrow=TomorrowPreviewResponse.model_validate(timeline.tomorrow),
        dashboard=DashboardStateResponse.model_validate(timeline.dashboard),
        can_undo=service.can_undo,
    )


@router.get("/dashboard", response_model=DashboardStateResponse)
async def get_dashboard(
    now: datetime = Depends(get_now),
    service: TimelineService = Depends(get_timeline_service),
):
    """
    Dashboard macro state only
    """
    state = await service.get_dashboard_state(now)
    return DashboardStateResponse.model_validate(state)


@router.get("/statuses", response_model=Dict[str, ItemStatus])
async def get_statuses(
    now: datetime = Depends(get_now),
    service: TimelineService = Depends(get_timeline_service),
):
    """
    Status of every item scheduled today, keyed by item id
    """
    classifications = await service.classify_day(now)
    return {item_id: result.status for item_id, result in classifications.items()}


@router.post("/items/{item_id}/complete", response_model=CompletionResponse)
async def complete_item(
    item_id: str,
    payload: Optional[CompleteItemRequest] = None,
    now: datetime = Depends(get_now),
    service: TimelineService = Depends(get_timeline_service),
):
    """
    Mark an item complete; repeated taps inside the debounce window are ignored
    """
    payload = payload or CompleteItemRequest()
    expected = payload.expected_completed_at
    if "expected_completed_at" not in payload.model_fields_set:
        expected = UNSET

    result = await service.complete_item(item_id, payload.timestamp or now, expected)
    return CompletionResponse(
        item_id=result.item_id,
        completed_at=result.completed_at,
        previous_completed_at=result.previous_completed_at,
        duplicate=result.duplicate,
        can_undo=service.can_undo,
    )


@router.post("/undo", response_model=UndoResponse, status_code=status.HTTP_200_OK)
async def undo_completion(service: TimelineService = Depends(get_timeline_service)):
    """
    Reverse the most recent completion
    """
    result = await service.undo_last_completion()
    return UndoResponse.model_validate(result)
