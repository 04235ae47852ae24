"""
Adherence API Router
Endpoints for medication adherence over a lookback window
"""

from typing import List, Optional
from datetime import datetime
from fastapi import APIRouter, Depends, HTTPException, status, Query

from api.deps import get_adherence_service, get_now
from api.schemas.adherence import AdherenceRecordResponse, AdherenceResponse, DailyAdherenceResponse
from services.adherence_service import AdherenceService


router = APIRouter(prefix="/adherence", tags=["adherence"])


@router.get("", response_model=AdherenceResponse)
async def get_adherence(
    lookback_days: Optional[int] = Query(None, description="Days to look back, today included"),
    now: datetime = Depends(get_now),
    service: AdherenceService = Depends(get_adherence_service),
):
    """
    Per-medication and overall adherence for active medications
    """
    overview = await service.get_adherence(now, lookback_days)
    return AdherenceResponse.model_validate(overview)


@router.get("/daily", response_model=List[DailyAdherenceResponse])
async def get_daily_adherence(
    lookback_days: Optional[int] = Query(None),
    now: datetime = Depends(get_now),
    service: AdherenceService = Depends(get_adherence_service),
):
    """
    Aggregate adherence per day, for charting
    """
    samples = await service.get_daily_adherence(now, lookback_days)
    return [DailyAdherenceResponse.model_validate(sample) for sample in samples]


@router.get("/medications/{medication_id}", response_model=AdherenceRecordResponse)
async def get_medication_adherence(
    medication_id: str,
    lookback_days: Optional[int] = Query(None),
    now: datetime = Depends(get_now),
    service: AdherenceService = Depends(get_adherence_service),
):
    """
    Adherence of a single active medication
    """
    record = await service.get_medication_adherence(medication_id, now, lookback_days)
    if record is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Active medication {medication_id} not found"
        )
    return AdherenceRecordResponse.model_validate(record)
