"""
Adherence Schemas
Pydantic models for adherence API responses
"""

from typing import Optional, List
from datetime import date
from pydantic import BaseModel, ConfigDict


class AdherenceRecordResponse(BaseModel):
    """Schema for one medication's adherence (or the aggregate)"""
    model_config = ConfigDict(from_attributes=True)

    medication_id: Optional[str] = None
    medication_name: str = ""
    scheduled_count: int
    taken_count: int
    late_count: int
    missed_count: int
    percentage: Optional[int] = None


class DailyAdherenceResponse(BaseModel):
    """Schema for one day's aggregate adherence"""
    model_config = ConfigDict(from_attributes=True)

    day: date
    value: float


class AdherenceResponse(BaseModel):
    """Schema for adherence over a lookback window"""
    model_config = ConfigDict(from_attributes=True)

    lookback_days: int
    period_start: date
    period_end: date
    overall: AdherenceRecordResponse
    medications: List[AdherenceRecordResponse] = []
    daily: List[DailyAdherenceResponse] = []
