"""
Vital Schemas
Pydantic models for vital classification
"""

from typing import Optional, List, Union
from pydantic import BaseModel, Field

from tools.care_models import RangeClassification, Severity


class VitalClassifyRequest(BaseModel):
    """Schema for classifying a single reading"""
    kind: str = Field(..., min_length=1, max_length=50)
    # Blood pressure as [systolic, diastolic] or "128/78"
    value: Union[float, List[float], str]
    unit: str = Field(default="", max_length=20)


class VitalClassifyResponse(BaseModel):
    """Schema for a classified reading"""
    kind: str
    value: Union[float, List[float], str]
    unit: str = ""
    classification: RangeClassification
    severity: Optional[Severity] = None
