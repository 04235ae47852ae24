"""
Vitals API Router
Reference-range classification of single readings
"""

from fastapi import APIRouter, Depends

from api.deps import get_care_engine
from api.schemas.vitals import VitalClassifyRequest, VitalClassifyResponse
from tools.care_engine import CareEngine
from tools.vital_ranges import VITAL_REFERENCE_RANGES, normalize_value, resolve_kind, vital_severity


router = APIRouter(prefix="/vitals", tags=["vitals"])


@router.post("/classify", response_model=VitalClassifyResponse)
async def classify_reading(
    payload: VitalClassifyRequest,
    engine: CareEngine = Depends(get_care_engine),
):
    """
    Classify a reading as normal, abnormal or unknown.
    Celsius temperatures and mmol/L glucose are converted first.
    """
    value = tuple(payload.value) if isinstance(payload.value, list) else payload.value
    kind = resolve_kind(payload.kind)
    normalized = normalize_value(payload.kind, value, payload.unit)
    unit = payload.unit
    if kind in VITAL_REFERENCE_RANGES and normalized is not value:
        unit = VITAL_REFERENCE_RANGES[kind].unit

    return VitalClassifyResponse(
        kind=kind.value if kind else payload.kind,
        value=list(normalized) if isinstance(normalized, tuple) else normalized,
        unit=unit,
        classification=engine.classify_vital(payload.kind, value, payload.unit),
        severity=vital_severity(payload.kind, normalized),
    )
