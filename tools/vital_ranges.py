"""
Vital Range Classifier
Static reference tables for vital signs.

These are simplified caregiver heuristics, not clinical staging. Blood
pressure in particular uses a single combined rule (normal iff systolic < 130
and diastolic < 80) rather than full hypertension staging.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple, Union

from tools.care_models import RangeClassification, Severity, VitalValue


logger = logging.getLogger(__name__)


class VitalKind(str, Enum):
    """Vital sign kinds known to the engine"""
    BLOOD_PRESSURE = "blood_pressure"
    HEART_RATE = "heart_rate"
    SPO2 = "spo2"
    TEMPERATURE = "temperature"
    GLUCOSE = "glucose"
    WEIGHT = "weight"


# Spellings seen in stored readings
KIND_ALIASES: Dict[str, VitalKind] = {
    "bp": VitalKind.BLOOD_PRESSURE,
    "blood_pressure": VitalKind.BLOOD_PRESSURE,
    "bloodpressure": VitalKind.BLOOD_PRESSURE,
    "hr": VitalKind.HEART_RATE,
    "heart_rate": VitalKind.HEART_RATE,
    "heartrate": VitalKind.HEART_RATE,
    "pulse": VitalKind.HEART_RATE,
    "spo2": VitalKind.SPO2,
    "o2sat": VitalKind.SPO2,
    "oxygen": VitalKind.SPO2,
    "oxygen_saturation": VitalKind.SPO2,
    "temp": VitalKind.TEMPERATURE,
    "temperature": VitalKind.TEMPERATURE,
    "glucose": VitalKind.GLUCOSE,
    "blood_glucose": VitalKind.GLUCOSE,
    "weight": VitalKind.WEIGHT,
}


@dataclass(frozen=True)
class VitalRange:
    """Normal band plus a wider band beyond which a reading is high severity"""
    normal_min: float
    normal_max: float
    wide_min: float
    wide_max: float
    unit: str


# Bounds are inclusive; a value beyond a wide bound is high severity
VITAL_REFERENCE_RANGES: Dict[VitalKind, VitalRange] = {
    VitalKind.HEART_RATE: VitalRange(60, 100, 40, 150, "bpm"),
    VitalKind.SPO2: VitalRange(95, 100, 90, 100, "%"),
    VitalKind.TEMPERATURE: VitalRange(97.0, 99.0, 95.0, 103.0, "°F"),
    VitalKind.GLUCOSE: VitalRange(70, 180, 70, 250, "mg/dL"),
}

BP_SYSTOLIC_NORMAL_BELOW = 130
BP_DIASTOLIC_NORMAL_BELOW = 80
BP_SYSTOLIC_WIDE_MAX = 180
BP_DIASTOLIC_WIDE_MAX = 120

_MMOL_TO_MG_DL = 18.0
_BP_PATTERN = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*/\s*(\d+(?:\.\d+)?)\s*$")


def resolve_kind(kind: Union[str, VitalKind]) -> Optional[VitalKind]:
    """Map a stored kind spelling to a VitalKind, None if unrecognised"""
    if isinstance(kind, VitalKind):
        return kind
    if not isinstance(kind, str):
        return None
    return KIND_ALIASES.get(kind.strip().lower().replace("-", "_").replace(" ", "_"))


def parse_blood_pressure(value: VitalValue) -> Optional[Tuple[float, float]]:
    """(systolic, diastolic) from a pair or a "128/78" string"""
    if isinstance(value, (tuple, list)) and len(value) == 2:
        try:
            return float(value[0]), float(value[1])
        except (TypeError, ValueError):
            return None
    if isinstance(value, str):
        match = _BP_PATTERN.match(value)
        if match:
            return float(match.group(1)), float(match.group(2))
    return None


def _as_number(value: VitalValue) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return None
    return None


def normalize_value(kind: Union[str, VitalKind], value: VitalValue, unit: str = "") -> VitalValue:
    """
    Convert a reading to the unit of its reference table.

    Celsius temperatures become Fahrenheit and mmol/L glucose becomes mg/dL;
    everything else is returned unchanged.
    """
    resolved = resolve_kind(kind)
    number = _as_number(value)
    if number is None or not unit:
        return value

    normalized_unit = unit.strip().lower().replace("°", "")
    if resolved == VitalKind.TEMPERATURE and normalized_unit in ("c", "celsius"):
        return round(number * 9 / 5 + 32, 1)
    if resolved == VitalKind.GLUCOSE and normalized_unit in ("mmol/l", "mmol"):
        return round(number * _MMOL_TO_MG_DL, 1)
    return value


def classify_vital(kind: Union[str, VitalKind], value: VitalValue) -> RangeClassification:
    """Classify a reading as normal, abnormal, or unknown when no table applies"""
    resolved = resolve_kind(kind)

    if resolved == VitalKind.BLOOD_PRESSURE:
        bp = parse_blood_pressure(value)
        if bp is None:
            return RangeClassification.UNKNOWN
        systolic, diastolic = bp
        if systolic < BP_SYSTOLIC_NORMAL_BELOW and diastolic < BP_DIASTOLIC_NORMAL_BELOW:
            return RangeClassification.NORMAL
        return RangeClassification.ABNORMAL

    reference = VITAL_REFERENCE_RANGES.get(resolved) if resolved else None
    number = _as_number(value)
    if reference is None or number is None:
        return RangeClassification.UNKNOWN

    if reference.normal_min <= number <= reference.normal_max:
        return RangeClassification.NORMAL
    return RangeClassification.ABNORMAL


def vital_severity(kind: Union[str, VitalKind], value: VitalValue) -> Optional[Severity]:
    """
    Severity of an abnormal reading: high beyond the wide band, else medium.
    Returns None for normal or unknown readings.
    """
    if classify_vital(kind, value) != RangeClassification.ABNORMAL:
        return None

    resolved = resolve_kind(kind)
    if resolved == VitalKind.BLOOD_PRESSURE:
        systolic, diastolic = parse_blood_pressure(value)
        if systolic > BP_SYSTOLIC_WIDE_MAX or diastolic > BP_DIASTOLIC_WIDE_MAX:
            return Severity.HIGH
        return Severity.MEDIUM

    reference = VITAL_REFERENCE_RANGES[resolved]
    number = _as_number(value)
    if number < reference.wide_min or number > reference.wide_max:
        return Severity.HIGH
    return Severity.MEDIUM
