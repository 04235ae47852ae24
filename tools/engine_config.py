"""
Engine Configuration
Explicit, immutable tunables threaded into the timeline engine at construction
"""

from datetime import time, timedelta
from typing import Any, Dict, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator

from tools.care_models import ItemKind, OverduePolicy


DEFAULT_POLICY_TABLE: Dict[ItemKind, OverduePolicy] = {
    ItemKind.MEDICATION: OverduePolicy.STRICT,
    ItemKind.VITALS: OverduePolicy.STRICT,
    ItemKind.APPOINTMENT: OverduePolicy.STRICT,
    ItemKind.WELLNESS: OverduePolicy.SOFT,
    ItemKind.NOTE: OverduePolicy.SOFT,
}

DEFAULT_DECLINE_METRICS: Tuple[str, ...] = (
    "mood",
    "energy",
    "sleep_hours",
    "medication_adherence",
)


class EngineConfig(BaseModel):
    """Configuration value for the care timeline engine"""

    model_config = ConfigDict(frozen=True)

    grace_period_minutes: int = Field(default=30, ge=0)

    # Window start boundaries; each window ends where the next one starts
    morning_start: time = time(5, 0)
    afternoon_start: time = time(12, 0)
    evening_start: time = time(17, 0)
    night_start: time = time(21, 0)

    tomorrow_preview_limit: int = Field(default=3, ge=0)
    completion_debounce_seconds: float = Field(default=2.0, ge=0)
    red_flag_min_days: int = Field(default=3, ge=3)
    decline_metrics: Tuple[str, ...] = DEFAULT_DECLINE_METRICS
    mark_missed_after_day_end: bool = False
    policy_table: Dict[ItemKind, OverduePolicy] = Field(
        default_factory=lambda: dict(DEFAULT_POLICY_TABLE)
    )

    @model_validator(mode="after")
    def _check_boundaries(self) -> "EngineConfig":
        starts = [self.morning_start, self.afternoon_start, self.evening_start, self.night_start]
        if any(a >= b for a, b in zip(starts, starts[1:])):
            raise ValueError(
                "Window boundaries must be strictly ascending: "
                "morning < afternoon < evening < night"
            )
        missing = [kind.value for kind in ItemKind if kind not in self.policy_table]
        if missing:
            raise ValueError(f"Policy table has no entry for item kinds: {', '.join(missing)}")
        return self

    @property
    def grace_period(self) -> timedelta:
        return timedelta(minutes=self.grace_period_minutes)

    @property
    def completion_debounce(self) -> timedelta:
        return timedelta(seconds=self.completion_debounce_seconds)

    @classmethod
    def from_settings(cls, settings: Any) -> "EngineConfig":
        """Build the engine configuration from application settings"""
        return cls(
            grace_period_minutes=settings.GRACE_PERIOD_MINUTES,
            morning_start=settings.MORNING_START,
            afternoon_start=settings.AFTERNOON_START,
            evening_start=settings.EVENING_START,
            night_start=settings.NIGHT_START,
            tomorrow_preview_limit=settings.TOMORROW_PREVIEW_LIMIT,
            completion_debounce_seconds=settings.COMPLETION_DEBOUNCE_SECONDS,
            red_flag_min_days=settings.RED_FLAG_MIN_DAYS,
            mark_missed_after_day_end=settings.MARK_MISSED_AFTER_DAY_END,
        )


default_engine_config = EngineConfig()
