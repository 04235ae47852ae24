"""
Tools Package
Pure care timeline engine for the CareTimeline system
"""

from .care_models import (
    ItemKind,
    OverduePolicy,
    TimeWindow,
    ItemStatus,
    RangeClassification,
    Severity,
    ScheduledItem,
    Medication,
    VitalReading,
    CareNote,
    ActivityEntry,
    DailySample,
    WINDOW_ORDER,
)

from .errors import (
    CareEngineError,
    ItemNotFoundError,
    CompletionConflictError,
    NothingToUndoError,
    InvalidLookbackError,
)

from .engine_config import (
    EngineConfig,
    DEFAULT_POLICY_TABLE,
    default_engine_config,
)

from .time_windows import (
    WindowResolution,
    parse_timestamp,
    resolve_window,
    get_time_window,
    current_window,
    window_bounds,
    window_end,
)

from .vital_ranges import (
    VitalKind,
    VitalRange,
    VITAL_REFERENCE_RANGES,
    classify_vital,
    normalize_value,
    vital_severity,
)

from .status_classifier import (
    ItemClassification,
    classify_item_status,
    classify_items,
)

from .timeline_assembler import (
    DashboardMode,
    DashboardState,
    Timeline,
    TimelineEntry,
    TomorrowPreview,
    assemble_dashboard_state,
    assemble_timeline,
)

from .store import (
    CareDataStore,
    InMemoryCareStore,
)

from .completion import (
    CompletionTransaction,
    CompletionResult,
    UndoResult,
)

from .adherence_calculator import (
    AdherenceRecord,
    adherence_percentage,
    compute_adherence,
    aggregate_adherence,
    daily_adherence_samples,
)

from .trend_detector import (
    FlagType,
    RedFlag,
    detect_red_flags,
    build_daily_vital_samples,
)

from .report_builder import (
    ReportData,
    ReportSummary,
    ClassifiedVital,
    DataQualityWarning,
    WarningCode,
    build_report,
)

from .care_engine import (
    CareEngine,
    create_care_engine,
)

__all__ = [
    # Models
    "ItemKind",
    "OverduePolicy",
    "TimeWindow",
    "ItemStatus",
    "RangeClassification",
    "Severity",
    "ScheduledItem",
    "Medication",
    "VitalReading",
    "CareNote",
    "ActivityEntry",
    "DailySample",
    "WINDOW_ORDER",

    # Errors
    "CareEngineError",
    "ItemNotFoundError",
    "CompletionConflictError",
    "NothingToUndoError",
    "InvalidLookbackError",

    # Configuration
    "EngineConfig",
    "DEFAULT_POLICY_TABLE",
    "default_engine_config",

    # Time Windows
    "WindowResolution",
    "parse_timestamp",
    "resolve_window",
    "get_time_window",
    "current_window",
    "window_bounds",
    "window_end",

    # Vital Ranges
    "VitalKind",
    "VitalRange",
    "VITAL_REFERENCE_RANGES",
    "classify_vital",
    "normalize_value",
    "vital_severity",

    # Status Classifier
    "ItemClassification",
    "classify_item_status",
    "classify_items",

    # Timeline
    "DashboardMode",
    "DashboardState",
    "Timeline",
    "TimelineEntry",
    "TomorrowPreview",
    "assemble_dashboard_state",
    "assemble_timeline",

    # Store
    "CareDataStore",
    "InMemoryCareStore",

    # Completion
    "CompletionTransaction",
    "CompletionResult",
    "UndoResult",

    # Adherence
    "AdherenceRecord",
    "adherence_percentage",
    "compute_adherence",
    "aggregate_adherence",
    "daily_adherence_samples",

    # Trends
    "FlagType",
    "RedFlag",
    "detect_red_flags",
    "build_daily_vital_samples",

    # Reports
    "ReportData",
    "ReportSummary",
    "ClassifiedVital",
    "DataQualityWarning",
    "WarningCode",
    "build_report",

    # Engine
    "CareEngine",
    "create_care_engine",
]
