"""
Dosing Package
Pure dose-schedule derivation engine for the DoseMinder system
"""

from .entities import (
    Medicine,
    MedicineType,
    MedicineStatus,
    DoseRecord,
    DoseRecordStatus,
    DoseStatus,
    ExpandedDose,
    DoseGroup,
    TodayStatus,
    ScheduleItem,
    ScheduleStatus,
    Period,
    Weekday,
)

from .i18n import Language, label

from .time_parsing import (
    parse_time_to_minutes,
    parse_time_to_24hour,
    format_time_to_12hour,
    minutes_since_midnight,
    period_for_time,
    is_valid_time,
)

from .dose_status import (
    calculate_dose_status,
    PENDING_WINDOW_BEFORE,
    PENDING_WINDOW_AFTER,
)

from .expansion import (
    expand_medicine_doses,
    schedulable_medicines,
)

from .reconciliation import (
    DoseKey,
    DoseTakenResult,
    filter_today_dose_records,
    is_dose_taken_today,
    keys_for_dose_ids,
    build_dose_overrides,
    apply_dose_overrides,
)

from .grouping import (
    sort_doses_for_display,
    group_doses_by_time,
    calculate_today_status,
)

from .adherence import (
    AdherenceStats,
    AdherenceLevel,
    UserStats,
    MedicineWithStats,
    calculate_adherence_stats,
    calculate_adherence_for_range,
    calculate_user_stats,
    adherence_level,
    get_next_dose_time,
    enrich_medicine_with_stats,
)

from .daily_schedule import (
    ScheduleSummary,
    DaySchedule,
    generate_schedule_for_date,
    has_missed_medications_on_date,
    summarize_schedule,
    generate_week_schedule,
    week_start_for,
)

__all__ = [
    # Entities
    "Medicine",
    "MedicineType",
    "MedicineStatus",
    "DoseRecord",
    "DoseRecordStatus",
    "DoseStatus",
    "ExpandedDose",
    "DoseGroup",
    "TodayStatus",
    "ScheduleItem",
    "ScheduleStatus",
    "Period",
    "Weekday",

    # Localization
    "Language",
    "label",

    # Time Parsing
    "parse_time_to_minutes",
    "parse_time_to_24hour",
    "format_time_to_12hour",
    "minutes_since_midnight",
    "period_for_time",
    "is_valid_time",

    # Dose Status
    "calculate_dose_status",
    "PENDING_WINDOW_BEFORE",
    "PENDING_WINDOW_AFTER",

    # Expansion
    "expand_medicine_doses",
    "schedulable_medicines",

    # Reconciliation
    "DoseKey",
    "DoseTakenResult",
    "filter_today_dose_records",
    "is_dose_taken_today",
    "keys_for_dose_ids",
    "build_dose_overrides",
    "apply_dose_overrides",

    # Grouping & Aggregation
    "sort_doses_for_display",
    "group_doses_by_time",
    "calculate_today_status",

    # Adherence
    "AdherenceStats",
    "AdherenceLevel",
    "UserStats",
    "MedicineWithStats",
    "calculate_adherence_stats",
    "calculate_adherence_for_range",
    "calculate_user_stats",
    "adherence_level",
    "get_next_dose_time",
    "enrich_medicine_with_stats",

    # Per-Date Schedules
    "ScheduleSummary",
    "DaySchedule",
    "generate_schedule_for_date",
    "has_missed_medications_on_date",
    "summarize_schedule",
    "generate_week_schedule",
    "week_start_for",
]
