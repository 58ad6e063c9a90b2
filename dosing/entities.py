"""
Dose Schedule Entities
Input records and derived value types shared by the engine modules
"""

from typing import List, Optional
from dataclasses import dataclass, field
from datetime import datetime, date
from enum import Enum, IntEnum


# ==================== ENUMS ====================

class MedicineType(str, Enum):
    """Physical form of a medicine"""
    TABLET = "tablet"
    CAPSULE = "capsule"
    LIQUID = "liquid"
    INJECTION = "injection"
    CREAM = "cream"
    INHALER = "inhaler"
    OTHER = "other"


class MedicineStatus(str, Enum):
    """Lifecycle of a medicine; only active medicines produce doses"""
    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"
    DISCONTINUED = "discontinued"


class DoseRecordStatus(str, Enum):
    """Persisted outcome of a scheduled dose"""
    PENDING = "pending"
    TAKEN = "taken"
    SKIPPED = "skipped"
    MISSED = "missed"


class DoseStatus(str, Enum):
    """Derived status of an expanded dose for the current day"""
    UPCOMING = "upcoming"       # More than 30 min before the scheduled time
    PENDING = "pending"         # From 30 min before until 15 min after
    OVERDUE = "overdue"         # More than 15 min after
    TAKEN = "taken"
    SKIPPED = "skipped"         # Only ever set by record/local overrides
    AS_NEEDED = "as-needed"

    @property
    def is_completed(self) -> bool:
        return self in (DoseStatus.TAKEN, DoseStatus.SKIPPED)


class ScheduleStatus(str, Enum):
    """Status of an item in a per-date schedule"""
    TAKEN = "taken"
    MISSED = "missed"
    PENDING = "pending"
    UPCOMING = "upcoming"


class Period(str, Enum):
    """Coarse time-of-day bucket"""
    MORNING = "morning"         # [00, 12)
    AFTERNOON = "afternoon"     # [12, 17)
    EVENING = "evening"         # [17, 21)
    NIGHT = "night"             # [21, 24)


class Weekday(IntEnum):
    """Days of week as ordinals, matching date.weekday()"""
    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6


def calendar_day(value) -> date:
    """Reduce a date or datetime to its calendar day"""
    if isinstance(value, datetime):
        return value.date()
    return value


# ==================== INPUT RECORDS ====================

@dataclass
class Medicine:
    """A prescribed or as-needed medication definition"""
    id: str
    name: str
    dosage: str
    times: List[str] = field(default_factory=list)  # ["08:00", "20:00"]; empty = as needed
    type: MedicineType = MedicineType.TABLET
    status: MedicineStatus = MedicineStatus.ACTIVE
    color: str = ""
    user_id: Optional[str] = None
    generic_name: Optional[str] = None
    frequency: Optional[str] = None
    instructions: Optional[str] = None
    notes: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @property
    def is_as_needed(self) -> bool:
        return not self.times


@dataclass
class DoseRecord:
    """Evidence that a scheduled dose was acted upon on a given date"""
    medicine_id: str
    scheduled_date: date
    scheduled_time: str  # 24-hour "HH:MM"
    status: DoseRecordStatus = DoseRecordStatus.PENDING
    taken_at: Optional[datetime] = None
    id: Optional[str] = None
    user_id: Optional[str] = None
    note: Optional[str] = None

    @property
    def scheduled_day(self) -> date:
        return calendar_day(self.scheduled_date)


# ==================== DERIVED VALUES ====================

@dataclass
class ExpandedDose:
    """One concrete instance of a medicine at one time today"""
    medicine: Medicine
    dose_time: str              # 24-hour format
    dose_time_formatted: str    # Localized display time or "as needed" label
    dose_index: int
    total_doses: int
    dose_status: DoseStatus
    dose_id: str

    @property
    def original_medicine_id(self) -> str:
        return self.medicine.id

    @property
    def name(self) -> str:
        return self.medicine.name

    @property
    def dosage(self) -> str:
        return self.medicine.dosage


@dataclass
class DoseGroup:
    """Doses sharing a clock time, or the synthetic overdue bucket"""
    time: str
    time_formatted: str
    doses: List[ExpandedDose] = field(default_factory=list)


@dataclass
class TodayStatus:
    """Aggregate dose counts for one subject over the current day"""
    total: int = 0
    taken: int = 0
    overdue: int = 0
    pending: int = 0
    upcoming: int = 0


@dataclass
class ScheduleItem:
    """A dose in a generated per-date schedule"""
    id: str
    medicine_id: str
    name: str
    time: str
    dosage: str
    status: ScheduleStatus
    period: Period
    taken_at: Optional[datetime] = None
