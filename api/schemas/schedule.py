"""
Schedule Schemas
Pydantic models for per-date and weekly schedules
"""

from typing import Optional, List
from datetime import datetime, date
from pydantic import BaseModel, ConfigDict

from dosing import Period, ScheduleStatus


class ScheduleItemResponse(BaseModel):
    """A dose in a day's schedule"""
    id: str
    medicine_id: str
    name: str
    time: str
    dosage: str
    status: ScheduleStatus
    period: Period
    taken_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ScheduleSummaryResponse(BaseModel):
    total: int
    taken: int
    missed: int
    pending: int
    upcoming: int

    model_config = ConfigDict(from_attributes=True)


class DayScheduleResponse(BaseModel):
    """Schedule of one calendar day"""
    day: date
    weekday: int  # 0=Monday, 6=Sunday
    items: List[ScheduleItemResponse]
    summary: ScheduleSummaryResponse
    has_missed: bool

    model_config = ConfigDict(from_attributes=True)


class WeekScheduleResponse(BaseModel):
    """Seven consecutive day schedules"""
    user_id: str
    week_start: date
    days: List[DayScheduleResponse]


class MissedCheckResponse(BaseModel):
    user_id: str
    day: date
    has_missed: bool
