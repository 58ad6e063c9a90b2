"""
Per-Date Schedule Generation
Builds a full day's schedule (past, present or future) for the weekly calendar
"""

import logging
from typing import Iterable, List, Optional
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta

from dosing.entities import (
    DoseRecord,
    DoseRecordStatus,
    DoseStatus,
    Medicine,
    ScheduleItem,
    ScheduleStatus,
    Weekday,
)
from dosing.dose_status import calculate_dose_status
from dosing.time_parsing import parse_time_to_24hour, parse_time_to_minutes, period_for_time


logger = logging.getLogger(__name__)


DAYS_IN_WEEK = 7

_TODAY_STATUS_MAP = {
    DoseStatus.OVERDUE: ScheduleStatus.MISSED,
    DoseStatus.UPCOMING: ScheduleStatus.UPCOMING,
    DoseStatus.PENDING: ScheduleStatus.PENDING,
}


@dataclass
class ScheduleSummary:
    """Status counts for one generated day"""
    total: int = 0
    taken: int = 0
    missed: int = 0
    pending: int = 0
    upcoming: int = 0


@dataclass
class DaySchedule:
    """One day of the weekly calendar"""
    day: date
    weekday: Weekday
    items: List[ScheduleItem] = field(default_factory=list)
    summary: ScheduleSummary = field(default_factory=ScheduleSummary)

    @property
    def has_missed(self) -> bool:
        return self.summary.missed > 0


def _find_record(
    medicine_id: str,
    time24: str,
    target_date: date,
    dose_records: List[DoseRecord]
) -> Optional[DoseRecord]:
    for record in dose_records:
        if (
            record.medicine_id == medicine_id
            and record.scheduled_time == time24
            and record.scheduled_day == target_date
        ):
            return record
    return None


def _resolve_status(
    record: Optional[DoseRecord],
    time24: str,
    target_date: date,
    now: datetime
) -> ScheduleStatus:
    if record is not None:
        if record.status == DoseRecordStatus.TAKEN:
            return ScheduleStatus.TAKEN
        if record.status in (DoseRecordStatus.MISSED, DoseRecordStatus.SKIPPED):
            return ScheduleStatus.MISSED

    # Pending record or no record: decided by where the day sits relative to today
    today = now.date()
    if target_date == today:
        return _TODAY_STATUS_MAP[calculate_dose_status(time24, now)]
    if target_date < today:
        return ScheduleStatus.MISSED
    return ScheduleStatus.UPCOMING


def generate_schedule_for_date(
    medicines: Iterable[Medicine],
    target_date: date,
    dose_records: Iterable[DoseRecord],
    now: Optional[datetime] = None
) -> List[ScheduleItem]:
    """
    Generate the schedule for one calendar day.

    As-needed medicines (no times) never appear. Day comparisons are by
    calendar date, so a dose just after midnight belongs to its own day.

    Args:
        medicines: Medicines to schedule
        target_date: Day to generate
        dose_records: Records covering at least the target day
        now: Current moment (default: wall clock)

    Returns:
        Items sorted by time of day, stable across medicines
    """
    now = now or datetime.now()
    if isinstance(target_date, datetime):
        target_date = target_date.date()
    dose_records = list(dose_records)

    items: List[ScheduleItem] = []

    for medicine in medicines:
        if not medicine.times:
            continue

        for index, time_str in enumerate(medicine.times):
            time24 = parse_time_to_24hour(time_str)
            record = _find_record(medicine.id, time24, target_date, dose_records)
            status = _resolve_status(record, time24, target_date, now)

            items.append(ScheduleItem(
                id=f"{medicine.id}-{index}",
                medicine_id=medicine.id,
                name=medicine.name,
                time=time24,
                dosage=medicine.dosage,
                status=status,
                period=period_for_time(time24),
                taken_at=record.taken_at if status == ScheduleStatus.TAKEN else None
            ))

    items.sort(key=lambda item: parse_time_to_minutes(item.time))
    return items


def has_missed_medications_on_date(
    medicines: Iterable[Medicine],
    target_date: date,
    dose_records: Iterable[DoseRecord],
    now: Optional[datetime] = None
) -> bool:
    schedule = generate_schedule_for_date(medicines, target_date, dose_records, now)
    return any(item.status == ScheduleStatus.MISSED for item in schedule)


def summarize_schedule(items: Iterable[ScheduleItem]) -> ScheduleSummary:
    summary = ScheduleSummary()
    for item in items:
        summary.total += 1
        if item.status == ScheduleStatus.TAKEN:
            summary.taken += 1
        elif item.status == ScheduleStatus.MISSED:
            summary.missed += 1
        elif item.status == ScheduleStatus.PENDING:
            summary.pending += 1
        else:
            summary.upcoming += 1
    return summary


def week_start_for(day: date, week_starts_on: Weekday = Weekday.MONDAY) -> date:
    """First day of the week containing the given day"""
    offset = (day.weekday() - int(week_starts_on)) % DAYS_IN_WEEK
    return day - timedelta(days=offset)


def generate_week_schedule(
    medicines: Iterable[Medicine],
    week_start: date,
    dose_records: Iterable[DoseRecord],
    now: Optional[datetime] = None
) -> List[DaySchedule]:
    """Generate seven consecutive day schedules starting at week_start"""
    now = now or datetime.now()
    medicines = list(medicines)
    dose_records = list(dose_records)

    week: List[DaySchedule] = []
    for offset in range(DAYS_IN_WEEK):
        day = week_start + timedelta(days=offset)
        items = generate_schedule_for_date(medicines, day, dose_records, now)
        week.append(DaySchedule(
            day=day,
            weekday=Weekday(day.weekday()),
            items=items,
            summary=summarize_schedule(items)
        ))

    logger.debug(f"Generated week schedule from {week_start} for {len(medicines)} medicines")
    return week
