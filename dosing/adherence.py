"""
Adherence Statistics
Per-medicine and per-user adherence, streaks and next-dose labels
"""

from typing import Dict, Iterable, List, Optional, Union
from collections import defaultdict
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum

from dosing.entities import DoseRecord, DoseRecordStatus, Medicine, MedicineStatus
from dosing.i18n import Language, label
from dosing.time_parsing import format_time_to_12hour, minutes_since_midnight, parse_time_to_24hour


GOOD_ADHERENCE_THRESHOLD = 90
FAIR_ADHERENCE_THRESHOLD = 70


class AdherenceLevel(str, Enum):
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


@dataclass
class AdherenceStats:
    """Adherence statistics for one medicine"""
    adherence: int
    streak: int
    total_doses: int
    taken_doses: int
    missed_doses: int
    skipped_doses: int


@dataclass
class UserStats:
    """Account-wide statistics across all medicines"""
    total_medicines: int
    active_medicines: int
    overall_adherence: int
    current_streak: int
    total_doses_taken: int


@dataclass
class MedicineWithStats:
    """A medicine enriched with adherence figures for list views"""
    medicine: Medicine
    adherence: int
    streak: int
    total_doses: int
    taken_doses: int
    missed_doses: int
    skipped_doses: int
    next_dose: str
    adherence_level: AdherenceLevel


def adherence_percentage(taken: int, total: int) -> int:
    """
    Rounded percentage of taken doses, half rounding up.

    No data counts as perfect adherence.
    """
    if total <= 0:
        return 100
    return (taken * 200 + total) // (2 * total)


def adherence_level(adherence: int) -> AdherenceLevel:
    if adherence >= GOOD_ADHERENCE_THRESHOLD:
        return AdherenceLevel.GOOD
    if adherence >= FAIR_ADHERENCE_THRESHOLD:
        return AdherenceLevel.FAIR
    return AdherenceLevel.POOR


def _count(records: List[DoseRecord], status: DoseRecordStatus) -> int:
    return sum(1 for r in records if r.status == status)


def calculate_adherence_stats(
    medicine: Medicine,
    dose_records: Iterable[DoseRecord]
) -> AdherenceStats:
    """
    Calculate adherence statistics for a medicine.

    The streak counts taken records from the most recent backwards and stops at
    the first missed or skipped one; pending records are passed over. Records
    on the same day are ordered by dose time.
    """
    records = list(dose_records)
    taken = _count(records, DoseRecordStatus.TAKEN)

    streak = 0
    newest_first = sorted(
        records,
        key=lambda r: (r.scheduled_day, minutes_since_midnight(r.scheduled_time)),
        reverse=True
    )
    for record in newest_first:
        if record.status == DoseRecordStatus.TAKEN:
            streak += 1
        elif record.status in (DoseRecordStatus.MISSED, DoseRecordStatus.SKIPPED):
            break

    return AdherenceStats(
        adherence=adherence_percentage(taken, len(records)),
        streak=streak,
        total_doses=len(records),
        taken_doses=taken,
        missed_doses=_count(records, DoseRecordStatus.MISSED),
        skipped_doses=_count(records, DoseRecordStatus.SKIPPED)
    )


def calculate_adherence_for_range(dose_records: Iterable[DoseRecord]) -> int:
    """Adherence percentage for records already limited to a date range"""
    records = list(dose_records)
    return adherence_percentage(_count(records, DoseRecordStatus.TAKEN), len(records))


def calculate_user_stats(
    medicines: Iterable[Medicine],
    dose_records: Iterable[DoseRecord]
) -> UserStats:
    """
    Calculate account-wide statistics.

    The user streak counts consecutive most-recent days on which every record
    was taken; the first day falling short ends it.
    """
    medicines = list(medicines)
    records = list(dose_records)
    taken = _count(records, DoseRecordStatus.TAKEN)

    by_day: Dict[date, List[DoseRecord]] = defaultdict(list)
    for record in records:
        by_day[record.scheduled_day].append(record)

    streak = 0
    for day in sorted(by_day, reverse=True):
        if all(r.status == DoseRecordStatus.TAKEN for r in by_day[day]):
            streak += 1
        else:
            break

    return UserStats(
        total_medicines=len(medicines),
        active_medicines=sum(1 for m in medicines if m.status == MedicineStatus.ACTIVE),
        overall_adherence=adherence_percentage(taken, len(records)),
        current_streak=streak,
        total_doses_taken=taken
    )


def get_next_dose_time(
    medicine: Medicine,
    language: Union[Language, str] = Language.KO,
    now: Optional[datetime] = None
) -> str:
    """Label for the next dose: a later time today, or tomorrow's first time"""
    if medicine.status == MedicineStatus.COMPLETED:
        return label("completed", language)

    if medicine.status in (MedicineStatus.PAUSED, MedicineStatus.DISCONTINUED):
        return label("paused", language)

    if not medicine.times:
        return label("as_needed", language)

    now = now or datetime.now()
    current = minutes_since_midnight(now)

    for time_str in medicine.times:
        time24 = parse_time_to_24hour(time_str)
        if minutes_since_midnight(time24) > current:
            return format_time_to_12hour(time24, language)

    first = format_time_to_12hour(parse_time_to_24hour(medicine.times[0]), language)
    return f"{label('tomorrow', language)} {first}"


def enrich_medicine_with_stats(
    medicine: Medicine,
    dose_records: Iterable[DoseRecord],
    language: Union[Language, str] = Language.KO,
    now: Optional[datetime] = None
) -> MedicineWithStats:
    stats = calculate_adherence_stats(medicine, dose_records)

    return MedicineWithStats(
        medicine=medicine,
        adherence=stats.adherence,
        streak=stats.streak,
        total_doses=stats.total_doses,
        taken_doses=stats.taken_doses,
        missed_doses=stats.missed_doses,
        skipped_doses=stats.skipped_doses,
        next_dose=get_next_dose_time(medicine, language, now),
        adherence_level=adherence_level(stats.adherence)
    )
