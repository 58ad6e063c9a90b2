"""
Grouping & Aggregation
Display ordering, same-time grouping and daily status counts for expanded doses
"""

from typing import Iterable, List, Optional, Union
from datetime import date

from dosing.entities import DoseGroup, DoseStatus, ExpandedDose, TodayStatus
from dosing.i18n import Language, label
from dosing.reconciliation import is_dose_taken_today
from dosing.time_parsing import format_time_to_12hour, parse_time_to_minutes


OVERDUE_GROUP_KEY = "overdue"


def sort_doses_for_display(doses: Iterable[ExpandedDose]) -> List[ExpandedDose]:
    """
    Order doses for the main daily list.

    Incomplete doses come before taken/skipped ones; each partition is sorted by
    displayed time, which puts as-needed doses first.
    """
    return sorted(
        doses,
        key=lambda d: (d.dose_status.is_completed, parse_time_to_minutes(d.dose_time_formatted))
    )


def group_doses_by_time(
    doses: Iterable[ExpandedDose],
    language: Union[Language, str] = Language.KO
) -> List[DoseGroup]:
    """
    Group doses by clock time, with all overdue doses in a leading group.

    Args:
        doses: Expanded (and usually reconciled) doses
        language: Label language for group headers

    Returns:
        Groups in display order
    """
    doses = list(doses)
    overdue = [d for d in doses if d.dose_status == DoseStatus.OVERDUE]
    scheduled = sorted(
        (d for d in doses if d.dose_status != DoseStatus.OVERDUE),
        key=lambda d: parse_time_to_minutes(d.dose_time)
    )

    groups: List[DoseGroup] = []

    if overdue:
        groups.append(DoseGroup(
            time=OVERDUE_GROUP_KEY,
            time_formatted=label("overdue", language),
            doses=overdue
        ))

    for dose in scheduled:
        if groups and groups[-1].time == dose.dose_time:
            groups[-1].doses.append(dose)
            continue
        groups.append(DoseGroup(
            time=dose.dose_time,
            time_formatted=format_time_to_12hour(dose.dose_time, language),
            doses=[dose]
        ))

    return groups


def calculate_today_status(
    doses: Iterable[ExpandedDose],
    dose_records: Iterable,
    today: Optional[date] = None
) -> TodayStatus:
    """
    Count today's doses by status.

    A taken record wins over the derived status. As-needed and skipped doses
    only count toward the total.
    """
    doses = list(doses)
    dose_records = list(dose_records)
    status = TodayStatus(total=len(doses))

    for dose in doses:
        result = is_dose_taken_today(dose.original_medicine_id, dose.dose_time, dose_records, today)

        if result.taken or dose.dose_status == DoseStatus.TAKEN:
            status.taken += 1
        elif dose.dose_status == DoseStatus.OVERDUE:
            status.overdue += 1
        elif dose.dose_status == DoseStatus.PENDING:
            status.pending += 1
        elif dose.dose_status == DoseStatus.UPCOMING:
            status.upcoming += 1

    return status
