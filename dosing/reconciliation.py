"""
Dose Record Reconciliation
Matches expanded doses against persisted dose records and optimistic local
actions, overriding the time-derived status with ground truth.
"""

import logging
from typing import Dict, Iterable, List, Optional, Set, Tuple
from dataclasses import dataclass, replace
from datetime import date

from dosing.entities import DoseRecord, DoseRecordStatus, DoseStatus, ExpandedDose


logger = logging.getLogger(__name__)


# (medicine_id, scheduled_time in 24-hour form)
DoseKey = Tuple[str, str]

_RECORD_OVERRIDES = {
    DoseRecordStatus.TAKEN: DoseStatus.TAKEN,
    DoseRecordStatus.SKIPPED: DoseStatus.SKIPPED,
}


@dataclass
class DoseTakenResult:
    """Outcome of a taken-today lookup"""
    taken: bool
    record: Optional[DoseRecord] = None


def dose_key(dose: ExpandedDose) -> DoseKey:
    return dose.original_medicine_id, dose.dose_time


def filter_today_dose_records(
    medicine_id: str,
    dose_records: Iterable[DoseRecord],
    today: Optional[date] = None
) -> List[DoseRecord]:
    """Records of one medicine whose scheduled date is today"""
    today = today or date.today()
    return [
        record for record in dose_records
        if record.medicine_id == medicine_id and record.scheduled_day == today
    ]


def is_dose_taken_today(
    medicine_id: str,
    scheduled_time: str,
    dose_records: Iterable[DoseRecord],
    today: Optional[date] = None
) -> DoseTakenResult:
    """Check whether a specific dose has a taken record for today"""
    for record in filter_today_dose_records(medicine_id, dose_records, today):
        if record.scheduled_time == scheduled_time and record.status == DoseRecordStatus.TAKEN:
            return DoseTakenResult(taken=True, record=record)

    return DoseTakenResult(taken=False)


def keys_for_dose_ids(doses: Iterable[ExpandedDose], dose_ids: Iterable[str]) -> Set[DoseKey]:
    """Translate client-side dose ids into reconciliation keys"""
    wanted = set(dose_ids)
    return {dose_key(d) for d in doses if d.dose_id in wanted}


def build_dose_overrides(
    dose_records: Iterable[DoseRecord],
    today: Optional[date] = None,
    local_taken: Iterable[DoseKey] = (),
    local_skipped: Iterable[DoseKey] = (),
    local_undone: Iterable[DoseKey] = ()
) -> Dict[DoseKey, DoseStatus]:
    """
    Merge today's persisted records and local optimistic actions into one
    override table.

    A local action and a persisted record for the same outcome are
    interchangeable. Local actions are newer than any fetched record, so they
    replace a record's outcome; an undone key drops any override. When a key is
    both taken and skipped locally, taken wins.
    """
    today = today or date.today()
    overrides: Dict[DoseKey, DoseStatus] = {}

    for record in dose_records:
        if record.scheduled_day != today:
            continue
        status = _RECORD_OVERRIDES.get(record.status)
        if status is not None:
            overrides[(record.medicine_id, record.scheduled_time)] = status

    for key in local_undone:
        overrides.pop(key, None)
    for key in local_skipped:
        overrides[key] = DoseStatus.SKIPPED
    for key in local_taken:
        overrides[key] = DoseStatus.TAKEN

    return overrides


def apply_dose_overrides(
    doses: Iterable[ExpandedDose],
    overrides: Dict[DoseKey, DoseStatus]
) -> List[ExpandedDose]:
    """Return doses with taken/skipped status forced where an override exists"""
    reconciled = []
    for dose in doses:
        status = overrides.get(dose_key(dose))
        if status is not None and status != dose.dose_status:
            logger.debug(f"Dose {dose.dose_id} overridden to {status.value}")
            dose = replace(dose, dose_status=status)
        reconciled.append(dose)
    return reconciled
