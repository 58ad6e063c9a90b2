"""
Dose Expansion
Explodes each medicine's daily times into individually addressable doses
"""

from typing import Iterable, List, Optional, Union
from datetime import datetime

from dosing.entities import DoseStatus, ExpandedDose, Medicine, MedicineStatus
from dosing.dose_status import calculate_dose_status
from dosing.i18n import Language, label
from dosing.time_parsing import MIDNIGHT_24H, format_time_to_12hour, parse_time_to_24hour


def make_dose_id(medicine_id: str, dose_index: int) -> str:
    return f"{medicine_id}-dose-{dose_index}"


def schedulable_medicines(medicines: Iterable[Medicine]) -> List[Medicine]:
    """Medicines whose status allows doses to be generated"""
    return [m for m in medicines if m.status == MedicineStatus.ACTIVE]


def expand_medicine_doses(
    medicines: Iterable[Medicine],
    now: Optional[datetime] = None,
    language: Union[Language, str] = Language.KO
) -> List[ExpandedDose]:
    """
    Expand medicines into one dose per scheduled time.

    A medicine without times yields a single as-needed dose. Doses keep the
    medicine's own time order and medicines keep their input order.
    """
    now = now or datetime.now()
    expanded: List[ExpandedDose] = []

    for medicine in medicines:
        if not medicine.times:
            expanded.append(ExpandedDose(
                medicine=medicine,
                dose_time=MIDNIGHT_24H,
                dose_time_formatted=label("as_needed", language),
                dose_index=0,
                total_doses=1,
                dose_status=DoseStatus.AS_NEEDED,
                dose_id=make_dose_id(medicine.id, 0)
            ))
            continue

        for index, time_str in enumerate(medicine.times):
            time24 = parse_time_to_24hour(time_str)
            expanded.append(ExpandedDose(
                medicine=medicine,
                dose_time=time24,
                dose_time_formatted=format_time_to_12hour(time24, language),
                dose_index=index,
                total_doses=len(medicine.times),
                dose_status=calculate_dose_status(time24, now),
                dose_id=make_dose_id(medicine.id, index)
            ))

    return expanded
