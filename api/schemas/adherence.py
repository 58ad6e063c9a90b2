"""
Adherence Schemas
Pydantic models for adherence statistics responses
"""

from datetime import date
from pydantic import BaseModel, ConfigDict

from dosing import AdherenceLevel, MedicineStatus, MedicineWithStats


class MedicineStatsResponse(BaseModel):
    """A medicine with its adherence figures"""
    medicine_id: str
    name: str
    dosage: str
    status: MedicineStatus
    adherence: int
    adherence_level: AdherenceLevel
    streak: int
    total_doses: int
    taken_doses: int
    missed_doses: int
    skipped_doses: int
    next_dose: str

    @classmethod
    def from_stats(cls, stats: MedicineWithStats) -> "MedicineStatsResponse":
        return cls(
            medicine_id=stats.medicine.id,
            name=stats.medicine.name,
            dosage=stats.medicine.dosage,
            status=stats.medicine.status,
            adherence=stats.adherence,
            adherence_level=stats.adherence_level,
            streak=stats.streak,
            total_doses=stats.total_doses,
            taken_doses=stats.taken_doses,
            missed_doses=stats.missed_doses,
            skipped_doses=stats.skipped_doses,
            next_dose=stats.next_dose
        )


class UserStatsResponse(BaseModel):
    """Account-wide statistics"""
    total_medicines: int
    active_medicines: int
    overall_adherence: int
    current_streak: int
    total_doses_taken: int

    model_config = ConfigDict(from_attributes=True)


class RangeAdherenceResponse(BaseModel):
    """Adherence over a date range"""
    user_id: str
    start_date: date
    end_date: date
    adherence: int
    adherence_level: AdherenceLevel
