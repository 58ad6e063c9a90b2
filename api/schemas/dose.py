"""
Dose Schemas
Pydantic models for today's doses and dose record actions
"""

from typing import Optional, List
from datetime import datetime, date
from pydantic import BaseModel, Field, ConfigDict, field_validator

from dosing import (
    DoseGroup,
    DoseRecordStatus,
    DoseStatus,
    ExpandedDose,
    MedicineType,
    is_valid_time,
)


# ==================== REQUEST SCHEMAS ====================

class DoseAction(BaseModel):
    """Schema for taking, skipping or undoing today's dose"""
    medicine_id: int
    user_id: str = Field(..., min_length=1, max_length=128)
    scheduled_time: str = Field(..., description="Dose time, 12- or 24-hour form")
    note: Optional[str] = Field(None, max_length=500)

    @field_validator('scheduled_time')
    @classmethod
    def validate_scheduled_time(cls, v):
        if not is_valid_time(v):
            raise ValueError(f"Invalid dose time: {v}")
        return v


# ==================== RESPONSE SCHEMAS ====================

class DoseRecordResponse(BaseModel):
    """Schema for a persisted dose record"""
    id: int
    medicine_id: int
    user_id: str
    scheduled_date: date
    scheduled_time: str
    status: DoseRecordStatus
    taken_at: Optional[datetime] = None
    note: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class DoseRecordList(BaseModel):
    """List of dose records"""
    user_id: str
    records: List[DoseRecordResponse]
    total: int


class ExpandedDoseResponse(BaseModel):
    """One dose instance of today's list"""
    dose_id: str
    medicine_id: str
    name: str
    dosage: str
    type: MedicineType
    color: str = ""
    dose_time: str
    dose_time_formatted: str
    dose_index: int
    total_doses: int
    dose_status: DoseStatus

    @classmethod
    def from_dose(cls, dose: ExpandedDose) -> "ExpandedDoseResponse":
        return cls(
            dose_id=dose.dose_id,
            medicine_id=dose.original_medicine_id,
            name=dose.name,
            dosage=dose.dosage,
            type=dose.medicine.type,
            color=dose.medicine.color,
            dose_time=dose.dose_time,
            dose_time_formatted=dose.dose_time_formatted,
            dose_index=dose.dose_index,
            total_doses=dose.total_doses,
            dose_status=dose.dose_status
        )


class DoseGroupResponse(BaseModel):
    """Doses sharing a time, or the overdue group"""
    time: str
    time_formatted: str
    doses: List[ExpandedDoseResponse]

    @classmethod
    def from_group(cls, group: DoseGroup) -> "DoseGroupResponse":
        return cls(
            time=group.time,
            time_formatted=group.time_formatted,
            doses=[ExpandedDoseResponse.from_dose(d) for d in group.doses]
        )


class TodayStatusResponse(BaseModel):
    """Today's dose counts"""
    total: int
    taken: int
    overdue: int
    pending: int
    upcoming: int

    model_config = ConfigDict(from_attributes=True)


class TodayDosesResponse(BaseModel):
    """Today's doses for a user"""
    user_id: str
    day: date
    language: str
    doses: List[ExpandedDoseResponse]
    groups: List[DoseGroupResponse]
    status: TodayStatusResponse
