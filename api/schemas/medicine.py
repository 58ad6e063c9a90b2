"""
Medicine Schemas
Pydantic models for medicine-related API requests and responses
"""

from typing import Optional, List
from datetime import datetime, date
from pydantic import BaseModel, Field, ConfigDict, field_validator

from dosing import MedicineStatus, MedicineType, is_valid_time


def _check_times(times: Optional[List[str]]) -> Optional[List[str]]:
    if times is None:
        return times
    invalid = [t for t in times if not is_valid_time(t)]
    if invalid:
        raise ValueError(f"Invalid dose time(s): {', '.join(invalid)}")
    return times


# ==================== BASE SCHEMAS ====================

class MedicineBase(BaseModel):
    """Base medicine schema"""
    name: str = Field(..., min_length=1, max_length=255)
    dosage: str = Field(..., min_length=1, max_length=100)
    times: List[str] = Field(default_factory=list, description="Daily dose times; empty for as-needed")


# ==================== REQUEST SCHEMAS ====================

class MedicineCreate(MedicineBase):
    """Schema for creating a new medicine"""
    user_id: str = Field(..., min_length=1, max_length=128)
    type: MedicineType = MedicineType.TABLET
    color: str = Field(default="", max_length=50)
    frequency: Optional[str] = Field(None, max_length=100)
    generic_name: Optional[str] = Field(None, max_length=255)
    instructions: Optional[str] = None
    notes: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    duration_days: Optional[int] = Field(None, ge=1)

    @field_validator('times')
    @classmethod
    def validate_times(cls, v):
        return _check_times(v)


class MedicineUpdate(BaseModel):
    """Schema for updating a medicine"""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    dosage: Optional[str] = Field(None, min_length=1, max_length=100)
    times: Optional[List[str]] = None
    type: Optional[MedicineType] = None
    color: Optional[str] = Field(None, max_length=50)
    frequency: Optional[str] = Field(None, max_length=100)
    generic_name: Optional[str] = Field(None, max_length=255)
    instructions: Optional[str] = None
    notes: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    duration_days: Optional[int] = Field(None, ge=1)

    @field_validator('times')
    @classmethod
    def validate_times(cls, v):
        return _check_times(v)


class MedicineStatusUpdate(BaseModel):
    """Schema for pausing, resuming, completing or discontinuing"""
    status: MedicineStatus


# ==================== RESPONSE SCHEMAS ====================

class MedicineResponse(MedicineBase):
    """Schema for medicine response"""
    id: int
    user_id: str
    type: MedicineType
    status: MedicineStatus
    color: str = ""
    frequency: Optional[str] = None
    generic_name: Optional[str] = None
    instructions: Optional[str] = None
    notes: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    duration_days: Optional[int] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class MedicineList(BaseModel):
    """List of medicines"""
    medicines: List[MedicineResponse]
    total: int
    active_count: int
