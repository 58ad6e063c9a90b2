"""
Services Module
Business logic layer for the DoseMinder application
"""

from services.medicine_service import MedicineService, medicine_service
from services.dose_record_service import DoseRecordService, dose_record_service
from services.schedule_service import ScheduleService, schedule_service
from services.adherence_service import AdherenceService, adherence_service


__all__ = [
    # Service classes
    "MedicineService",
    "DoseRecordService",
    "ScheduleService",
    "AdherenceService",
    # Singleton instances
    "medicine_service",
    "dose_record_service",
    "schedule_service",
    "adherence_service",
]
