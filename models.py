"""
Database Models
SQLAlchemy ORM models for DoseMinder
"""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text, Date, Enum, Index, UniqueConstraint, JSON
from sqlalchemy.orm import relationship
from datetime import datetime

from config import TableNames
from database import Base
from dosing.entities import (
    DoseRecord as DoseRecordEntity,
    DoseRecordStatus,
    Medicine as MedicineEntity,
    MedicineStatus,
    MedicineType,
)


__all__ = [
    "Medicine",
    "DoseRecord",
    "MedicineType",
    "MedicineStatus",
    "DoseRecordStatus",
]


# ==================== MODELS ====================

class Medicine(Base):
    """Medication definition with its daily dose times"""
    __tablename__ = TableNames.MEDICINES

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(128), nullable=False, index=True)  # Opaque subject identifier

    # Identification
    name = Column(String(255), nullable=False)
    generic_name = Column(String(255))
    dosage = Column(String(100), nullable=False)  # e.g., "500mg"
    type = Column(Enum(MedicineType), default=MedicineType.TABLET, nullable=False)
    color = Column(String(50), default="")

    # Schedule: list of 24-hour "HH:MM" strings, empty for as-needed
    times = Column(JSON, default=list)
    frequency = Column(String(100))
    duration_days = Column(Integer)
    start_date = Column(Date)
    end_date = Column(Date)

    # Instructions
    instructions = Column(Text)
    notes = Column(Text)
    prescribed_by = Column(String(255))
    pharmacy = Column(String(255))

    # Status
    status = Column(Enum(MedicineStatus), default=MedicineStatus.ACTIVE, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    dose_records = relationship("DoseRecord", back_populates="medicine", cascade="all, delete-orphan")

    __table_args__ = (
        Index("ix_medicines_user_status", "user_id", "status"),
    )

    def to_entity(self) -> MedicineEntity:
        """Convert to the engine's read-only Medicine"""
        return MedicineEntity(
            id=str(self.id),
            name=self.name,
            dosage=self.dosage,
            times=list(self.times or []),
            type=self.type or MedicineType.OTHER,
            status=self.status or MedicineStatus.ACTIVE,
            color=self.color or "",
            user_id=self.user_id,
            generic_name=self.generic_name,
            frequency=self.frequency,
            instructions=self.instructions,
            notes=self.notes,
            start_date=self.start_date,
            end_date=self.end_date
        )


class DoseRecord(Base):
    """Outcome of one scheduled dose on one date"""
    __tablename__ = TableNames.DOSE_RECORDS

    id = Column(Integer, primary_key=True, index=True)
    medicine_id = Column(Integer, ForeignKey(f"{TableNames.MEDICINES}.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(String(128), nullable=False, index=True)

    # Natural key with medicine_id
    scheduled_date = Column(Date, nullable=False)
    scheduled_time = Column(String(5), nullable=False)  # "08:00", "20:00"

    # Outcome
    status = Column(Enum(DoseRecordStatus), default=DoseRecordStatus.PENDING, nullable=False)
    taken_at = Column(DateTime)
    note = Column(Text)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    medicine = relationship("Medicine", back_populates="dose_records")

    __table_args__ = (
        UniqueConstraint("medicine_id", "scheduled_date", "scheduled_time", name="uq_dose_record_slot"),
        Index("ix_dose_records_user_date", "user_id", "scheduled_date"),
        Index("ix_dose_records_status", "status"),
    )

    def to_entity(self) -> DoseRecordEntity:
        """Convert to the engine's DoseRecord"""
        return DoseRecordEntity(
            medicine_id=str(self.medicine_id),
            scheduled_date=self.scheduled_date,
            scheduled_time=self.scheduled_time,
            status=self.status or DoseRecordStatus.PENDING,
            taken_at=self.taken_at,
            id=str(self.id) if self.id is not None else None,
            user_id=self.user_id,
            note=self.note
        )
