"""
Dose Record Service
Read and write path for per-date dose outcomes
"""

import logging
from typing import Dict, Iterable, List, Optional, Any
from datetime import datetime, date, timedelta
from sqlalchemy.orm import Session

from database import get_db_context
from config import local_now
import models
from dosing import DoseRecord as DoseRecordEntity
from dosing.time_parsing import MIDNIGHT_24H, parse_time_to_24hour
from models import DoseRecordStatus, MedicineStatus


logger = logging.getLogger(__name__)


def to_entities(records: Iterable[models.DoseRecord]) -> List[DoseRecordEntity]:
    return [r.to_entity() for r in records]


def scheduled_times(medicine: models.Medicine) -> List[str]:
    """24-hour times a medicine can be recorded at; as-needed doses sit at midnight"""
    times = [parse_time_to_24hour(t) for t in (medicine.times or [])]
    return times or [MIDNIGHT_24H]


class DoseRecordService:
    """
    Service for dose record persistence
    """

    async def get_or_create_today_record(
        self,
        medicine_id: int,
        user_id: str,
        scheduled_time: str,
        today: Optional[date] = None,
        db: Optional[Session] = None
    ) -> models.DoseRecord:
        """
        Get today's record for a dose, creating a pending one if needed

        Args:
            medicine_id: Medicine ID
            user_id: Owner of the medicine
            scheduled_time: Dose time (12- or 24-hour form)
            today: Calendar day of the record (default: local today)
            db: Database session

        Returns:
            Existing or newly created DoseRecord
        """
        time24 = parse_time_to_24hour(scheduled_time)
        today = today or local_now().date()

        def _get_or_create(session: Session) -> models.DoseRecord:
            medicine = session.query(models.Medicine).filter(
                models.Medicine.id == medicine_id
            ).first()

            if not medicine or medicine.user_id != user_id:
                raise ValueError(f"Medicine {medicine_id} not found for user {user_id}")

            if medicine.status != MedicineStatus.ACTIVE:
                raise ValueError(f"Medicine {medicine_id} is {medicine.status.value}, not scheduled")

            if time24 not in scheduled_times(medicine):
                raise ValueError(f"Medicine {medicine_id} has no dose at {time24}")

            record = session.query(models.DoseRecord).filter(
                models.DoseRecord.medicine_id == medicine_id,
                models.DoseRecord.scheduled_date == today,
                models.DoseRecord.scheduled_time == time24
            ).first()

            if record:
                return record

            record = models.DoseRecord(
                medicine_id=medicine_id,
                user_id=user_id,
                scheduled_date=today,
                scheduled_time=time24,
                status=DoseRecordStatus.PENDING
            )
            session.add(record)
            session.commit()
            session.refresh(record)

            logger.info(f"Created dose record {record.id} for medicine {medicine_id} at {time24} on {today}")
            return record

        if db:
            return _get_or_create(db)

        with get_db_context() as session:
            return _get_or_create(session)

    async def get_record(
        self,
        record_id: int,
        db: Optional[Session] = None
    ) -> Optional[models.DoseRecord]:
        """Get dose record by ID"""
        def _get(session: Session) -> Optional[models.DoseRecord]:
            return session.query(models.DoseRecord).filter(
                models.DoseRecord.id == record_id
            ).first()

        if db:
            return _get(db)

        with get_db_context() as session:
            return _get(session)

    async def update_record(
        self,
        record_id: int,
        updates: Dict[str, Any],
        db: Optional[Session] = None
    ) -> Optional[models.DoseRecord]:
        """
        Update a dose record

        Only a taken record keeps a taken_at timestamp; a taken record without
        one is stamped with the current local time.
        """
        def _update(session: Session) -> Optional[models.DoseRecord]:
            record = session.query(models.DoseRecord).filter(
                models.DoseRecord.id == record_id
            ).first()

            if not record:
                logger.warning(f"Dose record {record_id} not found for update")
                return None

            allowed_fields = {'status', 'taken_at', 'note'}
            for field, value in updates.items():
                if field in allowed_fields:
                    setattr(record, field, value)

            if record.status == DoseRecordStatus.TAKEN:
                record.taken_at = record.taken_at or local_now()
            else:
                record.taken_at = None

            record.updated_at = datetime.utcnow()
            session.commit()
            session.refresh(record)

            logger.info(f"Dose record {record_id} is now {record.status.value}")
            return record

        if db:
            return _update(db)

        with get_db_context() as session:
            return _update(session)

    async def mark_taken(
        self,
        record_id: int,
        note: Optional[str] = None,
        taken_at: Optional[datetime] = None,
        db: Optional[Session] = None
    ) -> Optional[models.DoseRecord]:
        updates: Dict[str, Any] = {'status': DoseRecordStatus.TAKEN, 'taken_at': taken_at or local_now()}
        if note is not None:
            updates['note'] = note
        return await self.update_record(record_id, updates, db)

    async def mark_skipped(
        self,
        record_id: int,
        note: Optional[str] = None,
        db: Optional[Session] = None
    ) -> Optional[models.DoseRecord]:
        updates: Dict[str, Any] = {'status': DoseRecordStatus.SKIPPED}
        if note is not None:
            updates['note'] = note
        return await self.update_record(record_id, updates, db)

    async def mark_missed(
        self,
        record_id: int,
        note: Optional[str] = None,
        db: Optional[Session] = None
    ) -> Optional[models.DoseRecord]:
        updates: Dict[str, Any] = {'status': DoseRecordStatus.MISSED}
        if note is not None:
            updates['note'] = note
        return await self.update_record(record_id, updates, db)

    async def get_user_dose_records(
        self,
        user_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        status: Optional[DoseRecordStatus] = None,
        db: Optional[Session] = None
    ) -> List[models.DoseRecord]:
        """
        Get a user's dose records, most recent first

        Args:
            user_id: Owner of the records
            start_date: First day to include
            end_date: Last day to include
            status: Only records with this status
            db: Database session
        """
        def _get(session: Session) -> List[models.DoseRecord]:
            query = session.query(models.DoseRecord).filter(
                models.DoseRecord.user_id == user_id
            )

            if start_date:
                query = query.filter(models.DoseRecord.scheduled_date >= start_date)
            if end_date:
                query = query.filter(models.DoseRecord.scheduled_date <= end_date)
            if status:
                query = query.filter(models.DoseRecord.status == status)

            return query.order_by(
                models.DoseRecord.scheduled_date.desc(),
                models.DoseRecord.scheduled_time.desc()
            ).all()

        if db:
            return _get(db)

        with get_db_context() as session:
            return _get(session)

    async def get_today_records(
        self,
        user_id: str,
        today: Optional[date] = None,
        db: Optional[Session] = None
    ) -> List[models.DoseRecord]:
        today = today or local_now().date()
        return await self.get_user_dose_records(user_id, today, today, db=db)

    async def get_week_records(
        self,
        user_id: str,
        week_start: date,
        db: Optional[Session] = None
    ) -> List[models.DoseRecord]:
        return await self.get_user_dose_records(
            user_id, week_start, week_start + timedelta(days=6), db=db
        )

    async def get_medicine_records(
        self,
        medicine_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        db: Optional[Session] = None
    ) -> List[models.DoseRecord]:
        """Get all records of one medicine, most recent first"""
        def _get(session: Session) -> List[models.DoseRecord]:
            query = session.query(models.DoseRecord).filter(
                models.DoseRecord.medicine_id == medicine_id
            )

            if start_date:
                query = query.filter(models.DoseRecord.scheduled_date >= start_date)
            if end_date:
                query = query.filter(models.DoseRecord.scheduled_date <= end_date)

            return query.order_by(
                models.DoseRecord.scheduled_date.desc(),
                models.DoseRecord.scheduled_time.desc()
            ).all()

        if db:
            return _get(db)

        with get_db_context() as session:
            return _get(session)


# Singleton instance
dose_record_service = DoseRecordService()
