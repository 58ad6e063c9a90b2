"""
Medicine Service
Business logic for medicine management
"""

import logging
from typing import Dict, List, Optional, Any
from datetime import datetime, date
from sqlalchemy.orm import Session

from database import get_db_context
from config import local_now
import models
from dosing import Medicine as MedicineEntity, schedulable_medicines
from dosing.i18n import is_as_needed_text
from dosing.time_parsing import parse_time_to_24hour
from models import MedicineStatus, MedicineType


logger = logging.getLogger(__name__)


def normalize_times(times: Optional[List[str]]) -> List[str]:
    """Normalize dose times to 24-hour form; "as needed" entries are dropped"""
    return [
        parse_time_to_24hour(t)
        for t in (times or [])
        if t and not is_as_needed_text(t)
    ]


class MedicineService:
    """
    Service for medicine-related operations
    """

    async def add_medicine(
        self,
        user_id: str,
        name: str,
        dosage: str,
        times: Optional[List[str]] = None,
        type: MedicineType = MedicineType.TABLET,
        color: str = "",
        frequency: Optional[str] = None,
        generic_name: Optional[str] = None,
        instructions: Optional[str] = None,
        notes: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        duration_days: Optional[int] = None,
        db: Optional[Session] = None
    ) -> models.Medicine:
        """
        Add a new medicine for a user

        Args:
            user_id: Owner of the medicine
            name: Medicine name
            dosage: Dosage (e.g., "500mg")
            times: Daily dose times; empty for as-needed
            type: Physical form
            color: Display color
            frequency: Frequency description (e.g., "2x daily")
            generic_name: Generic drug name
            instructions: Special instructions
            notes: Free-form notes
            start_date: Start date (default: today)
            end_date: End date (if temporary)
            duration_days: Planned duration in days
            db: Database session

        Returns:
            Created Medicine object
        """
        def _add(session: Session) -> models.Medicine:
            medicine = models.Medicine(
                user_id=user_id,
                name=name,
                dosage=dosage,
                times=normalize_times(times),
                type=type,
                color=color or "",
                frequency=frequency,
                generic_name=generic_name,
                instructions=instructions,
                notes=notes,
                start_date=start_date or local_now().date(),
                end_date=end_date,
                duration_days=duration_days,
                status=MedicineStatus.ACTIVE
            )

            session.add(medicine)
            session.commit()
            session.refresh(medicine)

            logger.info(f"Added medicine {name} for user {user_id} with {len(medicine.times)} daily doses")
            return medicine

        if db:
            return _add(db)

        with get_db_context() as session:
            return _add(session)

    async def get_medicine(
        self,
        medicine_id: int,
        db: Optional[Session] = None
    ) -> Optional[models.Medicine]:
        """Get medicine by ID"""
        def _get(session: Session) -> Optional[models.Medicine]:
            return session.query(models.Medicine).filter(
                models.Medicine.id == medicine_id
            ).first()

        if db:
            return _get(db)

        with get_db_context() as session:
            return _get(session)

    async def get_user_medicines(
        self,
        user_id: str,
        status: Optional[MedicineStatus] = None,
        db: Optional[Session] = None
    ) -> List[models.Medicine]:
        """Get a user's medicines in creation order, optionally by status"""
        def _get(session: Session) -> List[models.Medicine]:
            query = session.query(models.Medicine).filter(
                models.Medicine.user_id == user_id
            )

            if status:
                query = query.filter(models.Medicine.status == status)

            return query.order_by(models.Medicine.id).all()

        if db:
            return _get(db)

        with get_db_context() as session:
            return _get(session)

    async def get_schedulable_medicines(
        self,
        user_id: str,
        db: Optional[Session] = None
    ) -> List[MedicineEntity]:
        """Engine entities for the medicines that currently produce doses"""
        medicines = await self.get_user_medicines(user_id, db=db)
        return schedulable_medicines(m.to_entity() for m in medicines)

    async def update_medicine(
        self,
        medicine_id: int,
        updates: Dict[str, Any],
        db: Optional[Session] = None
    ) -> Optional[models.Medicine]:
        """Update medicine information"""
        def _update(session: Session) -> Optional[models.Medicine]:
            medicine = session.query(models.Medicine).filter(
                models.Medicine.id == medicine_id
            ).first()

            if not medicine:
                logger.warning(f"Medicine {medicine_id} not found for update")
                return None

            allowed_fields = {
                'name', 'generic_name', 'dosage', 'type', 'color', 'times',
                'frequency', 'instructions', 'notes', 'start_date', 'end_date',
                'duration_days', 'status'
            }

            for field, value in updates.items():
                if field not in allowed_fields:
                    continue
                if field == 'times':
                    value = normalize_times(value)
                setattr(medicine, field, value)

            medicine.updated_at = datetime.utcnow()
            session.commit()
            session.refresh(medicine)

            return medicine

        if db:
            return _update(db)

        with get_db_context() as session:
            return _update(session)

    async def set_status(
        self,
        medicine_id: int,
        status: MedicineStatus,
        db: Optional[Session] = None
    ) -> Optional[models.Medicine]:
        """Pause, resume, complete or discontinue a medicine"""
        updates: Dict[str, Any] = {'status': status}
        if status in (MedicineStatus.COMPLETED, MedicineStatus.DISCONTINUED):
            updates['end_date'] = local_now().date()

        medicine = await self.update_medicine(medicine_id, updates, db)
        if medicine:
            logger.info(f"Medicine {medicine_id} is now {status.value}")
        return medicine

    async def delete_medicine(
        self,
        medicine_id: int,
        db: Optional[Session] = None
    ) -> bool:
        """Delete a medicine together with its dose records"""
        def _delete(session: Session) -> bool:
            medicine = session.query(models.Medicine).filter(
                models.Medicine.id == medicine_id
            ).first()

            if not medicine:
                return False

            record_count = len(medicine.dose_records)
            session.delete(medicine)
            session.commit()

            logger.info(f"Deleted medicine {medicine_id} and {record_count} dose records")
            return True

        if db:
            return _delete(db)

        with get_db_context() as session:
            return _delete(session)


# Singleton instance
medicine_service = MedicineService()
