"""
Schedule Service
Composes persisted medicines and dose records with the dosing engine
"""

import logging
from typing import Iterable, List, Optional, Union
from dataclasses import dataclass
from datetime import datetime, date
from sqlalchemy.orm import Session

from config import settings, local_now
import models
from dosing import (
    DaySchedule,
    DoseGroup,
    ExpandedDose,
    Language,
    TodayStatus,
    Weekday,
    apply_dose_overrides,
    build_dose_overrides,
    calculate_today_status,
    expand_medicine_doses,
    generate_schedule_for_date,
    generate_week_schedule,
    group_doses_by_time,
    keys_for_dose_ids,
    sort_doses_for_display,
    summarize_schedule,
    week_start_for,
)
from models import DoseRecordStatus
from services.dose_record_service import dose_record_service, to_entities
from services.medicine_service import medicine_service


logger = logging.getLogger(__name__)


@dataclass
class TodayDoses:
    """Everything the daily dose list needs"""
    doses: List[ExpandedDose]
    groups: List[DoseGroup]
    status: TodayStatus


def configured_week_start() -> Weekday:
    return Weekday[settings.WEEK_STARTS_ON.upper()]


class ScheduleService:
    """
    Service for daily and weekly dose schedules
    """

    async def get_today_doses(
        self,
        user_id: str,
        language: Union[Language, str, None] = None,
        now: Optional[datetime] = None,
        local_taken: Iterable[str] = (),
        local_skipped: Iterable[str] = (),
        local_undone: Iterable[str] = (),
        db: Optional[Session] = None
    ) -> TodayDoses:
        """
        Build today's dose list for a user

        Args:
            user_id: Subject user
            language: Label language (default: configured language)
            now: Current moment (default: configured timezone's wall clock)
            local_taken: Dose ids the client marked taken but has not synced
            local_skipped: Dose ids the client marked skipped
            local_undone: Dose ids the client reverted
            db: Database session

        Returns:
            Sorted doses, display groups and status counts
        """
        language = Language.coerce(language or settings.DEFAULT_LANGUAGE)
        now = now or local_now()
        today = now.date()

        medicines = await medicine_service.get_schedulable_medicines(user_id, db=db)
        records = to_entities(await dose_record_service.get_today_records(user_id, today, db=db))

        doses = expand_medicine_doses(medicines, now, language)
        taken_keys = keys_for_dose_ids(doses, local_taken)
        skipped_keys = keys_for_dose_ids(doses, local_skipped)
        undone_keys = keys_for_dose_ids(doses, local_undone)

        overrides = build_dose_overrides(
            records,
            today,
            local_taken=taken_keys,
            local_skipped=skipped_keys,
            local_undone=undone_keys
        )
        doses = apply_dose_overrides(doses, overrides)

        # Local actions supersede the fetched record for the same dose
        locally_changed = taken_keys | skipped_keys | undone_keys
        unchanged_records = [
            r for r in records if (r.medicine_id, r.scheduled_time) not in locally_changed
        ]

        return TodayDoses(
            doses=sort_doses_for_display(doses),
            groups=group_doses_by_time(doses, language),
            status=calculate_today_status(doses, unchanged_records, today)
        )

    async def get_schedule_for_date(
        self,
        user_id: str,
        target_date: date,
        now: Optional[datetime] = None,
        db: Optional[Session] = None
    ) -> DaySchedule:
        """Full schedule of one calendar day, past, present or future"""
        now = now or local_now()

        medicines = await medicine_service.get_schedulable_medicines(user_id, db=db)
        records = await dose_record_service.get_user_dose_records(
            user_id, target_date, target_date, db=db
        )

        items = generate_schedule_for_date(medicines, target_date, to_entities(records), now)
        return DaySchedule(
            day=target_date,
            weekday=Weekday(target_date.weekday()),
            items=items,
            summary=summarize_schedule(items)
        )

    async def get_week_schedule(
        self,
        user_id: str,
        week_start: Optional[date] = None,
        now: Optional[datetime] = None,
        db: Optional[Session] = None
    ) -> List[DaySchedule]:
        """Seven day schedules; defaults to the week containing today"""
        now = now or local_now()
        week_start = week_start or week_start_for(now.date(), configured_week_start())

        medicines = await medicine_service.get_schedulable_medicines(user_id, db=db)
        records = await dose_record_service.get_week_records(user_id, week_start, db=db)

        return generate_week_schedule(medicines, week_start, to_entities(records), now)

    async def has_missed_on_date(
        self,
        user_id: str,
        target_date: date,
        now: Optional[datetime] = None,
        db: Optional[Session] = None
    ) -> bool:
        schedule = await self.get_schedule_for_date(user_id, target_date, now, db)
        return schedule.has_missed

    async def _record_outcome(
        self,
        medicine_id: int,
        user_id: str,
        scheduled_time: str,
        status: DoseRecordStatus,
        note: Optional[str],
        now: Optional[datetime],
        db: Optional[Session]
    ) -> models.DoseRecord:
        now = now or local_now()
        record = await dose_record_service.get_or_create_today_record(
            medicine_id, user_id, scheduled_time, today=now.date(), db=db
        )

        updates = {'status': status, 'taken_at': now if status == DoseRecordStatus.TAKEN else None}
        if note is not None:
            updates['note'] = note

        updated = await dose_record_service.update_record(record.id, updates, db)
        if not updated:
            raise ValueError(f"Dose record {record.id} disappeared during update")
        return updated

    async def take_dose(
        self,
        medicine_id: int,
        user_id: str,
        scheduled_time: str,
        note: Optional[str] = None,
        now: Optional[datetime] = None,
        db: Optional[Session] = None
    ) -> models.DoseRecord:
        """Mark today's dose as taken, creating its record when absent"""
        record = await self._record_outcome(
            medicine_id, user_id, scheduled_time, DoseRecordStatus.TAKEN, note, now, db
        )
        logger.info(f"User {user_id} took medicine {medicine_id} at {record.scheduled_time}")
        return record

    async def skip_dose(
        self,
        medicine_id: int,
        user_id: str,
        scheduled_time: str,
        note: Optional[str] = None,
        now: Optional[datetime] = None,
        db: Optional[Session] = None
    ) -> models.DoseRecord:
        return await self._record_outcome(
            medicine_id, user_id, scheduled_time, DoseRecordStatus.SKIPPED, note, now, db
        )

    async def undo_dose(
        self,
        medicine_id: int,
        user_id: str,
        scheduled_time: str,
        now: Optional[datetime] = None,
        db: Optional[Session] = None
    ) -> models.DoseRecord:
        """Revert today's dose to pending"""
        return await self._record_outcome(
            medicine_id, user_id, scheduled_time, DoseRecordStatus.PENDING, None, now, db
        )


# Singleton instance
schedule_service = ScheduleService()
