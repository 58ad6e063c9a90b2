"""
Adherence Service
Adherence statistics over persisted dose records
"""

import logging
from typing import List, Optional, Tuple, Union
from datetime import datetime, date, timedelta
from sqlalchemy.orm import Session

from config import settings, schedule_config, local_now
from dosing import (
    Language,
    MedicineWithStats,
    UserStats,
    calculate_adherence_for_range,
    calculate_user_stats,
    enrich_medicine_with_stats,
)
from services.dose_record_service import dose_record_service, to_entities
from services.medicine_service import medicine_service


logger = logging.getLogger(__name__)


def history_window(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None
) -> Tuple[date, date]:
    """Resolve an open date range to the configured history window ending today"""
    end_date = end_date or local_now().date()
    start_date = start_date or end_date - timedelta(days=schedule_config.HISTORY_WINDOW_DAYS - 1)

    if start_date > end_date:
        raise ValueError(f"Start date {start_date} is after end date {end_date}")
    return start_date, end_date


class AdherenceService:
    """
    Service for adherence tracking and analysis
    """

    async def get_medicine_stats(
        self,
        medicine_id: int,
        language: Union[Language, str, None] = None,
        now: Optional[datetime] = None,
        db: Optional[Session] = None
    ) -> MedicineWithStats:
        """
        Get a medicine enriched with adherence, streak and next dose label

        Raises:
            ValueError: If the medicine does not exist
        """
        language = Language.coerce(language or settings.DEFAULT_LANGUAGE)

        medicine = await medicine_service.get_medicine(medicine_id, db=db)
        if not medicine:
            raise ValueError(f"Medicine {medicine_id} not found")

        records = await dose_record_service.get_medicine_records(medicine_id, db=db)
        return enrich_medicine_with_stats(
            medicine.to_entity(), to_entities(records), language, now or local_now()
        )

    async def get_user_medicines_with_stats(
        self,
        user_id: str,
        language: Union[Language, str, None] = None,
        now: Optional[datetime] = None,
        db: Optional[Session] = None
    ) -> List[MedicineWithStats]:
        """Every medicine of a user, enriched for list views"""
        language = Language.coerce(language or settings.DEFAULT_LANGUAGE)
        now = now or local_now()

        medicines = await medicine_service.get_user_medicines(user_id, db=db)
        records = to_entities(await dose_record_service.get_user_dose_records(user_id, db=db))

        enriched = []
        for medicine in medicines:
            entity = medicine.to_entity()
            own = [r for r in records if r.medicine_id == entity.id]
            enriched.append(enrich_medicine_with_stats(entity, own, language, now))

        return enriched

    async def get_user_stats(
        self,
        user_id: str,
        db: Optional[Session] = None
    ) -> UserStats:
        """Account-wide adherence, streak and medicine counts"""
        medicines = await medicine_service.get_user_medicines(user_id, db=db)
        records = await dose_record_service.get_user_dose_records(user_id, db=db)

        stats = calculate_user_stats(
            [m.to_entity() for m in medicines], to_entities(records)
        )
        logger.debug(f"User {user_id}: {stats.overall_adherence}% over {len(records)} records")
        return stats

    async def get_range_adherence(
        self,
        user_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        db: Optional[Session] = None
    ) -> int:
        """
        Adherence percentage over a date range

        Defaults to the configured history window ending today.
        """
        start_date, end_date = history_window(start_date, end_date)

        records = await dose_record_service.get_user_dose_records(
            user_id, start_date, end_date, db=db
        )
        return calculate_adherence_for_range(to_entities(records))


# Singleton instance
adherence_service = AdherenceService()
