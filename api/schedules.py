"""
Schedules API Router
Endpoints for per-date and weekly schedules
"""

from typing import Optional
from datetime import date
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from api.deps import get_db, services
from api.schemas.schedule import (
    DayScheduleResponse,
    WeekScheduleResponse,
    MissedCheckResponse,
)


router = APIRouter(prefix="/schedules", tags=["schedules"])


@router.get("/{user_id}/date/{target_date}", response_model=DayScheduleResponse)
async def get_schedule_for_date(
    user_id: str,
    target_date: date,
    db: Session = Depends(get_db)
):
    """
    Get the schedule of one calendar day

    Past days without a record show as missed, future days as upcoming.
    """
    schedule_service = services.get_schedule_service()

    schedule = await schedule_service.get_schedule_for_date(user_id, target_date, db=db)
    return DayScheduleResponse.model_validate(schedule)


@router.get("/{user_id}/date/{target_date}/missed", response_model=MissedCheckResponse)
async def check_missed_on_date(
    user_id: str,
    target_date: date,
    db: Session = Depends(get_db)
):
    schedule_service = services.get_schedule_service()

    has_missed = await schedule_service.has_missed_on_date(user_id, target_date, db=db)
    return MissedCheckResponse(user_id=user_id, day=target_date, has_missed=has_missed)


@router.get("/{user_id}/week", response_model=WeekScheduleResponse)
async def get_week_schedule(
    user_id: str,
    week_start: Optional[date] = Query(None, description="First day of the week (default: current week)"),
    db: Session = Depends(get_db)
):
    """
    Get seven consecutive day schedules
    """
    schedule_service = services.get_schedule_service()

    days = await schedule_service.get_week_schedule(user_id, week_start=week_start, db=db)

    return WeekScheduleResponse(
        user_id=user_id,
        week_start=days[0].day,
        days=[DayScheduleResponse.model_validate(d) for d in days]
    )
