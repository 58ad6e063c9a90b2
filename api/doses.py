"""
Doses API Router
Endpoints for today's dose list and dose actions
"""

from typing import List, Optional
from datetime import date
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session

from api.deps import get_db, get_language, services
from api.schemas.dose import (
    DoseAction,
    DoseRecordResponse,
    DoseRecordList,
    ExpandedDoseResponse,
    DoseGroupResponse,
    TodayStatusResponse,
    TodayDosesResponse,
)
from config import local_now
from dosing import Language
from models import DoseRecordStatus


router = APIRouter(prefix="/doses", tags=["doses"])


@router.get("/today/{user_id}", response_model=TodayDosesResponse)
async def get_today_doses(
    user_id: str,
    taken: List[str] = Query([], description="Dose ids marked taken locally but not yet synced"),
    skipped: List[str] = Query([], description="Dose ids marked skipped locally"),
    undone: List[str] = Query([], description="Dose ids reverted locally"),
    language: Language = Depends(get_language),
    db: Session = Depends(get_db)
):
    """
    Get today's doses for a user

    Returns the display-sorted list, the time groups (overdue first) and the
    status counts. Persisted records and the local overrides both force taken
    or skipped status.
    """
    schedule_service = services.get_schedule_service()

    now = local_now()
    today = await schedule_service.get_today_doses(
        user_id,
        language=language,
        now=now,
        local_taken=taken,
        local_skipped=skipped,
        local_undone=undone,
        db=db
    )

    return TodayDosesResponse(
        user_id=user_id,
        day=now.date(),
        language=language.value,
        doses=[ExpandedDoseResponse.from_dose(d) for d in today.doses],
        groups=[DoseGroupResponse.from_group(g) for g in today.groups],
        status=TodayStatusResponse.model_validate(today.status)
    )


@router.post("/take", response_model=DoseRecordResponse)
async def take_dose(
    action: DoseAction,
    db: Session = Depends(get_db)
):
    """
    Mark today's dose as taken

    - **medicine_id**: Medicine ID
    - **user_id**: Owner of the medicine
    - **scheduled_time**: The dose's time
    """
    schedule_service = services.get_schedule_service()

    try:
        return await schedule_service.take_dose(
            action.medicine_id,
            action.user_id,
            action.scheduled_time,
            note=action.note,
            db=db
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )


@router.post("/skip", response_model=DoseRecordResponse)
async def skip_dose(
    action: DoseAction,
    db: Session = Depends(get_db)
):
    schedule_service = services.get_schedule_service()

    try:
        return await schedule_service.skip_dose(
            action.medicine_id,
            action.user_id,
            action.scheduled_time,
            note=action.note,
            db=db
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )


@router.post("/undo", response_model=DoseRecordResponse)
async def undo_dose(
    action: DoseAction,
    db: Session = Depends(get_db)
):
    """
    Revert today's dose to pending
    """
    schedule_service = services.get_schedule_service()

    try:
        return await schedule_service.undo_dose(
            action.medicine_id,
            action.user_id,
            action.scheduled_time,
            db=db
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )


@router.get("/records/{user_id}", response_model=DoseRecordList)
async def get_dose_records(
    user_id: str,
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    status_filter: Optional[DoseRecordStatus] = Query(None, alias="status"),
    db: Session = Depends(get_db)
):
    """
    Get a user's dose records, most recent first
    """
    dose_record_service = services.get_dose_record_service()

    records = await dose_record_service.get_user_dose_records(
        user_id,
        start_date=start_date,
        end_date=end_date,
        status=status_filter,
        db=db
    )

    return DoseRecordList(
        user_id=user_id,
        records=[DoseRecordResponse.model_validate(r) for r in records],
        total=len(records)
    )
