"""
Adherence API Router
Endpoints for adherence statistics
"""

from typing import List, Optional
from datetime import date
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session

from api.deps import get_db, get_language, services
from api.schemas.adherence import (
    MedicineStatsResponse,
    UserStatsResponse,
    RangeAdherenceResponse,
)
from dosing import Language, adherence_level
from services.adherence_service import history_window


router = APIRouter(prefix="/adherence", tags=["adherence"])


@router.get("/medicine/{medicine_id}", response_model=MedicineStatsResponse)
async def get_medicine_stats(
    medicine_id: int,
    language: Language = Depends(get_language),
    db: Session = Depends(get_db)
):
    """
    Get adherence, streak and next dose label for one medicine
    """
    adherence_service = services.get_adherence_service()

    try:
        stats = await adherence_service.get_medicine_stats(medicine_id, language, db=db)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )

    return MedicineStatsResponse.from_stats(stats)


@router.get("/user/{user_id}/medicines", response_model=List[MedicineStatsResponse])
async def get_user_medicines_with_stats(
    user_id: str,
    language: Language = Depends(get_language),
    db: Session = Depends(get_db)
):
    adherence_service = services.get_adherence_service()

    enriched = await adherence_service.get_user_medicines_with_stats(user_id, language, db=db)
    return [MedicineStatsResponse.from_stats(s) for s in enriched]


@router.get("/user/{user_id}", response_model=UserStatsResponse)
async def get_user_stats(
    user_id: str,
    db: Session = Depends(get_db)
):
    """
    Get account-wide adherence and day streak
    """
    adherence_service = services.get_adherence_service()

    stats = await adherence_service.get_user_stats(user_id, db=db)
    return UserStatsResponse.model_validate(stats)


@router.get("/user/{user_id}/range", response_model=RangeAdherenceResponse)
async def get_range_adherence(
    user_id: str,
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    db: Session = Depends(get_db)
):
    """
    Get adherence over a date range (default: the last 30 days)
    """
    adherence_service = services.get_adherence_service()

    try:
        start_date, end_date = history_window(start_date, end_date)
        adherence = await adherence_service.get_range_adherence(
            user_id, start_date, end_date, db=db
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    return RangeAdherenceResponse(
        user_id=user_id,
        start_date=start_date,
        end_date=end_date,
        adherence=adherence,
        adherence_level=adherence_level(adherence)
    )
