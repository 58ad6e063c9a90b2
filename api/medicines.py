"""
Medicines API Router
Endpoints for medicine management
"""

from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session

from api.deps import get_db, services
from api.schemas.medicine import (
    MedicineCreate,
    MedicineUpdate,
    MedicineStatusUpdate,
    MedicineResponse,
    MedicineList,
)
from models import MedicineStatus


router = APIRouter(prefix="/medicines", tags=["medicines"])


@router.post("/", response_model=MedicineResponse, status_code=status.HTTP_201_CREATED)
async def create_medicine(
    medicine_data: MedicineCreate,
    db: Session = Depends(get_db)
):
    """
    Add a new medicine for a user

    - **user_id**: Owner of the medicine
    - **name**: Medicine name
    - **dosage**: Dosage (e.g., "500mg")
    - **times**: Daily dose times ("08:00", "08:00 PM", "오후 08:00"); empty for as-needed
    """
    medicine_service = services.get_medicine_service()

    medicine = await medicine_service.add_medicine(
        user_id=medicine_data.user_id,
        name=medicine_data.name,
        dosage=medicine_data.dosage,
        times=medicine_data.times,
        type=medicine_data.type,
        color=medicine_data.color,
        frequency=medicine_data.frequency,
        generic_name=medicine_data.generic_name,
        instructions=medicine_data.instructions,
        notes=medicine_data.notes,
        start_date=medicine_data.start_date,
        end_date=medicine_data.end_date,
        duration_days=medicine_data.duration_days,
        db=db
    )
    return medicine


@router.get("/user/{user_id}", response_model=MedicineList)
async def get_user_medicines(
    user_id: str,
    status_filter: Optional[MedicineStatus] = Query(None, alias="status", description="Only medicines with this status"),
    db: Session = Depends(get_db)
):
    """
    Get all medicines of a user
    """
    medicine_service = services.get_medicine_service()

    medicines = await medicine_service.get_user_medicines(user_id, status=status_filter, db=db)

    return MedicineList(
        medicines=[MedicineResponse.model_validate(m) for m in medicines],
        total=len(medicines),
        active_count=sum(1 for m in medicines if m.status == MedicineStatus.ACTIVE)
    )


@router.get("/{medicine_id}", response_model=MedicineResponse)
async def get_medicine(
    medicine_id: int,
    db: Session = Depends(get_db)
):
    medicine_service = services.get_medicine_service()

    medicine = await medicine_service.get_medicine(medicine_id, db=db)
    if not medicine:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Medicine {medicine_id} not found"
        )

    return medicine


@router.put("/{medicine_id}", response_model=MedicineResponse)
async def update_medicine(
    medicine_id: int,
    updates: MedicineUpdate,
    db: Session = Depends(get_db)
):
    """
    Update medicine information
    """
    medicine_service = services.get_medicine_service()

    medicine = await medicine_service.update_medicine(
        medicine_id,
        updates.model_dump(exclude_unset=True),
        db=db
    )

    if not medicine:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Medicine {medicine_id} not found"
        )

    return medicine


@router.put("/{medicine_id}/status", response_model=MedicineResponse)
async def set_medicine_status(
    medicine_id: int,
    status_data: MedicineStatusUpdate,
    db: Session = Depends(get_db)
):
    """
    Pause, resume, complete or discontinue a medicine

    Only active medicines appear in daily and weekly schedules.
    """
    medicine_service = services.get_medicine_service()

    medicine = await medicine_service.set_status(medicine_id, status_data.status, db=db)

    if not medicine:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Medicine {medicine_id} not found"
        )

    return medicine


@router.delete("/{medicine_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_medicine(
    medicine_id: int,
    db: Session = Depends(get_db)
):
    """
    Delete a medicine and all of its dose records
    """
    medicine_service = services.get_medicine_service()

    deleted = await medicine_service.delete_medicine(medicine_id, db=db)
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Medicine {medicine_id} not found"
        )
