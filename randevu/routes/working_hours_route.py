from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List
from randevu.services.working_hours_crud import working_hours_crud
from randevu.services.user_crud import user_crud
from randevu.schemas.working_hours_schema import WorkingHoursSet, WorkingHoursResponse
from randevu.database import get_db
from randevu.security.auth import get_current_barber
from randevu.models.user_model import User
from randevu.logger import get_logger

working_hours_router = APIRouter()
logger = get_logger(__name__)


@working_hours_router.put(
    "/working-hours", response_model=List[WorkingHoursResponse], status_code=status.HTTP_200_OK
)
def set_working_hours(
    hours: List[WorkingHoursSet],
    current_user: User = Depends(get_current_barber),
    db: Session = Depends(get_db),
):
    """Create or replace the barber's hours for the given weekdays"""
    try:
        logger.info(f"Barber {current_user.email} setting working hours")
        records = working_hours_crud.set_working_hours(db, current_user.id, hours)
        return [WorkingHoursResponse.model_validate(record) for record in records]

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error setting working hours: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error occurred while setting working hours",
        )


@working_hours_router.get(
    "/barbers/{barber_id}/working-hours", response_model=List[WorkingHoursResponse],
    status_code=status.HTTP_200_OK,
)
def get_working_hours(barber_id: str, db: Session = Depends(get_db)):
    try:
        user_crud.get_barber(db, barber_id)
        records = working_hours_crud.get_working_hours(db, barber_id)
        return [WorkingHoursResponse.model_validate(record) for record in records]

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error fetching working hours of barber {barber_id}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error occurred while fetching working hours",
        )
