from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session
from typing import List, Optional
from randevu.services.appointment_crud import appointment_crud
from randevu.services.service_crud import service_crud
from randevu.services.user_crud import user_crud
from randevu.schemas.appointment_schema import (
    AppointmentCreate,
    AppointmentResponse,
    AppointmentStatus,
    AppointmentStatusUpdate,
    AvailabilityResponse,
    AvailableSlotsResponse,
    ServiceSnapshot,
    validate_date_string,
    validate_time_string,
)
from randevu.database import get_db
from randevu.security.auth import get_current_active_user, get_current_customer
from randevu.models.user_model import User
from randevu.logger import get_logger

appointment_router = APIRouter()
logger = get_logger(__name__)


def _validated(validator, value: str) -> str:
    try:
        return validator(value)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))


# AVAILABILITY


@appointment_router.get(
    "/availability", response_model=AvailabilityResponse, status_code=status.HTTP_200_OK
)
def check_availability(
    barber_id: str = Query(..., description="Barber to check"),
    date: str = Query(..., description="YYYY-MM-DD"),
    time: str = Query(..., description="HH:mm"),
    employee_id: Optional[str] = Query(None, description="Narrow the check to one employee"),
    db: Session = Depends(get_db),
):
    """Whether the exact (barber, employee, date, time) slot is free"""
    date = _validated(validate_date_string, date)
    time = _validated(validate_time_string, time)
    try:
        user_crud.get_barber(db, barber_id)
        available = appointment_crud.check_availability(db, barber_id, employee_id, date, time)
        return AvailabilityResponse(
            barber_id=barber_id, employee_id=employee_id, date=date, time=time, available=available
        )

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error checking availability for barber {barber_id}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error occurred while checking availability",
        )


@appointment_router.get(
    "/barbers/{barber_id}/available-slots",
    response_model=AvailableSlotsResponse,
    status_code=status.HTTP_200_OK,
)
def get_available_slots(
    barber_id: str,
    date: str = Query(..., description="YYYY-MM-DD"),
    service_id: str = Query(..., description="Service whose duration must fit"),
    employee_id: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    date = _validated(validate_date_string, date)
    try:
        service = service_crud.get_barber_service(db, service_id, barber_id)
        slots = appointment_crud.get_available_slots(
            db, barber_id, date, service.duration_minutes, employee_id=employee_id
        )
        return AvailableSlotsResponse(
            barber_id=barber_id,
            employee_id=employee_id,
            date=date,
            duration_minutes=service.duration_minutes,
            slots=slots,
        )

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error listing slots for barber {barber_id}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error occurred while listing available slots",
        )


# CUSTOMER ENDPOINTS


@appointment_router.post(
    "/appointments", response_model=AppointmentResponse, status_code=status.HTTP_201_CREATED
)
def create_appointment(
    appointment: AppointmentCreate,
    current_user: User = Depends(get_current_customer),
    db: Session = Depends(get_db),
):
    """Book a slot; the appointment starts as pending"""
    try:
        logger.info(
            f"Customer {current_user.email} booking barber {appointment.barber_id} "
            f"on {appointment.date} {appointment.time}"
        )
        service = service_crud.get_barber_service(db, appointment.service_id, appointment.barber_id)
        snapshot = ServiceSnapshot(
            name=service.name, price=service.price, duration_minutes=service.duration_minutes
        )
        db_appointment = appointment_crud.create_appointment(
            db,
            customer_id=current_user.id,
            barber_id=appointment.barber_id,
            employee_id=appointment.employee_id,
            service=snapshot,
            date=appointment.date,
            time=appointment.time,
            notes=appointment.notes,
        )
        return AppointmentResponse.model_validate(db_appointment)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error creating appointment: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error occurred while creating appointment",
        )


# SHARED ENDPOINTS - customers, barbers and employees see their own appointments


@appointment_router.get(
    "/appointments", response_model=List[AppointmentResponse], status_code=status.HTTP_200_OK
)
def get_appointments(
    skip: int = Query(0, ge=0, description="Number of appointments to skip"),
    limit: int = Query(100, ge=1, le=100, description="Number of appointments to retrieve"),
    appointment_status: Optional[AppointmentStatus] = Query(None, alias="status"),
    date: Optional[str] = Query(None, description="YYYY-MM-DD"),
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    if date:
        date = _validated(validate_date_string, date)
    try:
        appointments = appointment_crud.get_appointments_for_user(
            db, current_user, status=appointment_status, date=date, skip=skip, limit=limit
        )
        return [AppointmentResponse.model_validate(appointment) for appointment in appointments]

    except Exception as e:
        logger.error(f"Error fetching appointments of {current_user.email}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error occurred while fetching appointments",
        )


@appointment_router.get(
    "/appointments/{appointment_id}", response_model=AppointmentResponse, status_code=status.HTTP_200_OK
)
def get_appointment(
    appointment_id: str,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    try:
        appointment = appointment_crud.get_appointment_for_user(db, appointment_id, current_user)
        return AppointmentResponse.model_validate(appointment)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error fetching appointment {appointment_id}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error occurred while fetching appointment",
        )


@appointment_router.patch(
    "/appointments/{appointment_id}/status",
    response_model=AppointmentResponse,
    status_code=status.HTTP_200_OK,
)
def update_appointment_status(
    appointment_id: str,
    status_update: AppointmentStatusUpdate,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    """Customers cancel pending appointments; barbers and employees confirm, reject, complete or cancel"""
    try:
        logger.info(
            f"User {current_user.email} moving appointment {appointment_id} to {status_update.status.value}"
        )
        appointment = appointment_crud.update_appointment_status(
            db, appointment_id, current_user, status_update.status
        )
        return AppointmentResponse.model_validate(appointment)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error updating appointment status {appointment_id}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error occurred while updating appointment status",
        )
