from datetime import datetime, timedelta
from typing import List, Optional
from zoneinfo import ZoneInfo

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from randevu.config import APP_TIMEZONE
from randevu.exceptions import (
    AvailabilityCheckFailedError,
    ForbiddenError,
    NotFoundError,
    SlotUnavailableError,
)
from randevu.logger import get_logger
from randevu.models.appointment_model import Appointment
from randevu.models.user_model import User
from randevu.notifications.fanout import publish_appointment_event
from randevu.schemas.appointment_schema import (
    ACTIVE_STATUSES,
    AppointmentStatus,
    ServiceSnapshot,
)
from randevu.schemas.user_schema import Role
from randevu.services.appointment_lifecycle import (
    ActorRole,
    AppointmentEvent,
    ensure_transition,
    is_terminal,
    slot_key,
)
from randevu.services.user_crud import user_crud
from randevu.services.working_hours_crud import working_hours_crud

logger = get_logger(__name__)

SLOT_STEP_MINUTES = 30


def local_now() -> datetime:
    """Naive wall-clock time of the salons."""
    return datetime.now(ZoneInfo(APP_TIMEZONE)).replace(tzinfo=None)


def slot_datetime(date: str, time: str) -> datetime:
    return datetime.strptime(f"{date} {time}", "%Y-%m-%d %H:%M")


def _minutes(hh_mm: str) -> int:
    hours, minutes = hh_mm.split(":")
    return int(hours) * 60 + int(minutes)


class AppointmentCRUD:
    @staticmethod
    def _occupied_times(db: Session, barber_id: str, employee_id: Optional[str], date: str) -> set:
        """Times of the day held by pending or confirmed appointments"""
        try:
            query = db.query(Appointment.time).filter(
                Appointment.barber_id == str(barber_id),
                Appointment.date == date,
                Appointment.status.in_([s.value for s in ACTIVE_STATUSES]),
            )
            if employee_id:
                query = query.filter(Appointment.employee_id == str(employee_id))
            return {row.time for row in query.all()}
        except SQLAlchemyError as e:
            logger.error(f"Availability query failed for barber {barber_id} on {date}: {str(e)}")
            raise AvailabilityCheckFailedError()

    @staticmethod
    def check_availability(
            db: Session,
            barber_id: str,
            employee_id: Optional[str],
            date: str,
            time: str,
            now: Optional[datetime] = None,
    ) -> bool:
        """Exact start-time match against appointments that still hold their slot.

        Service durations are not compared. Slots in the past are never available.
        Raises AvailabilityCheckFailedError instead of guessing when the store fails.
        """
        now = now or local_now()
        if slot_datetime(date, time) < now:
            return False
        return time not in AppointmentCRUD._occupied_times(db, barber_id, employee_id, date)

    @staticmethod
    def get_available_slots(
            db: Session,
            barber_id: str,
            date: str,
            duration_minutes: int,
            employee_id: Optional[str] = None,
            now: Optional[datetime] = None,
    ) -> List[str]:
        """Start times every 30 minutes inside the barber's working hours for that day"""
        now = now or local_now()
        day = datetime.strptime(date, "%Y-%m-%d")
        # Working hours use 0 = Sunday
        day_of_week = (day.weekday() + 1) % 7
        hours = working_hours_crud.get_for_day(db, barber_id, day_of_week)
        if hours is None or not hours.is_available:
            return []

        occupied = AppointmentCRUD._occupied_times(db, barber_id, employee_id, date)
        start, end = _minutes(hours.start_time), _minutes(hours.end_time)

        slots = []
        for minute in range(start, end - duration_minutes + 1, SLOT_STEP_MINUTES):
            candidate = f"{minute // 60:02d}:{minute % 60:02d}"
            if candidate in occupied:
                continue
            if day + timedelta(minutes=minute) < now:
                continue
            slots.append(candidate)
        return slots

    @staticmethod
    def create_appointment(
            db: Session,
            customer_id: str,
            barber_id: str,
            employee_id: Optional[str],
            service: ServiceSnapshot,
            date: str,
            time: str,
            notes: Optional[str] = None,
            now: Optional[datetime] = None,
    ) -> Appointment:
        customer = user_crud.get_user_by_id(db, customer_id)
        if not customer:
            raise NotFoundError("Customer not found")
        if customer.role != Role.customer.value:
            raise ForbiddenError("Barbers and employees cannot book appointments")

        user_crud.get_barber(db, barber_id)
        if employee_id:
            employee = user_crud.get_user_by_id(db, employee_id)
            if not employee or employee.role != Role.employee.value or employee.barber_id != str(barber_id):
                raise NotFoundError("Employee not found for this barber")

        if not AppointmentCRUD.check_availability(db, barber_id, employee_id, date, time, now=now):
            raise SlotUnavailableError(f"The slot {date} {time} is not available")

        db_appointment = Appointment(
            customer_id=str(customer_id),
            barber_id=str(barber_id),
            employee_id=str(employee_id) if employee_id else None,
            service_name=service.name,
            service_price=service.price,
            service_duration=service.duration_minutes,
            date=date,
            time=time,
            status=AppointmentStatus.pending.value,
            notes=notes,
            is_reviewed=False,
            slot_key=slot_key(barber_id, employee_id, date, time),
        )
        try:
            db.add(db_appointment)
            db.commit()
            db.refresh(db_appointment)
        except IntegrityError:
            # Another booking for the same slot committed after our check
            db.rollback()
            logger.warning(f"Concurrent booking rejected for slot {db_appointment.slot_key}")
            raise SlotUnavailableError(f"The slot {date} {time} is not available")
        except Exception as e:
            db.rollback()
            logger.error(f"Error creating appointment: {str(e)}")
            raise

        logger.info(f"Appointment created: {db_appointment.id} by customer {customer_id}")
        publish_appointment_event(db, AppointmentEvent(
            appointment_id=db_appointment.id,
            previous_status=None,
            new_status=AppointmentStatus.pending,
            customer_id=db_appointment.customer_id,
            barber_id=db_appointment.barber_id,
            employee_id=db_appointment.employee_id,
        ))
        return db_appointment

    @staticmethod
    def get_appointment_by_id(db: Session, appointment_id: str) -> Optional[Appointment]:
        return db.query(Appointment).filter(Appointment.id == str(appointment_id)).first()

    @staticmethod
    def actor_role_for(appointment: Appointment, user: User) -> ActorRole:
        """Role the user plays on this appointment, or ForbiddenError"""
        if user.role == Role.customer.value and appointment.customer_id == user.id:
            return ActorRole.customer
        if user.role == Role.barber.value and appointment.barber_id == user.id:
            return ActorRole.provider
        if user.role == Role.employee.value and appointment.employee_id == user.id:
            return ActorRole.provider
        raise ForbiddenError("Not authorized to access this appointment")

    @staticmethod
    def get_appointment_for_user(db: Session, appointment_id: str, user: User) -> Appointment:
        appointment = AppointmentCRUD.get_appointment_by_id(db, appointment_id)
        if not appointment:
            raise NotFoundError("Appointment not found")
        AppointmentCRUD.actor_role_for(appointment, user)
        return appointment

    @staticmethod
    def get_appointments_for_user(
            db: Session,
            user: User,
            status: Optional[AppointmentStatus] = None,
            date: Optional[str] = None,
            skip: int = 0,
            limit: int = 100,
    ) -> List[Appointment]:
        query = db.query(Appointment)
        if user.role == Role.customer.value:
            query = query.filter(Appointment.customer_id == user.id)
        elif user.role == Role.barber.value:
            query = query.filter(Appointment.barber_id == user.id)
        else:
            query = query.filter(Appointment.employee_id == user.id)

        if status:
            query = query.filter(Appointment.status == AppointmentStatus(status).value)
        if date:
            query = query.filter(Appointment.date == date)

        return (
            query.order_by(Appointment.date.desc(), Appointment.time.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    @staticmethod
    def update_appointment_status(
            db: Session,
            appointment_id: str,
            actor: User,
            new_status: AppointmentStatus,
    ) -> Appointment:
        new_status = AppointmentStatus(new_status)
        db_appointment = AppointmentCRUD.get_appointment_by_id(db, appointment_id)
        if not db_appointment:
            raise NotFoundError("Appointment not found")

        actor_role = AppointmentCRUD.actor_role_for(db_appointment, actor)
        previous_status = AppointmentStatus(db_appointment.status)

        if previous_status == new_status:
            logger.info(f"Appointment {appointment_id} already {new_status.value}, nothing to do")
            return db_appointment

        ensure_transition(previous_status, new_status, actor_role)

        try:
            db_appointment.status = new_status.value
            if is_terminal(new_status):
                # Release the slot for new bookings
                db_appointment.slot_key = None
            db.commit()
            db.refresh(db_appointment)
        except Exception as e:
            db.rollback()
            logger.error(f"Error updating appointment {appointment_id}: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error occurred while updating appointment status",
            )

        logger.info(
            f"Appointment {appointment_id}: {previous_status.value} -> {new_status.value} "
            f"by {actor_role.value} {actor.id}"
        )
        publish_appointment_event(db, AppointmentEvent(
            appointment_id=db_appointment.id,
            previous_status=previous_status,
            new_status=new_status,
            customer_id=db_appointment.customer_id,
            barber_id=db_appointment.barber_id,
            employee_id=db_appointment.employee_id,
        ))
        return db_appointment


appointment_crud = AppointmentCRUD()
