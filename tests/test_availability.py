from datetime import datetime

import pytest
from fastapi import HTTPException
from sqlalchemy.exc import OperationalError

from randevu.exceptions import AvailabilityCheckFailedError, SlotUnavailableError, NotFoundError, ForbiddenError
from randevu.models.appointment_model import Appointment
from randevu.schemas.appointment_schema import AppointmentStatus, ServiceSnapshot
from randevu.schemas.working_hours_schema import WorkingHoursSet
from randevu.services.appointment_crud import AppointmentCRUD, appointment_crud
from randevu.services.working_hours_crud import working_hours_crud

from tests.conftest import FUTURE_DATE, make_user

SNAPSHOT = ServiceSnapshot(name="Saç Kesimi", price="250.00", duration_minutes=30)
NOW = datetime(2099, 3, 2, 8, 0)


def book(db, customer, barber, time="14:00", employee=None, date=FUTURE_DATE):
    return appointment_crud.create_appointment(
        db, customer.id, barber.id, employee.id if employee else None, SNAPSHOT, date, time, now=NOW
    )


def test_free_slot_books_pending(db, customer, barber):
    assert appointment_crud.check_availability(db, barber.id, None, FUTURE_DATE, "14:00", now=NOW)

    appointment = book(db, customer, barber)

    assert appointment.status == AppointmentStatus.pending.value
    assert appointment.service_name == "Saç Kesimi"
    assert appointment.service_duration == 30
    assert appointment.is_reviewed is False
    assert not appointment_crud.check_availability(db, barber.id, None, FUTURE_DATE, "14:00", now=NOW)


def test_occupied_slot_is_rejected(db, customer, other_customer, barber):
    book(db, customer, barber)

    with pytest.raises(SlotUnavailableError):
        book(db, other_customer, barber)

    assert db.query(Appointment).count() == 1


def test_exact_match_ignores_duration(db, customer, other_customer, barber):
    long_service = ServiceSnapshot(name="Perma", price="900.00", duration_minutes=120)
    appointment_crud.create_appointment(
        db, customer.id, barber.id, None, long_service, FUTURE_DATE, "14:00", now=NOW
    )

    assert appointment_crud.check_availability(db, barber.id, None, FUTURE_DATE, "14:30", now=NOW)
    assert book(db, other_customer, barber, time="14:30").status == "pending"


def test_other_barber_and_other_day_are_independent(db, customer, barber):
    other_barber = make_user(db, "barber", first_name="Kemal")
    book(db, customer, barber)

    assert appointment_crud.check_availability(db, other_barber.id, None, FUTURE_DATE, "14:00", now=NOW)
    assert appointment_crud.check_availability(db, barber.id, None, "2099-03-03", "14:00", now=NOW)


def test_employee_narrows_the_check(db, customer, other_customer, barber, employee):
    second_employee = make_user(db, "employee", first_name="Can", barber_id=barber.id)
    book(db, customer, barber, employee=employee)

    assert not appointment_crud.check_availability(db, barber.id, employee.id, FUTURE_DATE, "14:00", now=NOW)
    assert appointment_crud.check_availability(db, barber.id, second_employee.id, FUTURE_DATE, "14:00", now=NOW)
    # Without an employee the whole barber is checked
    assert not appointment_crud.check_availability(db, barber.id, None, FUTURE_DATE, "14:00", now=NOW)

    book(db, other_customer, barber, employee=second_employee)


def test_terminal_status_releases_slot(db, customer, other_customer, barber):
    appointment = book(db, customer, barber)
    appointment_crud.update_appointment_status(db, appointment.id, customer, AppointmentStatus.cancelled)

    assert appointment.slot_key is None
    assert appointment_crud.check_availability(db, barber.id, None, FUTURE_DATE, "14:00", now=NOW)
    assert book(db, other_customer, barber).status == "pending"


def test_confirmed_appointment_keeps_slot(db, customer, barber):
    appointment = book(db, customer, barber)
    appointment_crud.update_appointment_status(db, appointment.id, barber, AppointmentStatus.confirmed)

    assert not appointment_crud.check_availability(db, barber.id, None, FUTURE_DATE, "14:00", now=NOW)


def test_past_slot_is_unavailable(db, customer, barber):
    later = datetime(2099, 3, 2, 15, 0)
    assert not appointment_crud.check_availability(db, barber.id, None, FUTURE_DATE, "14:00", now=later)

    with pytest.raises(SlotUnavailableError):
        appointment_crud.create_appointment(
            db, customer.id, barber.id, None, SNAPSHOT, FUTURE_DATE, "14:00", now=later
        )


def test_store_failure_fails_closed(db, barber, monkeypatch):
    def broken_query(*args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("database is locked"))

    monkeypatch.setattr(db, "query", broken_query)

    with pytest.raises(AvailabilityCheckFailedError) as exc_info:
        appointment_crud.check_availability(db, barber.id, None, FUTURE_DATE, "14:00", now=NOW)
    assert exc_info.value.status_code == 503


def test_concurrent_booking_is_rejected_by_slot_key(db, customer, other_customer, barber, monkeypatch):
    book(db, customer, barber)
    # Simulate the second writer passing its check before the first commit
    monkeypatch.setattr(AppointmentCRUD, "check_availability", staticmethod(lambda *args, **kwargs: True))

    with pytest.raises(SlotUnavailableError):
        book(db, other_customer, barber)

    assert db.query(Appointment).count() == 1


def test_only_customers_can_book(db, barber):
    other_barber = make_user(db, "barber", first_name="Kemal")
    with pytest.raises(ForbiddenError):
        book(db, other_barber, barber)


def test_employee_must_belong_to_barber(db, customer, barber):
    other_barber = make_user(db, "barber", first_name="Kemal")
    foreign_employee = make_user(db, "employee", first_name="Deniz", barber_id=other_barber.id)

    with pytest.raises(NotFoundError):
        book(db, customer, barber, employee=foreign_employee)


def _set_hours(db, barber, date, start="09:00", end="12:00", is_available=True):
    day_of_week = (datetime.strptime(date, "%Y-%m-%d").weekday() + 1) % 7
    working_hours_crud.set_working_hours(db, barber.id, [WorkingHoursSet(
        day_of_week=day_of_week, start_time=start, end_time=end, is_available=is_available,
    )])


def test_available_slots_follow_working_hours(db, customer, barber):
    _set_hours(db, barber, FUTURE_DATE)
    book(db, customer, barber, time="10:00")

    slots = appointment_crud.get_available_slots(db, barber.id, FUTURE_DATE, 60, now=NOW)

    assert slots == ["09:00", "09:30", "10:30", "11:00"]


def test_available_slots_skip_past_times(db, barber):
    _set_hours(db, barber, FUTURE_DATE)

    slots = appointment_crud.get_available_slots(
        db, barber.id, FUTURE_DATE, 30, now=datetime(2099, 3, 2, 10, 15)
    )

    assert slots == ["10:30", "11:00", "11:30"]


def test_no_slots_on_closed_day(db, barber):
    _set_hours(db, barber, FUTURE_DATE, is_available=False)
    assert appointment_crud.get_available_slots(db, barber.id, FUTURE_DATE, 30, now=NOW) == []
    assert appointment_crud.get_available_slots(db, barber.id, "2099-03-03", 30, now=NOW) == []


def test_failed_status_write_keeps_prior_state(db, outbox, customer, barber, monkeypatch):
    appointment = book(db, customer, barber)
    key = appointment.slot_key
    outbox.sent.clear()

    def broken_commit():
        raise OperationalError("UPDATE", {}, Exception("disk I/O error"))

    monkeypatch.setattr(db, "commit", broken_commit)

    with pytest.raises(HTTPException) as exc_info:
        appointment_crud.update_appointment_status(db, appointment.id, customer, AppointmentStatus.cancelled)

    assert exc_info.value.status_code == 500
    db.expire_all()
    stored = db.query(Appointment).filter(Appointment.id == appointment.id).one()
    assert stored.status == AppointmentStatus.pending.value
    assert stored.slot_key == key
    assert outbox.sent == []
    assert not appointment_crud.check_availability(db, barber.id, None, FUTURE_DATE, "14:00", now=NOW)
