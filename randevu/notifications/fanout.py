"""Turns lifecycle events into notifications for customers and providers."""
from typing import Optional

from sqlalchemy.orm import Session

from randevu.logger import get_logger
from randevu.models.appointment_model import Appointment
from randevu.models.review_model import Review
from randevu.models.user_model import User
from randevu.notifications.dispatcher import NotificationDispatcher, notification_dispatcher
from randevu.schemas.appointment_schema import AppointmentStatus
from randevu.services.appointment_lifecycle import AppointmentEvent

logger = get_logger(__name__)

STATUS_TITLE = "Appointment Status Updated"

# (customer message, provider message) per new status
STATUS_MESSAGES = {
    AppointmentStatus.confirmed: (
        "{barber} confirmed your appointment on {date} at {time}.",
        "You confirmed the appointment of {customer} on {date} at {time}.",
    ),
    AppointmentStatus.rejected: (
        "{barber} rejected your appointment request for {date} at {time}.",
        "You rejected the appointment request of {customer} for {date} at {time}.",
    ),
    AppointmentStatus.cancelled: (
        "Your appointment with {barber} on {date} at {time} was cancelled.",
        "The appointment of {customer} on {date} at {time} was cancelled.",
    ),
    AppointmentStatus.completed: (
        "{barber} marked your appointment on {date} at {time} as completed.",
        "You marked the appointment of {customer} on {date} at {time} as completed.",
    ),
}

CONFIRMATION_EMAIL = (
    "Dear {customer},\n\n"
    "{barber} confirmed your appointment.\n\n"
    "Appointment details:\n"
    "Date: {date}\n"
    "Time: {time}\n"
    "Service: {service}\n\n"
    "Have a nice day."
)


def _name(db: Session, user_id: Optional[str]) -> str:
    user = db.query(User).filter(User.id == str(user_id)).first() if user_id else None
    return user.full_name if user else "Unknown"


def _provider_ids(event: AppointmentEvent):
    ids = [event.barber_id]
    if event.employee_id and event.employee_id != event.barber_id:
        ids.append(event.employee_id)
    return ids


def publish_appointment_event(
    db: Session,
    event: AppointmentEvent,
    dispatcher: NotificationDispatcher = notification_dispatcher,
) -> None:
    """Never raises: the transition has already been committed."""
    try:
        _publish_appointment_event(db, event, dispatcher)
    except Exception as e:
        logger.error(f"Fan-out failed for appointment {event.appointment_id}: {str(e)}")


def _publish_appointment_event(db: Session, event: AppointmentEvent, dispatcher: NotificationDispatcher) -> None:
    appointment = db.query(Appointment).filter(Appointment.id == event.appointment_id).first()
    if appointment is None:
        logger.warning(f"Fan-out skipped, appointment {event.appointment_id} not found")
        return

    context = {
        "barber": _name(db, event.employee_id or event.barber_id),
        "customer": _name(db, event.customer_id),
        "date": appointment.date,
        "time": appointment.time,
        "service": appointment.service_name,
    }
    payload = {"appointmentId": event.appointment_id}

    if event.previous_status is None:
        dispatcher.notify(
            db, event.customer_id, "Appointment Requested",
            "Your appointment request with {barber} on {date} at {time} was sent.".format(**context),
            "appointment", payload,
        )
        for provider_id in _provider_ids(event):
            dispatcher.notify(
                db, provider_id, "New Appointment Request",
                "{customer} requested {service} on {date} at {time}.".format(**context),
                "appointment", payload,
            )
        return

    messages = STATUS_MESSAGES.get(AppointmentStatus(event.new_status))
    if messages is None:
        logger.debug(f"No notification defined for status {event.new_status}")
        return
    customer_message, provider_message = messages

    email_subject = email_body = None
    if event.new_status == AppointmentStatus.confirmed:
        email_subject = "Appointment Confirmed"
        email_body = CONFIRMATION_EMAIL.format(**context)

    dispatcher.notify(
        db, event.customer_id, STATUS_TITLE, customer_message.format(**context),
        "appointment", payload, email_subject=email_subject, email_body=email_body,
    )
    for provider_id in _provider_ids(event):
        dispatcher.notify(
            db, provider_id, STATUS_TITLE, provider_message.format(**context),
            "appointment", payload,
        )

    if event.new_status == AppointmentStatus.completed:
        dispatcher.notify(
            db, event.customer_id, "How was your appointment?",
            "Rate your {service} with {barber} and leave a review.".format(**context),
            "review", {"appointmentId": event.appointment_id, "barberId": event.barber_id},
        )


def publish_review_event(
    db: Session,
    review: Review,
    dispatcher: NotificationDispatcher = notification_dispatcher,
) -> None:
    try:
        dispatcher.notify(
            db, review.barber_id, "New Review",
            f"{_name(db, review.customer_id)} rated you {review.rating}/5.",
            "review", {"appointmentId": review.appointment_id, "reviewId": review.id},
        )
    except Exception as e:
        logger.error(f"Fan-out failed for review {review.id}: {str(e)}")
