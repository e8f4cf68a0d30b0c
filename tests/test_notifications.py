from datetime import datetime

import pytest

from randevu.models.notification_model import Notification
from randevu.notifications import channels
from randevu.notifications.channels import EmailChannel, PushChannel, RecordChannel
from randevu.notifications.dispatcher import NotificationDispatcher
from randevu.schemas.appointment_schema import AppointmentStatus, ServiceSnapshot
from randevu.services.appointment_crud import appointment_crud

from tests.conftest import FUTURE_DATE, RecordingChannel, auth_headers

SNAPSHOT = ServiceSnapshot(name="Saç Kesimi", price="250.00", duration_minutes=30)
NOW = datetime(2099, 3, 2, 8, 0)


class BrokenChannel(RecordingChannel):
    name = "broken"

    def send(self, *args, **kwargs):
        raise ConnectionError("gateway unreachable")


class FakeSMTP:
    instances = []

    def __init__(self, host, port, timeout=None, **kwargs):
        self.host = host
        self.port = port
        self.timeout = timeout
        self.sent = []
        self.started_tls = False
        FakeSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def starttls(self, context=None):
        self.started_tls = True

    def login(self, username, password):
        self.credentials = (username, password)

    def sendmail(self, from_address, to_addresses, body):
        self.sent.append((from_address, to_addresses, body))


def book(db, customer, barber, employee=None):
    return appointment_crud.create_appointment(
        db, customer.id, barber.id, employee.id if employee else None,
        SNAPSHOT, FUTURE_DATE, "14:00", now=NOW,
    )


def titles_for(outbox, user):
    return [n["title"] for n in outbox.sent if n["user_id"] == user.id]


def test_booking_notifies_customer_and_providers(db, outbox, customer, barber, employee):
    appointment = book(db, customer, barber, employee)

    assert titles_for(outbox, customer) == ["Appointment Requested"]
    assert titles_for(outbox, barber) == ["New Appointment Request"]
    assert titles_for(outbox, employee) == ["New Appointment Request"]
    assert outbox.sent[0]["payload"] == {"appointmentId": appointment.id}
    assert db.query(Notification).count() == 3


def test_confirmation_emails_the_customer(db, outbox, customer, barber):
    appointment = book(db, customer, barber)
    outbox.sent.clear()

    appointment_crud.update_appointment_status(db, appointment.id, barber, AppointmentStatus.confirmed)

    customer_notice = next(n for n in outbox.sent if n["user_id"] == customer.id)
    assert customer_notice["title"] == "Appointment Status Updated"
    assert customer_notice["email_subject"] == "Appointment Confirmed"
    assert "Dear Ayşe Demir" in customer_notice["email_body"]
    assert "Service: Saç Kesimi" in customer_notice["email_body"]
    barber_notice = next(n for n in outbox.sent if n["user_id"] == barber.id)
    assert barber_notice["email_subject"] is None


def test_completion_requests_a_review(db, outbox, customer, barber):
    appointment = book(db, customer, barber)
    appointment_crud.update_appointment_status(db, appointment.id, barber, AppointmentStatus.confirmed)
    outbox.sent.clear()

    appointment_crud.update_appointment_status(db, appointment.id, barber, AppointmentStatus.completed)

    assert titles_for(outbox, customer) == ["Appointment Status Updated", "How was your appointment?"]
    review_request = outbox.sent[-1]
    assert review_request["type"] == "review"
    assert review_request["payload"]["barberId"] == barber.id


def test_failing_channel_does_not_fail_the_transition(db, outbox, customer, barber, monkeypatch):
    from randevu.notifications.dispatcher import notification_dispatcher

    monkeypatch.setattr(notification_dispatcher, "channels", [BrokenChannel(), outbox])
    appointment = book(db, customer, barber)

    updated = appointment_crud.update_appointment_status(
        db, appointment.id, customer, AppointmentStatus.cancelled
    )

    assert updated.status == "cancelled"
    # Channels after the broken one still deliver
    assert "Appointment Status Updated" in titles_for(outbox, customer)


def test_dispatcher_returns_record_id_and_skips_unknown_users(db, customer):
    recorder = RecordingChannel()
    dispatcher = NotificationDispatcher(record_channel=RecordChannel(), channels=[recorder])

    notification_id = dispatcher.notify(db, customer.id, "Hoş geldiniz", "Merhaba")

    stored = db.query(Notification).filter(Notification.id == notification_id).one()
    assert stored.type == "system"
    assert stored.read is False
    assert dispatcher.notify(db, "missing-user", "Hoş geldiniz", "Merhaba") is None
    assert len(recorder.sent) == 1


def test_record_failure_still_reaches_other_channels(db, customer):
    recorder = RecordingChannel()
    dispatcher = NotificationDispatcher(record_channel=BrokenChannel(), channels=[recorder])

    assert dispatcher.notify(db, customer.id, "Başlık", "Mesaj") is None
    assert len(recorder.sent) == 1


def test_push_channel_is_disabled_without_credentials(db, customer):
    customer.push_token = "device-token"
    assert PushChannel(credentials_path=None).send(db, customer, "t", "m", "system") is None


def test_push_channel_without_device_token(db, customer):
    channel = PushChannel(credentials_path="/etc/firebase.json")
    assert channel.send(db, customer, "t", "m", "system") is None


def test_email_channel_sends_only_with_subject(db, customer, monkeypatch):
    FakeSMTP.instances = []
    monkeypatch.setattr(channels.smtplib, "SMTP", FakeSMTP)
    channel = EmailChannel(host="smtp.example.com", port=587, username="user", password="pass",
                           use_ssl=False, from_address="randevu@example.com")

    assert channel.send(db, customer, "t", "m", "appointment") is None
    assert FakeSMTP.instances == []

    channel.send(db, customer, "t", "m", "appointment",
                 email_subject="Appointment Confirmed", email_body="Dear Ayşe")

    server = FakeSMTP.instances[0]
    assert server.started_tls
    assert server.credentials == ("user", "pass")
    from_address, to_addresses, _ = server.sent[0]
    assert from_address == "randevu@example.com"
    assert to_addresses == ["ayse@example.com"]


def test_email_channel_disabled_without_host(db, customer):
    channel = EmailChannel(host=None)
    assert channel.send(db, customer, "t", "m", "appointment", email_subject="Hi") is None


@pytest.fixture
def inbox(db, customer, barber):
    book(db, customer, barber)
    return auth_headers(customer)


def test_list_and_read_notifications(client, inbox):
    notifications = client.get("/api/notifications", headers=inbox).json()
    assert len(notifications) == 1
    assert notifications[0]["read"] is False
    assert client.get("/api/notifications/unread-count", headers=inbox).json() == {"unread": 1}

    response = client.patch(f"/api/notifications/{notifications[0]['id']}/read", headers=inbox)

    assert response.status_code == 200
    assert response.json()["read"] is True
    assert client.get("/api/notifications/unread-count", headers=inbox).json() == {"unread": 0}


def test_cannot_read_someone_elses_notification(client, inbox, barber):
    notification_id = client.get("/api/notifications", headers=inbox).json()[0]["id"]

    response = client.patch(f"/api/notifications/{notification_id}/read", headers=auth_headers(barber))

    assert response.status_code == 404


def test_mark_all_as_read(client, inbox):
    response = client.post("/api/notifications/read-all", headers=inbox)

    assert response.json() == {"updated": 1}
    assert client.post("/api/notifications/read-all", headers=inbox).json() == {"updated": 0}
