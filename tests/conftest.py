import os
import tempfile

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENV"] = "test"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["LOG_FILE"] = os.path.join(tempfile.gettempdir(), "randevu-test.log")
os.environ.pop("FIREBASE_CREDENTIALS", None)
os.environ.pop("SMTP_HOST", None)

import pytest
from fastapi.testclient import TestClient

from randevu.main import app
from randevu.database import Base, SessionLocal, engine
from randevu.notifications.channels import NotificationChannel
from randevu.notifications.dispatcher import notification_dispatcher
from randevu.schemas.user_schema import UserCreate
from randevu.security.auth import create_access_token
from randevu.services.service_crud import service_crud
from randevu.services.user_crud import user_crud
from randevu.schemas.service_schema import ServiceCreate

FUTURE_DATE = "2099-03-02"
PASSWORD = "supersecret"


class RecordingChannel(NotificationChannel):
    name = "recording"

    def __init__(self):
        self.sent = []

    def send(self, db, user, title, message, notification_type, payload=None,
             email_subject=None, email_body=None):
        self.sent.append({
            "user_id": user.id,
            "title": title,
            "message": message,
            "type": notification_type,
            "payload": payload,
            "email_subject": email_subject,
            "email_body": email_body,
        })
        return None


@pytest.fixture(autouse=True)
def reset_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture(autouse=True)
def outbox(monkeypatch):
    """Replaces push and email delivery; notification records are still written."""
    channel = RecordingChannel()
    monkeypatch.setattr(notification_dispatcher, "channels", [channel])
    return channel


def make_user(db, role="customer", email=None, first_name="Ali", last_name="Yılmaz", barber_id=None):
    user = UserCreate(
        email=email or f"{role}-{first_name.lower()}@example.com",
        first_name=first_name,
        last_name=last_name,
        role=role,
        password=PASSWORD,
        barber_id=barber_id,
    )
    return user_crud.create_user(db, user)


def auth_headers(user):
    token, _ = create_access_token(data={"sub": str(user.id)})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def customer(db):
    return make_user(db, "customer", email="ayse@example.com", first_name="Ayşe", last_name="Demir")


@pytest.fixture
def other_customer(db):
    return make_user(db, "customer", first_name="Mehmet", last_name="Kaya")


@pytest.fixture
def barber(db):
    return make_user(db, "barber", first_name="Hasan", last_name="Usta")


@pytest.fixture
def employee(db, barber):
    return make_user(db, "employee", first_name="Emre", last_name="Çalışkan", barber_id=barber.id)


@pytest.fixture
def haircut(db, barber):
    return service_crud.create_service(
        db, ServiceCreate(name="Saç Kesimi", price="250.00", duration_minutes=30), barber.id
    )


@pytest.fixture
def beard_trim(db, barber):
    return service_crud.create_service(
        db, ServiceCreate(name="Sakal Tıraşı", price="150.00", duration_minutes=60), barber.id
    )
