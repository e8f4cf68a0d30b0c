"""Delivery channels composed by the notification dispatcher.

Each channel may raise; the dispatcher isolates failures so one channel never
blocks the others or the lifecycle change that triggered them.
"""
import smtplib
import ssl
from email.mime.text import MIMEText
from typing import Any, Dict, Optional

import firebase_admin
from firebase_admin import credentials, messaging
from sqlalchemy.orm import Session

from randevu.config import (
    EMAIL_FROM_ADDRESS,
    FIREBASE_CREDENTIALS,
    FIREBASE_PROJECT_ID,
    NOTIFY_TIMEOUT_SECONDS,
    SMTP_HOST,
    SMTP_PASSWORD,
    SMTP_PORT,
    SMTP_USE_SSL,
    SMTP_USER,
)
from randevu.logger import get_logger
from randevu.models.notification_model import Notification
from randevu.models.user_model import User

logger = get_logger(__name__)

FIREBASE_APP_NAME = "randevu-push"


class NotificationChannel:
    name = "channel"

    def send(
        self,
        db: Session,
        user: User,
        title: str,
        message: str,
        notification_type: str,
        payload: Optional[Dict[str, Any]] = None,
        email_subject: Optional[str] = None,
        email_body: Optional[str] = None,
    ) -> Optional[str]:
        raise NotImplementedError


class RecordChannel(NotificationChannel):
    """Stores the notification so clients can list it and flip its read flag."""

    name = "record"

    def send(self, db, user, title, message, notification_type, payload=None, email_subject=None, email_body=None):
        notification = Notification(
            user_id=user.id,
            title=title,
            message=message,
            type=notification_type,
            read=False,
            payload=payload,
        )
        try:
            db.add(notification)
            db.commit()
            db.refresh(notification)
        except Exception:
            db.rollback()
            raise
        logger.debug(f"Notification {notification.id} recorded for user {user.id}")
        return notification.id


class PushChannel(NotificationChannel):
    """Firebase Cloud Messaging, keyed by the device token stored on the user."""

    name = "push"

    def __init__(self, credentials_path: Optional[str] = FIREBASE_CREDENTIALS,
                 project_id: Optional[str] = FIREBASE_PROJECT_ID):
        self.credentials_path = credentials_path
        self.project_id = project_id
        self._app = None

    @property
    def enabled(self) -> bool:
        return bool(self.credentials_path)

    def _get_app(self):
        if self._app is None:
            try:
                self._app = firebase_admin.get_app(FIREBASE_APP_NAME)
            except ValueError:
                options = {"httpTimeout": NOTIFY_TIMEOUT_SECONDS}
                if self.project_id:
                    options["projectId"] = self.project_id
                cred = credentials.Certificate(self.credentials_path)
                self._app = firebase_admin.initialize_app(cred, options, name=FIREBASE_APP_NAME)
                logger.info("Firebase Admin initialized for push notifications")
        return self._app

    def send(self, db, user, title, message, notification_type, payload=None, email_subject=None, email_body=None):
        if not self.enabled:
            logger.debug("Push channel disabled, no Firebase credentials configured")
            return None
        if not user.push_token:
            logger.debug(f"No push token for user {user.id}")
            return None

        push = messaging.Message(
            token=user.push_token,
            notification=messaging.Notification(title=title, body=message),
            # FCM data values must be strings
            data={key: str(value) for key, value in (payload or {}).items()},
        )
        message_id = messaging.send(push, app=self._get_app())
        logger.info(f"Push notification sent to user {user.id}: {message_id}")
        return message_id


class EmailChannel(NotificationChannel):
    """Plain-text SMTP email, only for notifications that carry a subject."""

    name = "email"

    def __init__(self, host: Optional[str] = SMTP_HOST, port: int = SMTP_PORT,
                 username: Optional[str] = SMTP_USER, password: Optional[str] = SMTP_PASSWORD,
                 use_ssl: bool = SMTP_USE_SSL, from_address: str = EMAIL_FROM_ADDRESS):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.use_ssl = use_ssl
        self.from_address = from_address

    @property
    def enabled(self) -> bool:
        return bool(self.host)

    def send(self, db, user, title, message, notification_type, payload=None, email_subject=None, email_body=None):
        if email_subject is None:
            return None
        if not self.enabled:
            logger.debug("Email channel disabled, SMTP_HOST not configured")
            return None
        if not user.email:
            logger.debug(f"No email address for user {user.id}")
            return None

        msg = MIMEText(email_body or message, "plain", "utf-8")
        msg["Subject"] = email_subject
        msg["From"] = self.from_address
        msg["To"] = user.email

        context = ssl.create_default_context()
        if self.use_ssl:
            server = smtplib.SMTP_SSL(self.host, self.port, context=context, timeout=NOTIFY_TIMEOUT_SECONDS)
        else:
            server = smtplib.SMTP(self.host, self.port, timeout=NOTIFY_TIMEOUT_SECONDS)
        with server:
            if not self.use_ssl:
                server.starttls(context=context)
            if self.username and self.password:
                server.login(self.username, self.password)
            server.sendmail(self.from_address, [user.email], msg.as_string())

        logger.info(f"Email '{email_subject}' sent to {user.email}")
        return user.email
