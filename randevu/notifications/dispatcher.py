from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from randevu.exceptions import NotificationDispatchError
from randevu.logger import get_logger
from randevu.models.user_model import User
from randevu.notifications.channels import (
    EmailChannel,
    NotificationChannel,
    PushChannel,
    RecordChannel,
)

logger = get_logger(__name__)


class NotificationDispatcher:
    """Sends one notification through every channel, best effort.

    Failures are logged and never raised. Retrying a call may produce
    duplicate notifications.
    """

    def __init__(self, record_channel: RecordChannel, channels: List[NotificationChannel]):
        self.record_channel = record_channel
        self.channels = channels

    def notify(
        self,
        db: Session,
        user_id: str,
        title: str,
        message: str,
        notification_type: str = "system",
        payload: Optional[Dict[str, Any]] = None,
        email_subject: Optional[str] = None,
        email_body: Optional[str] = None,
    ) -> Optional[str]:
        """Returns the id of the stored notification, or None if it was not stored."""
        user = db.query(User).filter(User.id == str(user_id)).first()
        if user is None:
            logger.warning(f"Skipping notification '{title}': user {user_id} not found")
            return None

        notification_id = None
        for channel in [self.record_channel, *self.channels]:
            try:
                result = channel.send(
                    db, user, title, message, notification_type,
                    payload=payload, email_subject=email_subject, email_body=email_body,
                )
            except Exception as e:
                error = NotificationDispatchError(channel.name, user.id, str(e))
                logger.error(str(error))
                continue
            if channel is self.record_channel:
                notification_id = result
        return notification_id


notification_dispatcher = NotificationDispatcher(
    record_channel=RecordChannel(),
    channels=[PushChannel(), EmailChannel()],
)
