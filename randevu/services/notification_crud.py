from typing import List
from sqlalchemy.orm import Session
from randevu.exceptions import NotFoundError
from randevu.models.notification_model import Notification
from randevu.logger import get_logger

logger = get_logger(__name__)

NOTIFICATION_PAGE_SIZE = 50


class NotificationCRUD:
    @staticmethod
    def get_notifications(db: Session, user_id: str, limit: int = NOTIFICATION_PAGE_SIZE) -> List[Notification]:
        """Newest first"""
        return (
            db.query(Notification)
            .filter(Notification.user_id == str(user_id))
            .order_by(Notification.created_at.desc())
            .limit(limit)
            .all()
        )

    @staticmethod
    def get_unread_count(db: Session, user_id: str) -> int:
        return db.query(Notification).filter(
            Notification.user_id == str(user_id),
            Notification.read == False,
        ).count()

    @staticmethod
    def mark_as_read(db: Session, notification_id: str, user_id: str) -> Notification:
        notification = db.query(Notification).filter(
            Notification.id == str(notification_id),
            Notification.user_id == str(user_id),
        ).first()
        if not notification:
            raise NotFoundError("Notification not found")

        if not notification.read:
            try:
                notification.read = True
                db.commit()
                db.refresh(notification)
            except Exception as e:
                db.rollback()
                logger.error(f"Error marking notification {notification_id} as read: {str(e)}")
                raise
        return notification

    @staticmethod
    def mark_all_as_read(db: Session, user_id: str) -> int:
        try:
            updated = db.query(Notification).filter(
                Notification.user_id == str(user_id),
                Notification.read == False,
            ).update({Notification.read: True}, synchronize_session=False)
            db.commit()
        except Exception as e:
            db.rollback()
            logger.error(f"Error marking notifications of user {user_id} as read: {str(e)}")
            raise
        logger.info(f"Marked {updated} notification(s) as read for user {user_id}")
        return updated


notification_crud = NotificationCRUD()
