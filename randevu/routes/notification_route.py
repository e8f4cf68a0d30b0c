from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List
from randevu.services.notification_crud import notification_crud
from randevu.schemas.notification_schema import (
    MarkAllReadResponse,
    NotificationResponse,
    UnreadCountResponse,
)
from randevu.database import get_db
from randevu.security.auth import get_current_active_user
from randevu.models.user_model import User
from randevu.logger import get_logger

notification_router = APIRouter()
logger = get_logger(__name__)


@notification_router.get(
    "/notifications", response_model=List[NotificationResponse], status_code=status.HTTP_200_OK
)
def get_notifications(
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    """Latest notifications of the current user"""
    try:
        notifications = notification_crud.get_notifications(db, current_user.id)
        return [NotificationResponse.model_validate(n) for n in notifications]

    except Exception as e:
        logger.error(f"Error fetching notifications of {current_user.email}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error occurred while fetching notifications",
        )


@notification_router.get(
    "/notifications/unread-count", response_model=UnreadCountResponse, status_code=status.HTTP_200_OK
)
def get_unread_count(
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    try:
        return UnreadCountResponse(unread=notification_crud.get_unread_count(db, current_user.id))

    except Exception as e:
        logger.error(f"Error counting notifications of {current_user.email}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error occurred while counting notifications",
        )


@notification_router.patch(
    "/notifications/{notification_id}/read",
    response_model=NotificationResponse,
    status_code=status.HTTP_200_OK,
)
def mark_notification_read(
    notification_id: str,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    try:
        notification = notification_crud.mark_as_read(db, notification_id, current_user.id)
        return NotificationResponse.model_validate(notification)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error marking notification {notification_id} as read: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error occurred while updating notification",
        )


@notification_router.post(
    "/notifications/read-all", response_model=MarkAllReadResponse, status_code=status.HTTP_200_OK
)
def mark_all_notifications_read(
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    try:
        return MarkAllReadResponse(updated=notification_crud.mark_all_as_read(db, current_user.id))

    except Exception as e:
        logger.error(f"Error marking notifications of {current_user.email} as read: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error occurred while updating notifications",
        )
