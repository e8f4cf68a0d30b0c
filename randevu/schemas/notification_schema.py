from pydantic import BaseModel
from enum import Enum
from typing import Any, Dict, Optional
from datetime import datetime


class NotificationType(str, Enum):
    appointment = "appointment"
    review = "review"
    system = "system"


class NotificationResponse(BaseModel):
    id: str
    user_id: str
    title: str
    message: str
    type: NotificationType
    read: bool
    payload: Optional[Dict[str, Any]] = None
    created_at: datetime

    class Config:
        from_attributes = True


class UnreadCountResponse(BaseModel):
    unread: int


class MarkAllReadResponse(BaseModel):
    updated: int
