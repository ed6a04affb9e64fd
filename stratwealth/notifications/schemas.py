from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict
from stratwealth.notifications.models import NotificationType


class NotificationResponse(BaseModel):
    id: str
    type: NotificationType
    title: str
    message: str
    read: bool
    action_url: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class NotificationListResponse(BaseModel):
    unread_count: int
    notifications: List[NotificationResponse]


class MarkAllReadResponse(BaseModel):
    updated: int
