from pydantic import Field
from typing import Optional
from datetime import datetime
from app.core.schemas import CamelModel
from app.models.notification import NotificationType


class NotificationCreate(CamelModel):
    user_id: str
    title: str = Field(min_length=1, max_length=255)
    message: str = Field(min_length=1)
    type: NotificationType = NotificationType.SYSTEM
    link: Optional[str] = None


class NotificationResponse(CamelModel):
    id: str
    user_id: str
    title: str
    message: str
    type: NotificationType
    link: Optional[str] = None
    is_read: bool
    created_at: Optional[datetime] = None
