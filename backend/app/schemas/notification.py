from datetime import datetime
from pydantic import BaseModel

from ..models.notification import NotificationType


class NotificationResponse(BaseModel):
    """Inbox entry."""

    id: int
    type: NotificationType
    message: str
    action_url: str
    created_at: datetime

    class Config:
        from_attributes = True


class NotificationClearResult(BaseModel):
    cleared: int
