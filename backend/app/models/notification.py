from sqlmodel import SQLModel, Field, Column
from sqlalchemy import Text
from datetime import datetime
from typing import Optional
from enum import Enum

from .timestamps import timestamp_column, utc_now


class NotificationType(str, Enum):
    """Kinds of messages delivered to a user's inbox."""

    GROUP_REJECTED = "GROUP_REJECTED"


class Notification(SQLModel, table=True):
    """Inbox entry; entries are deleted once the recipient has read them."""

    id: Optional[int] = Field(default=None, primary_key=True)
    type: NotificationType
    message: str = Field(sa_column=Column(Text, nullable=False))

    # Empty string means there is nothing to link to
    action_url: str = Field(default="", max_length=500)

    user_id: str = Field(foreign_key="user.id", index=True)
    created_at: datetime = Field(default_factory=utc_now, sa_column=timestamp_column(index=True))
