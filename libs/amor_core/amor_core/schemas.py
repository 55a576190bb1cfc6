from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel


class Image(BaseModel):
    id: str
    url: str


class Owner(BaseModel):
    id: str
    name: str
    image: Optional[str] = None


class Group(BaseModel):
    """A group as returned by the API."""

    id: int
    name: str
    tags: List[str] = []
    images: List[Image]
    user: Owner
    approved_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @property
    def is_pending(self) -> bool:
        return self.approved_at is None


class Notification(BaseModel):
    id: int
    type: str
    message: str
    action_url: str = ""
    created_at: datetime

    @property
    def has_action(self) -> bool:
        return self.action_url != ""


class Session(BaseModel):
    user_id: str
    role: str
    name: str
    image_url: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == "ADMIN"
