from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel


class ImageResponse(BaseModel):
    """Image reference inside a group payload."""

    id: str
    url: str

    class Config:
        from_attributes = True


class OwnerResponse(BaseModel):
    """Public profile of a group's owner."""

    id: str
    name: str
    image: Optional[str] = None

    class Config:
        from_attributes = True


class GroupResponse(BaseModel):
    """Group with its images and owner, as shown when rolling or reviewing."""

    id: int
    name: str
    tags: List[str]
    images: List[ImageResponse]
    user: OwnerResponse
    approved_at: Optional[datetime] = None
    created_at: datetime


class GroupCreateResult(BaseModel):
    """Outcome of a create-group submission."""

    success: bool


class ReviewResult(BaseModel):
    """Outcome of an approve or deny decision."""

    group_id: int
    outcome: str
