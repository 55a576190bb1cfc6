from sqlmodel import SQLModel, Field
from datetime import datetime
from typing import Optional
from enum import Enum

from .timestamps import timestamp_column, utc_now


class UserRole(str, Enum):
    """Roles issued by the auth provider."""

    USER = "USER"
    ADMIN = "ADMIN"


class User(SQLModel, table=True):
    """User profile mirrored from the auth provider."""

    # Subject claim of the provider's token
    id: str = Field(primary_key=True, max_length=64)
    name: str = Field(max_length=100)

    # Profile picture url
    image: Optional[str] = Field(default=None, max_length=500)

    role: UserRole = Field(default=UserRole.USER)

    # Timestamps
    created_at: datetime = Field(default_factory=utc_now, sa_column=timestamp_column())
