from sqlmodel import SQLModel, Field, Column
from sqlalchemy import JSON
from datetime import datetime
from typing import List, Optional

from .timestamps import timestamp_column, utc_now


class Group(SQLModel, table=True):
    """A named, tagged bundle of 2-4 matching images awaiting or past review."""

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=100, index=True)
    tags: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))

    # Ownership
    owner_id: str = Field(foreign_key="user.id", index=True)

    # Review state: approved_at is null while pending
    approved_at: Optional[datetime] = Field(
        default=None, sa_column=timestamp_column(nullable=True, index=True)
    )
    last_reviewed_at: Optional[datetime] = Field(default=None, sa_column=timestamp_column(nullable=True))

    # Timestamps
    created_at: datetime = Field(default_factory=utc_now, sa_column=timestamp_column())
