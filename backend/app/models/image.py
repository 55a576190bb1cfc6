from sqlmodel import SQLModel, Field


class Image(SQLModel, table=True):
    """Reference to an asset held by the object store."""

    # Object store key
    id: str = Field(primary_key=True, max_length=100)
    url: str = Field(max_length=500)

    group_id: int = Field(foreign_key="group.id", index=True, ondelete="CASCADE")
