from datetime import datetime, timezone

from sqlalchemy import Column, DateTime


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def timestamp_column(nullable: bool = False, index: bool = False) -> Column:
    """Timezone-aware timestamp column; every model stores UTC."""
    return Column(DateTime(timezone=True), nullable=nullable, index=index)
