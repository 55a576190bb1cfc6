from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlmodel import Session

from ..core.database import get_db
from ..core.deps import get_optional_user
from ..models.user import User
from ..schemas.notification import NotificationClearResult, NotificationResponse
from ..services import notifications as notification_service

router = APIRouter()


@router.get("", response_model=List[NotificationResponse])
async def list_notifications(
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user),
):
    """Current user's notifications, newest first. Anonymous callers get none."""
    if current_user is None:
        return []
    return notification_service.list_notifications(db, current_user.id)


@router.delete("", response_model=NotificationClearResult)
async def mark_notifications_read(
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user),
):
    """Mark everything read, which removes it from the inbox."""
    if current_user is None:
        return NotificationClearResult(cleared=0)
    return NotificationClearResult(
        cleared=notification_service.clear_notifications(db, current_user.id)
    )
