import logging
from typing import List

from sqlalchemy import delete
from sqlmodel import Session, select

from ..models.notification import Notification

logger = logging.getLogger(__name__)


def list_notifications(db: Session, user_id: str) -> List[Notification]:
    """A user's inbox, newest first."""
    return list(
        db.exec(
            select(Notification)
            .where(Notification.user_id == user_id)
            .order_by(Notification.created_at.desc(), Notification.id.desc())
        ).all()
    )


def clear_notifications(db: Session, user_id: str) -> int:
    """Drain a user's inbox. Returns the number of notifications removed."""
    result = db.exec(delete(Notification).where(Notification.user_id == user_id))
    db.commit()

    if result.rowcount:
        logger.info(f"Cleared {result.rowcount} notifications for user {user_id}")
    return result.rowcount
