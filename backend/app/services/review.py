"""
Approve/deny decisions on pending groups.

A group moves from PENDING to exactly one terminal state: APPROVED
(approved_at stamped) or DENIED (group, images and stored assets removed,
owner notified). Both transitions are conditional on the row still being
pending, so a concurrent approve and deny on the same group resolve to
whichever commits first; the other reports NOT_FOUND or ALREADY_APPROVED.
"""

import logging
from enum import Enum
from typing import Optional

from sqlalchemy import delete, update
from sqlmodel import Session, select

from ..core.storage import LocalObjectStore
from ..models.group import Group
from ..models.image import Image
from ..models.notification import Notification, NotificationType
from ..models.timestamps import utc_now
from ..models.user import User, UserRole
from .exceptions import Unauthorized

logger = logging.getLogger(__name__)


class ReviewState(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    DENIED = "DENIED"


class ReviewOutcome(str, Enum):
    """Result of a single review decision."""

    APPROVED = "APPROVED"
    DENIED = "DENIED"
    ALREADY_APPROVED = "ALREADY_APPROVED"
    NOT_FOUND = "NOT_FOUND"


def review_state(group: Optional[Group]) -> ReviewState:
    """State of a group row; a missing row is a denied group."""
    if group is None:
        return ReviewState.DENIED
    if group.approved_at is not None:
        return ReviewState.APPROVED
    return ReviewState.PENDING


def rejection_message(group_name: str) -> str:
    return f"your group: {group_name} has been rejected"


def ensure_admin(reviewer: Optional[User]) -> None:
    if reviewer is None or reviewer.role != UserRole.ADMIN:
        raise Unauthorized("Admin role required to review groups")


def approve_group(db: Session, reviewer: Optional[User], group_id: int) -> ReviewOutcome:
    """Approve a pending group. Approving an approved group changes nothing."""
    ensure_admin(reviewer)

    now = utc_now()
    result = db.exec(
        update(Group)
        .where(Group.id == group_id, Group.approved_at.is_(None))
        .values(approved_at=now, last_reviewed_at=now)
    )

    if result.rowcount == 1:
        db.commit()
        logger.info(f"Group {group_id} approved by {reviewer.id}")
        return ReviewOutcome.APPROVED

    db.rollback()
    if review_state(db.get(Group, group_id)) == ReviewState.APPROVED:
        logger.info(f"Group {group_id} was already approved")
        return ReviewOutcome.ALREADY_APPROVED

    logger.info(f"Approve skipped: group {group_id} no longer exists")
    return ReviewOutcome.NOT_FOUND


def deny_group(
    db: Session,
    store: LocalObjectStore,
    reviewer: Optional[User],
    group_id: int,
) -> ReviewOutcome:
    """
    Deny a pending group inside one transaction.

    Steps, in order: read the group with its image ids and owner, delete
    the image and group rows, delete the stored assets, notify the owner.
    Any failure rolls the transaction back and re-raises. The object
    store is not transactional: if it fails part way through a batch the
    rows survive but some assets may already be gone.
    """
    ensure_admin(reviewer)

    try:
        group = db.exec(
            select(Group).where(Group.id == group_id).with_for_update()
        ).first()

        state = review_state(group)
        if state != ReviewState.PENDING:
            db.rollback()
            logger.info(f"Deny skipped: group {group_id} is {state.value}")
            if state == ReviewState.APPROVED:
                return ReviewOutcome.ALREADY_APPROVED
            return ReviewOutcome.NOT_FOUND

        name, owner_id = group.name, group.owner_id
        image_ids = list(db.exec(select(Image.id).where(Image.group_id == group_id)).all())

        db.exec(delete(Image).where(Image.group_id == group_id))
        result = db.exec(
            delete(Group).where(Group.id == group_id, Group.approved_at.is_(None))
        )
        if result.rowcount != 1:
            db.rollback()
            logger.info(f"Deny skipped: group {group_id} changed concurrently")
            return ReviewOutcome.NOT_FOUND

        store.delete(image_ids)

        db.add(
            Notification(
                type=NotificationType.GROUP_REJECTED,
                message=rejection_message(name),
                action_url="",
                user_id=owner_id,
            )
        )
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error(f"Deny of group {group_id} rolled back: {e}")
        raise

    logger.info(f"Group {group_id} denied by {reviewer.id}; removed {len(image_ids)} images")
    return ReviewOutcome.DENIED
