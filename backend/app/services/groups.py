import logging
from datetime import datetime, timedelta
from typing import Dict, List, Optional, Sequence

from fastapi import UploadFile
from sqlalchemy import func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from ..core.config import settings
from ..core.storage import LocalObjectStore, validate_files
from ..models.group import Group
from ..models.image import Image
from ..models.timestamps import utc_now
from ..models.user import User
from ..schemas.group import GroupResponse, ImageResponse, OwnerResponse
from .exceptions import StorageError, ValidationError

logger = logging.getLogger(__name__)


def normalize_name(name: Optional[str]) -> str:
    """Strip and check a group name."""
    name = (name or "").strip()
    if not name:
        raise ValidationError("Group name is required")
    if len(name) > settings.MAX_NAME_LENGTH:
        raise ValidationError(f"Group name must be at most {settings.MAX_NAME_LENGTH} characters")
    return name


def normalize_tags(tags: Optional[Sequence[str]]) -> List[str]:
    """
    Strip tags and drop duplicates, keeping the first occurrence.

    Blank entries are ignored; anything too long or too many tags is an error.
    """
    result: List[str] = []
    for tag in tags or []:
        if not isinstance(tag, str):
            raise ValidationError("Tags must be strings")
        tag = tag.strip()
        if not tag or tag in result:
            continue
        if len(tag) > settings.MAX_TAG_LENGTH:
            raise ValidationError(f"Tag '{tag[:16]}...' exceeds {settings.MAX_TAG_LENGTH} characters")
        result.append(tag)

    if len(result) > settings.MAX_TAGS:
        raise ValidationError(f"At most {settings.MAX_TAGS} tags are allowed")
    return result


def serialize_groups(db: Session, groups: Sequence[Group]) -> List[GroupResponse]:
    """Attach images and owner profiles, two queries regardless of batch size."""
    if not groups:
        return []

    group_ids = [group.id for group in groups]
    owner_ids = {group.owner_id for group in groups}

    images: Dict[int, List[ImageResponse]] = {group_id: [] for group_id in group_ids}
    for image in db.exec(
        select(Image).where(Image.group_id.in_(group_ids)).order_by(Image.group_id)
    ).all():
        images[image.group_id].append(ImageResponse.model_validate(image))

    owners = {
        user.id: OwnerResponse.model_validate(user)
        for user in db.exec(select(User).where(User.id.in_(owner_ids))).all()
    }

    return [
        GroupResponse(
            id=group.id,
            name=group.name,
            tags=list(group.tags or []),
            images=images[group.id],
            user=owners[group.owner_id],
            approved_at=group.approved_at,
            created_at=group.created_at,
        )
        for group in groups
    ]


async def create_group(
    db: Session,
    store: LocalObjectStore,
    owner: User,
    name: str,
    tags: Sequence[str],
    files: Sequence[UploadFile],
) -> bool:
    """
    Upload a group's images and persist the group with them.

    Input is validated before anything is uploaded; a ValidationError
    propagates and nothing is stored. Upload or persistence failures are
    logged and reported as False so the caller can offer a retry.
    """
    name = normalize_name(name)
    tags = normalize_tags(tags)
    validate_files(files)

    try:
        uploaded = await store.upload(files)
    except StorageError as e:
        logger.error(f"Upload failed for new group '{name}': {e}")
        return False

    try:
        group = Group(name=name, tags=tags, owner_id=owner.id)
        db.add(group)
        db.flush()

        for item in uploaded:
            db.add(Image(id=item["id"], url=item["url"], group_id=group.id))

        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to persist group '{name}': {e}")
        logger.warning(f"Orphaned uploads left in storage: {[item['id'] for item in uploaded]}")
        return False

    logger.info(f"Created group {group.id} '{name}' with {len(uploaded)} images for user {owner.id}")
    return True


def get_group(db: Session, group_id: int) -> Optional[GroupResponse]:
    """Fetch a single group, or None if it does not exist (e.g. it was denied)."""
    group = db.get(Group, group_id)
    if group is None:
        return None
    return serialize_groups(db, [group])[0]


def get_random_group(
    db: Session,
    previous_id: Optional[int] = None,
    include_unapproved: bool = False,
) -> Optional[GroupResponse]:
    """
    Pick one eligible group uniformly at random.

    Eligibility is evaluated and the pick made in a single statement, so
    the set cannot change between counting and fetching. Returns None
    when nothing is eligible.
    """
    query = select(Group)
    if not include_unapproved:
        query = query.where(Group.approved_at.is_not(None))
    if previous_id is not None:
        query = query.where(Group.id != previous_id)

    group = db.exec(query.order_by(func.random()).limit(1)).first()
    if group is None:
        return None
    return serialize_groups(db, [group])[0]


def get_unapproved_groups(db: Session, now: Optional[datetime] = None) -> List[GroupResponse]:
    """Pending groups outside the review cool-down window, oldest first."""
    cutoff = (now or utc_now()) - timedelta(hours=settings.REVIEW_COOLDOWN_HOURS)

    groups = db.exec(
        select(Group)
        .where(
            Group.approved_at.is_(None),
            or_(Group.last_reviewed_at.is_(None), Group.last_reviewed_at <= cutoff),
        )
        .order_by(Group.id)
    ).all()
    return serialize_groups(db, groups)
