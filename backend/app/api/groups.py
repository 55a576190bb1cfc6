import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status
from sqlmodel import Session

from ..core.database import get_db
from ..core.deps import get_current_user, require_admin
from ..core.storage import LocalObjectStore, get_object_store
from ..models.user import User
from ..schemas.group import GroupCreateResult, GroupResponse, ReviewResult
from ..services import groups as group_service
from ..services import review as review_service
from ..services.exceptions import StorageError, Unauthorized, ValidationError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=GroupCreateResult)
async def create_group(
    name: str = Form(...),
    tags: List[str] = Form(default=[]),
    files: List[UploadFile] = File(...),
    db: Session = Depends(get_db),
    store: LocalObjectStore = Depends(get_object_store),
    current_user: User = Depends(get_current_user),
):
    """Create a new group from 2-4 images. It waits for review before being shown."""
    try:
        success = await group_service.create_group(db, store, current_user, name, tags, files)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))

    return GroupCreateResult(success=success)


@router.get("/random", response_model=Optional[GroupResponse])
async def get_random_group(
    previous_id: Optional[int] = Query(None, description="Group to exclude, usually the one on screen"),
    include_unapproved: bool = Query(False, description="Also roll groups still awaiting review"),
    db: Session = Depends(get_db),
):
    """Roll a random group. Returns null when no group is eligible."""
    return group_service.get_random_group(db, previous_id, include_unapproved)


@router.get("/unapproved", response_model=List[GroupResponse])
async def list_unapproved_groups(
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """Groups waiting for review."""
    return group_service.get_unapproved_groups(db)


@router.get("/{group_id}", response_model=GroupResponse)
async def get_group(
    group_id: int,
    db: Session = Depends(get_db),
):
    """Get a specific group."""
    group = group_service.get_group(db, group_id)
    if group is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Group not found"
        )
    return group


@router.post("/{group_id}/approve", response_model=ReviewResult)
async def approve_group(
    group_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Approve a pending group."""
    try:
        outcome = review_service.approve_group(db, current_user, group_id)
    except Unauthorized as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))

    return ReviewResult(group_id=group_id, outcome=outcome.value)


@router.post("/{group_id}/deny", response_model=ReviewResult)
async def deny_group(
    group_id: int,
    db: Session = Depends(get_db),
    store: LocalObjectStore = Depends(get_object_store),
    current_user: User = Depends(get_current_user),
):
    """Deny a pending group, removing it and notifying its owner."""
    try:
        outcome = review_service.deny_group(db, store, current_user, group_id)
    except Unauthorized as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    except StorageError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Could not remove stored images, group left unchanged: {e}",
        )

    return ReviewResult(group_id=group_id, outcome=outcome.value)
