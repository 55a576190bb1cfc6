from typing import Optional

from fastapi import APIRouter, Depends

from ..core.deps import get_optional_user
from ..models.user import User
from ..schemas.user import SessionResponse

router = APIRouter()


@router.get("/session", response_model=Optional[SessionResponse])
async def get_session(current_user: Optional[User] = Depends(get_optional_user)):
    """Current session, or null when no valid token was sent."""
    if current_user is None:
        return None

    return SessionResponse(
        user_id=current_user.id,
        role=current_user.role,
        name=current_user.name,
        image_url=current_user.image,
    )
