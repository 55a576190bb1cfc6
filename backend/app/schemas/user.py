from pydantic import BaseModel
from typing import Optional

from ..models.user import UserRole


class SessionResponse(BaseModel):
    """Current session as exposed by the auth provider."""

    user_id: str
    role: UserRole
    name: str
    image_url: Optional[str] = None
