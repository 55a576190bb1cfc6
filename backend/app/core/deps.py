import logging
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlmodel import Session

from .database import get_db
from .security import verify_token
from ..models.user import User, UserRole

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def _resolve_user(db: Session, credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[User]:
    """Map a bearer token to the mirrored user record, creating it on first sight."""
    if credentials is None:
        return None

    claims = verify_token(credentials.credentials)
    if claims is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = db.get(User, claims["sub"])
    if user is None:
        user = User(
            id=claims["sub"],
            name=claims.get("name") or "anonymous",
            image=claims.get("picture"),
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        logger.info(f"Registered user {user.id} from auth provider")

    return user


def get_optional_user(
    db: Session = Depends(get_db),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[User]:
    """Get the current user, or None for anonymous requests."""
    return _resolve_user(db, credentials)


def get_current_user(
    current_user: Optional[User] = Depends(get_optional_user),
) -> User:
    """Get the current authenticated user."""
    if current_user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return current_user


def require_admin(
    current_user: User = Depends(get_current_user),
) -> User:
    """Reject callers without the ADMIN role."""
    if current_user.role != UserRole.ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin role required",
        )
    return current_user
