import jwt
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from .config import settings


def create_access_token(
    subject: str,
    expires_delta: Optional[timedelta] = None,
    **claims: Any,
) -> str:
    """Create a signed token the way the auth provider issues them.

    Used by tooling and tests; production tokens come from the provider.
    """
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(days=30))
    payload: Dict[str, Any] = {"sub": subject, "exp": expire, **claims}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_jwt_token(token: str) -> Dict[str, Any]:
    """Decode and validate a token, raising jwt.InvalidTokenError on failure."""
    return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])


def verify_token(token: str) -> Optional[Dict[str, Any]]:
    """Return the token claims, or None if the token is invalid or expired."""
    try:
        payload = decode_jwt_token(token)
    except jwt.InvalidTokenError:
        return None

    if not payload.get("sub"):
        return None
    return payload
