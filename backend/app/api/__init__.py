from fastapi import APIRouter

from .auth import router as auth_router
from .groups import router as groups_router
from .notifications import router as notifications_router

api_router = APIRouter(prefix="/api/v1")

api_router.include_router(auth_router, prefix="/auth", tags=["authentication"])
api_router.include_router(groups_router, prefix="/groups", tags=["groups"])
api_router.include_router(notifications_router, prefix="/notifications", tags=["notifications"])
