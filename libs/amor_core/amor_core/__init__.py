# libs/amor_core/amor_core/__init__.py

from .client import AmorClient, ApiError, Unauthorized
from .moderation import Decision, ModerationQueue, Notice
from .preferences import LocalSettings, Preferences, load_settings
from .roll import RollController, RollMode
from .schemas import Group, Image, Notification, Owner, Session
from .submit import GroupSubmitter, SubmissionError, validate_submission

__all__ = [
    "AmorClient",
    "ApiError",
    "Unauthorized",
    "Decision",
    "ModerationQueue",
    "Notice",
    "LocalSettings",
    "Preferences",
    "load_settings",
    "RollController",
    "RollMode",
    "Group",
    "Image",
    "Notification",
    "Owner",
    "Session",
    "GroupSubmitter",
    "SubmissionError",
    "validate_submission",
]
