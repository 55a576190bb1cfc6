"""
SQLModel models for the Amor application.

This module exports all database models so that importing the package
registers every table with SQLModel metadata.
"""

from .user import User, UserRole
from .group import Group
from .image import Image
from .notification import Notification, NotificationType

__all__ = [
    "User",
    "UserRole",
    "Group",
    "Image",
    "Notification",
    "NotificationType",
]
