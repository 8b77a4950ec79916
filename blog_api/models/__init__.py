"""
SQLAlchemy Models for the blog CMS
"""

from ..database import Base
from .user import User, UserStatus
from .role import Role, UserRole
from .category import Category
from .tag import Tag
from .post import Post, PostCategory, PostStatus, PostTag
from .event import Event, EventStatus
from .upload import Upload

# Export all models
__all__ = [
    "Base",
    "User",
    "UserStatus",
    "Role",
    "UserRole",
    "Category",
    "Tag",
    "Post",
    "PostCategory",
    "PostStatus",
    "PostTag",
    "Event",
    "EventStatus",
    "Upload",
]
