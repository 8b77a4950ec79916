"""CRUD operations package - exports singleton instances for all models."""

from .base import CRUDBase
from .user import crud_user
from .role import crud_role
from .category import crud_category
from .tag import crud_tag
from .post import crud_post, sync_post_categories, sync_post_tags
from .event import crud_event
from .upload import crud_upload


__all__ = [
    # Base
    "CRUDBase",
    # CRUD instances
    "crud_user",
    "crud_role",
    "crud_category",
    "crud_tag",
    "crud_post",
    "crud_event",
    "crud_upload",
    # Relation sync
    "sync_post_categories",
    "sync_post_tags",
]
