"""Pydantic schemas for Post."""

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from blog_api.models.post import PostStatus
from blog_api.schemas.tag import TagSummary
from blog_api.schemas.user import UserSummary


class PostCreate(BaseModel):
    """Schema for creating a new post.

    ``category_ids`` / ``tag_ids`` accept numbers or numeric strings;
    anything that is not a positive integer is ignored.
    """
    title: str = Field(..., min_length=1, max_length=255)
    slug: str = Field(..., min_length=1, max_length=255)
    content: str = Field(..., min_length=1)
    excerpt: Optional[str] = None
    thumbnail_url: Optional[str] = Field(None, max_length=255)
    status: PostStatus = PostStatus.DRAFT
    published_at: Optional[datetime] = None
    author_id: Optional[int] = Field(None, gt=0, description="Defaults to the caller")
    category_ids: Optional[List[Any]] = None
    tag_ids: Optional[List[Any]] = None

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "title": "Hello world",
            "slug": "hello-world",
            "content": "First post",
            "status": "draft",
            "category_ids": [1, 3],
            "tag_ids": [2],
        }
    })


class PostUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    slug: Optional[str] = Field(None, min_length=1, max_length=255)
    content: Optional[str] = Field(None, min_length=1)
    excerpt: Optional[str] = None
    thumbnail_url: Optional[str] = Field(None, max_length=255)
    status: Optional[PostStatus] = None
    published_at: Optional[datetime] = None
    view_count: Optional[int] = Field(None, ge=0)
    author_id: Optional[int] = Field(None, gt=0)
    category_ids: Optional[List[Any]] = None
    tag_ids: Optional[List[Any]] = None


class PostCategoryItem(BaseModel):
    id: int
    name: str
    slug: str
    is_primary: bool = False


class PostResponse(BaseModel):
    id: int
    title: str
    slug: str
    excerpt: Optional[str] = None
    content: str
    thumbnail_url: Optional[str] = None
    status: PostStatus
    view_count: int = 0
    author_id: int
    author: Optional[UserSummary] = None
    categories: List[PostCategoryItem] = []
    tags: List[TagSummary] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    published_at: Optional[datetime] = None


class PostListResponse(BaseModel):
    """Response for listing posts."""
    posts: List[PostResponse]
    total: int
    has_more: bool = Field(..., description="Whether there are more posts to load")
