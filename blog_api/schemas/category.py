"""Pydantic schemas for Category."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class CategorySummary(BaseModel):
    id: int
    name: str
    slug: str

    model_config = ConfigDict(from_attributes=True)


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=150)
    slug: str = Field(..., min_length=1, max_length=150)
    description: Optional[str] = None
    display_order: int = 0
    parent_id: Optional[int] = Field(None, gt=0, description="Parent category ID")


class CategoryUpdate(BaseModel):
    """Partial update.

    ``parent_id`` distinguishes three cases: omitted (keep parent),
    explicit null (detach), positive id (reparent).
    """
    name: Optional[str] = Field(None, min_length=1, max_length=150)
    slug: Optional[str] = Field(None, min_length=1, max_length=150)
    description: Optional[str] = None
    display_order: Optional[int] = None
    parent_id: Optional[int] = Field(None, gt=0)


class CategoryResponse(BaseModel):
    id: int
    name: str
    slug: str
    description: Optional[str] = None
    display_order: int
    parent_id: Optional[int] = None
    parent: Optional[CategorySummary] = None
    children: List[CategorySummary] = []
    post_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
