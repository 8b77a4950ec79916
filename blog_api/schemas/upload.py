"""Pydantic schemas for Upload."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from blog_api.schemas.user import UserSummary


class UploadResponse(BaseModel):
    id: int
    public_id: str
    url: str
    resource_type: str
    bytes: Optional[int] = None
    width: Optional[int] = None
    height: Optional[int] = None
    format: Optional[str] = None
    folder: Optional[str] = None
    original_filename: Optional[str] = None
    uploaded_by_user_id: Optional[int] = None
    uploaded_by: Optional[UserSummary] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
