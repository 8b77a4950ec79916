"""Schemas for the YouTube channel proxy."""

from typing import Any, Dict, Optional

from pydantic import BaseModel


class YouTubeVideo(BaseModel):
    id: str
    title: str = ""
    description: str = ""
    publishedAt: Optional[str] = None
    thumbnails: Dict[str, Any] = {}
    duration: Optional[str] = None
    url: str
