"""Pydantic schemas for Event."""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from blog_api.models.event import EventStatus


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Store instants as naive UTC so they compare with ``datetime.utcnow()``."""
    if value is not None and value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class EventCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=150)
    start_time: datetime
    end_time: datetime
    title: str = Field(..., min_length=1, max_length=255)
    content: str = Field(..., min_length=1)
    location: str = Field(..., min_length=1, max_length=255)

    @field_validator("start_time", "end_time")
    @classmethod
    def normalize_time(cls, v: datetime) -> datetime:
        return to_naive_utc(v)

    @model_validator(mode="after")
    def check_window(self) -> "EventCreate":
        if self.end_time < self.start_time:
            raise ValueError("end_time must not be before start_time")
        return self


class EventUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=150)
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    content: Optional[str] = Field(None, min_length=1)
    location: Optional[str] = Field(None, min_length=1, max_length=255)

    @field_validator("start_time", "end_time")
    @classmethod
    def normalize_time(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(v)


class EventResponse(BaseModel):
    id: int
    name: str
    start_time: datetime
    end_time: datetime
    title: str
    content: str
    location: str
    status: EventStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
