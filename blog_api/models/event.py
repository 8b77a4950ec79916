"""Event model. Status is computed on read, never stored."""

from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import Column, Integer, String, Text, TIMESTAMP
from sqlalchemy.sql import func
from ..database import Base


class EventStatus(str, Enum):
    UPCOMING = "upcoming"
    ONGOING = "ongoing"
    FINISHED = "finished"


class Event(Base):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(150), nullable=False)
    start_time = Column(TIMESTAMP, nullable=False, index=True)
    end_time = Column(TIMESTAMP, nullable=False)
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
    location = Column(String(255), nullable=False)

    # Timestamps
    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())

    # Soft delete
    deleted_at = Column(TIMESTAMP, nullable=True, index=True)

    def status_at(self, now: Optional[datetime] = None) -> EventStatus:
        """Project the event status for the given instant (UTC, naive)."""
        if now is None:
            now = datetime.utcnow()
        if now < self.start_time:
            return EventStatus.UPCOMING
        if now > self.end_time:
            return EventStatus.FINISHED
        return EventStatus.ONGOING
