"""CRUD operations for Event."""

from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from blog_api.crud.base import CRUDBase
from blog_api.models.event import Event, EventStatus
from blog_api.schemas.event import EventCreate, EventUpdate


class CRUDEvent(CRUDBase[Event, EventCreate, EventUpdate]):
    def get_all(
        self,
        db: Session,
        *,
        status: Optional[EventStatus] = None,
        include_deleted: bool = False,
        now: Optional[datetime] = None,
    ) -> List[Event]:
        """Events by start time, latest first, optionally filtered by computed status."""
        events = self.get_multi(
            db,
            limit=None,
            order_by=[Event.start_time.desc(), Event.id.desc()],
            include_deleted=include_deleted,
        )
        if status is None:
            return events
        now = now or datetime.utcnow()
        return [event for event in events if event.status_at(now) == status]


# Singleton instance
crud_event = CRUDEvent(Event)
