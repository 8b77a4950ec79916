"""Event endpoints. Status is derived from the current time on every read."""

import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, Response, status
from sqlalchemy.orm import Session

from blog_api.api.deps import get_db, require_role
from blog_api.core.exceptions import BadRequestException, NotFoundException
from blog_api.crud import crud_event
from blog_api.models.event import Event, EventStatus
from blog_api.schemas.event import EventCreate, EventResponse, EventUpdate

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/events",
    tags=["Events"],
)

manager_only = require_role("manager")


def _event_response(event: Event, now: Optional[datetime] = None) -> EventResponse:
    return EventResponse(
        id=event.id,
        name=event.name,
        start_time=event.start_time,
        end_time=event.end_time,
        title=event.title,
        content=event.content,
        location=event.location,
        status=event.status_at(now),
        created_at=event.created_at,
        updated_at=event.updated_at,
        deleted_at=event.deleted_at,
    )


@router.get("", response_model=List[EventResponse], summary="List events")
def list_events(
    status_filter: Optional[EventStatus] = Query(None, alias="status"),
    db: Session = Depends(get_db),
) -> List[EventResponse]:
    """Non-deleted events, latest start first, optionally filtered by status."""
    now = datetime.utcnow()
    events = crud_event.get_all(db, status=status_filter, now=now)
    return [_event_response(event, now) for event in events]


@router.get(
    "/all",
    response_model=List[EventResponse],
    summary="List all events including deleted ones",
    dependencies=[Depends(manager_only)],
)
def list_all_events(db: Session = Depends(get_db)) -> List[EventResponse]:
    now = datetime.utcnow()
    return [_event_response(event, now) for event in crud_event.get_all(db, include_deleted=True)]


@router.get("/{event_id}", response_model=EventResponse, summary="Get event")
def get_event(
    event_id: int = Path(..., gt=0),
    db: Session = Depends(get_db),
) -> EventResponse:
    event = crud_event.get(db, event_id)
    if not event:
        raise NotFoundException("Event not found")
    return _event_response(event)


@router.post(
    "",
    response_model=EventResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create event",
    dependencies=[Depends(manager_only)],
)
def create_event(
    event_in: EventCreate,
    db: Session = Depends(get_db),
) -> EventResponse:
    event = crud_event.create(db, obj_in=event_in)
    logger.info(f"Event created: id={event.id}")
    return _event_response(event)


@router.put(
    "/{event_id}",
    response_model=EventResponse,
    summary="Update event",
    dependencies=[Depends(manager_only)],
)
def update_event(
    event_update: EventUpdate,
    event_id: int = Path(..., gt=0),
    db: Session = Depends(get_db),
) -> EventResponse:
    event = crud_event.get(db, event_id)
    if not event:
        raise NotFoundException("Event not found")

    update_data = {k: v for k, v in event_update.model_dump(exclude_unset=True).items() if v is not None}
    start_time = update_data.get("start_time", event.start_time)
    end_time = update_data.get("end_time", event.end_time)
    if end_time < start_time:
        raise BadRequestException("end_time must not be before start_time")

    event = crud_event.update(db, db_obj=event, obj_in=update_data)
    return _event_response(event)


@router.delete(
    "/{event_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete event",
    dependencies=[Depends(manager_only)],
)
def delete_event(
    event_id: int = Path(..., gt=0),
    db: Session = Depends(get_db),
) -> Response:
    """Soft delete an event."""
    if not crud_event.delete(db, id=event_id):
        raise NotFoundException("Event not found")
    logger.info(f"Event soft-deleted: id={event_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
