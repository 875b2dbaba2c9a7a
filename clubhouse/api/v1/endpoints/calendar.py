# clubhouse/api/v1/endpoints/calendar.py
"""
Calendar endpoints.

Reading the calendar is public; creating, editing, moving and deleting
events is limited to staff.
"""

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status

from clubhouse import crud
from clubhouse.api import deps
from clubhouse.schemas.calendar_event import CalendarEvent, CalendarEventSave, EventMove
from clubhouse.schemas.user import UserProfile
from clubhouse.store import DocumentStore

router = APIRouter(prefix="/events", tags=["Calendar"])


@router.get("", response_model=List[CalendarEvent])
def list_events(
    start: Optional[datetime] = Query(None, description="Only events starting at or after"),
    end: Optional[datetime] = Query(None, description="Only events starting before"),
    store: DocumentStore = Depends(deps.get_store),
):
    return crud.calendar_event.list_events(store, start=start, end=end)


@router.get("/{eventId}", response_model=CalendarEvent)
def read_event(eventId: str, store: DocumentStore = Depends(deps.get_store)):
    return crud.calendar_event.get_or_404(store, eventId)


@router.post("", response_model=CalendarEvent, status_code=status.HTTP_201_CREATED)
def create_event(
    event_in: CalendarEventSave,
    member: UserProfile = Depends(deps.get_current_member),
    store: DocumentStore = Depends(deps.get_store),
):
    return crud.calendar_event.save(store, actor=member, event_in=event_in)


@router.put("/{eventId}", response_model=CalendarEvent)
def update_event(
    eventId: str,
    event_in: CalendarEventSave,
    member: UserProfile = Depends(deps.get_current_member),
    store: DocumentStore = Depends(deps.get_store),
):
    return crud.calendar_event.save(
        store, actor=member, event_in=event_in, event_id=eventId
    )


@router.post("/{eventId}/move", response_model=CalendarEvent)
def move_event(
    eventId: str,
    move_in: EventMove,
    member: UserProfile = Depends(deps.get_current_member),
    store: DocumentStore = Depends(deps.get_store),
):
    """Drag-to-day: keeps the event's time of day and duration."""
    return crud.calendar_event.move_to_day(
        store, actor=member, event_id=eventId, target_day=move_in.target_day
    )


@router.delete("/{eventId}", status_code=status.HTTP_204_NO_CONTENT)
def delete_event(
    eventId: str,
    member: UserProfile = Depends(deps.get_current_member),
    store: DocumentStore = Depends(deps.get_store),
):
    crud.calendar_event.remove(store, actor=member, event_id=eventId)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
