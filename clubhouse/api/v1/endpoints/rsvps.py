# clubhouse/api/v1/endpoints/rsvps.py
from typing import List

from fastapi import APIRouter, Depends

from clubhouse import crud
from clubhouse.api import deps
from clubhouse.schemas.rsvp import Rsvp, RsvpStatus
from clubhouse.schemas.user import UserProfile
from clubhouse.store import DocumentStore

router = APIRouter(prefix="/events/{eventId}", tags=["RSVPs"])


@router.get("/rsvp", response_model=RsvpStatus)
def get_my_rsvp(
    eventId: str,
    member: UserProfile = Depends(deps.get_current_member),
    store: DocumentStore = Depends(deps.get_store),
):
    """Whether the current member is attending."""
    crud.calendar_event.get_or_404(store, eventId)
    attending = crud.rsvp.is_attending(store, event_id=eventId, uid=member.id)
    return RsvpStatus(event_id=eventId, attending=attending)


@router.put("/rsvp", response_model=RsvpStatus)
def rsvp_to_event(
    eventId: str,
    member: UserProfile = Depends(deps.get_current_member),
    store: DocumentStore = Depends(deps.get_store),
):
    return crud.rsvp.set_attending(store, member=member, event_id=eventId, attending=True)


@router.delete("/rsvp", response_model=RsvpStatus)
def cancel_rsvp(
    eventId: str,
    member: UserProfile = Depends(deps.get_current_member),
    store: DocumentStore = Depends(deps.get_store),
):
    return crud.rsvp.set_attending(
        store, member=member, event_id=eventId, attending=False
    )


@router.get("/rsvps", response_model=List[Rsvp])
def list_rsvps(eventId: str, store: DocumentStore = Depends(deps.get_store)):
    """Attendees in RSVP order."""
    return crud.rsvp.list_attendees(store, event_id=eventId)
