# clubhouse/crud/crud_rsvp.py
"""
CRUD operations for event RSVPs.

An RSVP document is keyed by the member's uid, so a member attends an
event at most once; presence of the document means attending.
"""

import logging
from typing import List

from clubhouse.constants.collections import Collections
from clubhouse.core.exceptions import NotFoundError, ValidationError
from clubhouse.schemas.rsvp import Rsvp, RsvpStatus
from clubhouse.schemas.user import UserProfile
from clubhouse.store import SERVER_TIMESTAMP, DocumentStore, Transaction

logger = logging.getLogger(__name__)


class CRUDRsvp:
    """CRUD operations for Rsvp."""

    def is_attending(self, store: DocumentStore, *, event_id: str, uid: str) -> bool:
        return store.get(Collections.rsvps(event_id), uid).exists

    def set_attending(
        self,
        store: DocumentStore,
        *,
        member: UserProfile,
        event_id: str,
        attending: bool,
    ) -> RsvpStatus:
        """
        RSVP to an event, or withdraw the RSVP.

        Re-RSVPing keeps the original RSVP time.
        """
        if not member.alias:
            raise ValidationError("Please set an Alias in your Profile before RSVPing.")

        collection = Collections.rsvps(event_id)

        if not attending:
            store.delete(collection, member.id)
            logger.info(f"User {member.id} withdrew RSVP for event {event_id}")
            return RsvpStatus(event_id=event_id, attending=False)

        def attend(tx: Transaction) -> bool:
            if not tx.get(Collections.EVENTS, event_id).exists:
                raise NotFoundError("Event not found.")
            if tx.get(collection, member.id).exists:
                return False
            tx.set(
                collection,
                member.id,
                {
                    "uid": member.id,
                    "aliasSnapshot": member.alias,
                    "createdAt": SERVER_TIMESTAMP,
                    "schemaVersion": 1,
                },
            )
            return True

        if store.transaction(attend):
            logger.info(f"User {member.id} RSVPed to event {event_id}")
        return RsvpStatus(event_id=event_id, attending=True)

    def list_attendees(self, store: DocumentStore, *, event_id: str) -> List[Rsvp]:
        """Attendees in the order they RSVPed."""
        snaps = store.query(Collections.rsvps(event_id), order_by="createdAt")
        return [Rsvp.from_snapshot(s) for s in snaps]


rsvp = CRUDRsvp()
