# clubhouse/schemas/rsvp.py
from datetime import datetime
from typing import Optional

from clubhouse.schemas.base import CamelModel, DocumentModel


class Rsvp(DocumentModel):
    uid: str
    alias_snapshot: str
    created_at: Optional[datetime] = None


class RsvpStatus(CamelModel):
    event_id: str
    attending: bool
