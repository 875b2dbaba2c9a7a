# clubhouse/schemas/calendar_event.py
from datetime import date, datetime
from typing import Optional

from pydantic import Field

from clubhouse.schemas.base import CamelModel, DocumentModel


class CalendarEvent(DocumentModel):
    title: str
    start_at: datetime
    end_at: Optional[datetime] = None
    image_url: Optional[str] = None

    # Mirror of the linked blog post
    linked_blog_post_id: Optional[str] = None
    linked_blog_slug: Optional[str] = None

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CalendarEventSave(CamelModel):
    """Calendar editor payload."""

    title: str = Field(..., json_schema_extra={"example": "One-shot: The Sunless Citadel"})
    start_at: datetime
    end_at: Optional[datetime] = None
    image_url: Optional[str] = None
    blog_query: Optional[str] = Field(
        None,
        description="Slug, /blog/<slug> path or exact title of the post to link. "
        "Empty unlinks.",
    )


class EventMove(CamelModel):
    """Drag-to-day on the calendar grid. Time of day and duration are kept."""

    target_day: date
