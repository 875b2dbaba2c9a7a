from datetime import datetime, timedelta, timezone
from typing import Optional

from clubhouse import crud
from clubhouse.schemas.calendar_event import CalendarEvent, CalendarEventSave
from clubhouse.schemas.user import UserProfile
from clubhouse.store import DocumentStore

START = datetime(2026, 11, 7, 18, 30, tzinfo=timezone.utc)
END = START + timedelta(hours=3, minutes=15)


def event_in(
    title: str = "One-shot Night",
    start: datetime = START,
    end: Optional[datetime] = END,
    blog_query: Optional[str] = None,
    image_url: Optional[str] = None,
) -> CalendarEventSave:
    return CalendarEventSave(
        title=title, start_at=start, end_at=end, blog_query=blog_query, image_url=image_url
    )


def create_event(store: DocumentStore, actor: UserProfile, **kwargs) -> CalendarEvent:
    return crud.calendar_event.save(store, actor=actor, event_in=event_in(**kwargs))
