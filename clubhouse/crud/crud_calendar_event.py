# clubhouse/crud/crud_calendar_event.py
"""
CRUD operations for calendar events.

Calendar edits are staff-only. Changing an event's times, or linking it to
a blog post from the calendar side, rewrites the post's cached event fields
in the same transaction.
"""

import logging
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from clubhouse.constants.collections import Collections
from clubhouse.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from clubhouse.crud.crud_blog_post import blog_post
from clubhouse.schemas.calendar_event import CalendarEvent, CalendarEventSave
from clubhouse.schemas.user import UserProfile
from clubhouse.store import SERVER_TIMESTAMP, DocumentStore, Transaction
from clubhouse.utils.dates import as_utc, same_time_on_day, to_timestamp
from clubhouse.utils.ids import new_id
from clubhouse.utils.slug import TITLE_MIN_LENGTH
from clubhouse.utils.validators import clean_optional_text

logger = logging.getLogger(__name__)

EVENT_NOT_FOUND_MESSAGE = "Event not found."
BLOG_NOT_FOUND_MESSAGE = (
    "Linked blog not found. Select from the dropdown or type exact Title/Slug."
)

_CLEARED_POST_LINK = {"linkedEventId": None, "eventStartAt": None, "eventEndAt": None}
_CLEARED_EVENT_LINK = {"linkedBlogPostId": None, "linkedBlogSlug": None}


def _require_staff(actor: UserProfile) -> None:
    if not actor.is_staff:
        raise AuthorizationError("Only staff can change the calendar.")


class CRUDCalendarEvent:
    """CRUD operations for CalendarEvent."""

    def get(self, store: DocumentStore, event_id: str) -> Optional[CalendarEvent]:
        return CalendarEvent.from_snapshot(store.get(Collections.EVENTS, event_id))

    def get_or_404(self, store: DocumentStore, event_id: str) -> CalendarEvent:
        event = self.get(store, event_id)
        if event is None:
            raise NotFoundError(EVENT_NOT_FOUND_MESSAGE)
        return event

    def list_events(
        self,
        store: DocumentStore,
        *,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[CalendarEvent]:
        """Events ordered by start time, optionally limited to those starting in [start, end)."""
        snaps = store.query(Collections.EVENTS, order_by="startAt")
        events = [CalendarEvent.from_snapshot(s) for s in snaps]
        if start is not None:
            events = [e for e in events if as_utc(e.start_at) >= as_utc(start)]
        if end is not None:
            events = [e for e in events if as_utc(e.start_at) < as_utc(end)]
        return events

    def save(
        self,
        store: DocumentStore,
        *,
        actor: UserProfile,
        event_in: CalendarEventSave,
        event_id: Optional[str] = None,
    ) -> CalendarEvent:
        """
        Create (event_id=None) or edit an event from the calendar editor.

        `event_in.blog_query` picks the linked post; empty unlinks. Both
        sides of the link, and any stale mirror on a previous partner, are
        written in one transaction.
        """
        _require_staff(actor)

        title = event_in.title.strip()
        if len(title) < TITLE_MIN_LENGTH:
            raise ValidationError("Title must be at least 3 characters.", field="title")
        if event_in.end_at is not None and as_utc(event_in.end_at) < as_utc(
            event_in.start_at
        ):
            raise ValidationError(
                "Event end must not be before its start.", field="endAt"
            )

        target_post_id = None
        if (event_in.blog_query or "").strip():
            resolved = blog_post.resolve_from_free_text(store, event_in.blog_query)
            if resolved is None:
                raise ValidationError(BLOG_NOT_FOUND_MESSAGE, field="blogQuery")
            target_post_id = resolved.id

        creating = event_id is None
        key = event_id or new_id("evt")
        start_at = to_timestamp(event_in.start_at)
        end_at = to_timestamp(event_in.end_at)

        def write(tx: Transaction) -> Dict[str, Any]:
            prev_post_id = None
            if not creating:
                ev_snap = tx.get(Collections.EVENTS, key)
                if not ev_snap.exists:
                    raise NotFoundError(EVENT_NOT_FOUND_MESSAGE)
                prev_post_id = ev_snap.get("linkedBlogPostId")

            target_slug = None
            other_event_snap = None
            if target_post_id:
                post_snap = tx.get(Collections.BLOG_POSTS, target_post_id)
                if not post_snap.exists:
                    raise ValidationError(BLOG_NOT_FOUND_MESSAGE, field="blogQuery")
                target_slug = post_snap.get("slug")
                other_event_id = post_snap.get("linkedEventId")
                if other_event_id and other_event_id != key:
                    other_event_snap = tx.get(Collections.EVENTS, other_event_id)

            prev_post_snap = None
            if prev_post_id and prev_post_id != target_post_id:
                prev_post_snap = tx.get(Collections.BLOG_POSTS, prev_post_id)

            # Writes only from here on
            fields = {
                "title": title,
                "startAt": start_at,
                "endAt": end_at,
                "imageUrl": clean_optional_text(event_in.image_url),
                "linkedBlogPostId": target_post_id,
                "linkedBlogSlug": target_slug,
                "updatedAt": SERVER_TIMESTAMP,
                "schemaVersion": 1,
            }
            if creating:
                tx.set(
                    Collections.EVENTS, key, {**fields, "createdAt": SERVER_TIMESTAMP}
                )
            else:
                tx.update(Collections.EVENTS, key, fields)

            if target_post_id:
                tx.update(
                    Collections.BLOG_POSTS,
                    target_post_id,
                    {"linkedEventId": key, "eventStartAt": start_at, "eventEndAt": end_at},
                )

            cleared = []
            if prev_post_snap is not None and prev_post_snap.get("linkedEventId") == key:
                tx.update(Collections.BLOG_POSTS, prev_post_id, _CLEARED_POST_LINK)
                cleared.append(f"{Collections.BLOG_POSTS}/{prev_post_id}")
            if (
                other_event_snap is not None
                and other_event_snap.get("linkedBlogPostId") == target_post_id
            ):
                tx.update(
                    Collections.EVENTS,
                    other_event_snap.key,
                    {**_CLEARED_EVENT_LINK, "updatedAt": SERVER_TIMESTAMP},
                )
                cleared.append(f"{Collections.EVENTS}/{other_event_snap.key}")
            return {"cleared": cleared}

        outcome = store.transaction(write)
        logger.info(
            f"Event {key} {'created' if creating else 'saved'} by {actor.id}"
            f" (linked post: {target_post_id})",
            extra={
                "event_id": key,
                "post_id": target_post_id,
                "cleared_mirrors": outcome["cleared"],
            },
        )
        return self.get_or_404(store, key)

    def move_to_day(
        self,
        store: DocumentStore,
        *,
        actor: UserProfile,
        event_id: str,
        target_day: date,
    ) -> CalendarEvent:
        """
        Drag-to-day: move the event to `target_day` keeping its time of day
        and duration, and push the new times into the linked post.
        """
        _require_staff(actor)

        def move(tx: Transaction) -> None:
            ev_snap = tx.get(Collections.EVENTS, event_id)
            if not ev_snap.exists:
                raise NotFoundError(EVENT_NOT_FOUND_MESSAGE)
            event = CalendarEvent.from_snapshot(ev_snap)

            new_start = same_time_on_day(event.start_at, target_day)
            new_end = None
            if event.end_at is not None:
                new_end = new_start + (as_utc(event.end_at) - as_utc(event.start_at))

            post_snap = None
            if event.linked_blog_post_id:
                post_snap = tx.get(Collections.BLOG_POSTS, event.linked_blog_post_id)

            tx.update(
                Collections.EVENTS,
                event_id,
                {
                    "startAt": to_timestamp(new_start),
                    "endAt": to_timestamp(new_end),
                    "updatedAt": SERVER_TIMESTAMP,
                },
            )
            if post_snap is not None and post_snap.get("linkedEventId") == event_id:
                tx.update(
                    Collections.BLOG_POSTS,
                    post_snap.key,
                    {
                        "eventStartAt": to_timestamp(new_start),
                        "eventEndAt": to_timestamp(new_end),
                    },
                )

        store.transaction(move)
        logger.info(
            f"Event {event_id} moved to {target_day.isoformat()} by {actor.id}",
            extra={"event_id": event_id},
        )
        return self.get_or_404(store, event_id)

    def remove(self, store: DocumentStore, *, actor: UserProfile, event_id: str) -> None:
        """Delete an event and clear the linked post's cached event fields."""
        _require_staff(actor)

        def delete_event(tx: Transaction) -> Optional[str]:
            ev_snap = tx.get(Collections.EVENTS, event_id)
            if not ev_snap.exists:
                raise NotFoundError(EVENT_NOT_FOUND_MESSAGE)
            post_id = ev_snap.get("linkedBlogPostId")
            post_snap = tx.get(Collections.BLOG_POSTS, post_id) if post_id else None

            tx.delete(Collections.EVENTS, event_id)
            if post_snap is not None and post_snap.get("linkedEventId") == event_id:
                tx.update(Collections.BLOG_POSTS, post_id, _CLEARED_POST_LINK)
                return post_id
            return None

        unlinked_post = store.transaction(delete_event)
        logger.info(
            f"Event {event_id} deleted by {actor.id}",
            extra={"event_id": event_id, "unlinked_post": unlinked_post},
        )


calendar_event = CRUDCalendarEvent()
