# clubhouse/crud/crud_blog_post.py
"""
CRUD operations for blog posts.

Every write keeps three things consistent inside one transaction:
- the post and its Slug Index entry (no two posts share a slug),
- the post's cached event fields (linkedEventId, eventStartAt, eventEndAt),
- the linked event's cached post fields (linkedBlogPostId, linkedBlogSlug).
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from clubhouse.constants.collections import Collections
from clubhouse.core.exceptions import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from clubhouse.schemas.blog import BlogPost, BlogPostSave, BlogTag
from clubhouse.schemas.calendar_event import CalendarEvent
from clubhouse.schemas.rich_text import plain_text
from clubhouse.schemas.user import POST_CREATOR_ROLES, POST_EDITOR_ROLES, UserProfile
from clubhouse.store import SERVER_TIMESTAMP, DocumentStore, Transaction
from clubhouse.utils.dates import as_utc, to_timestamp
from clubhouse.utils.ids import new_id
from clubhouse.utils.slug import validate_title

logger = logging.getLogger(__name__)

SLUG_TAKEN_MESSAGE = "That title is already taken. Change the title slightly."
POST_NOT_FOUND_MESSAGE = "Post not found."


def _event_window(
    post_in: BlogPostSave,
) -> Tuple[Optional[datetime], Optional[datetime]]:
    """The event start/end the editor asked for, or (None, None) when off."""
    if not post_in.create_event:
        return None, None
    if post_in.event_start_at is None:
        raise ValidationError(
            "If 'Create Event' is enabled, you must pick a Start date/time.",
            field="eventStartAt",
        )
    start, end = post_in.event_start_at, post_in.event_end_at
    if end is not None and as_utc(end) < as_utc(start):
        raise ValidationError(
            "Event end must not be before its start.", field="eventEndAt"
        )
    return start, end


def _linked_event_document(
    *, title: str, start: datetime, end: Optional[datetime], post_id: str, slug: str
) -> Dict[str, Any]:
    doc = CalendarEvent(
        title=title,
        start_at=start,
        end_at=end,
        linked_blog_post_id=post_id,
        linked_blog_slug=slug,
    ).to_document()
    doc["startAt"] = to_timestamp(start)
    doc["endAt"] = to_timestamp(end)
    doc["createdAt"] = SERVER_TIMESTAMP
    doc["updatedAt"] = SERVER_TIMESTAMP
    return doc


class CRUDBlogPost:
    """CRUD operations for BlogPost."""

    # --- reads ---

    def get(self, store: DocumentStore, post_id: str) -> Optional[BlogPost]:
        return BlogPost.from_snapshot(store.get(Collections.BLOG_POSTS, post_id))

    def get_or_404(self, store: DocumentStore, post_id: str) -> BlogPost:
        post = self.get(store, post_id)
        if post is None:
            raise NotFoundError(POST_NOT_FOUND_MESSAGE)
        return post

    def get_by_slug(self, store: DocumentStore, slug: str) -> BlogPost:
        """Resolve a slug through the Slug Index."""
        entry = store.get(Collections.SLUG_INDEX, slug)
        post_id = entry.get("postId")
        if post_id:
            post = self.get(store, post_id)
            if post is not None:
                return post

        # Posts created before the index existed are only findable by field
        snaps = store.query(Collections.BLOG_POSTS, where={"slug": slug}, limit=1)
        if not snaps:
            raise NotFoundError(POST_NOT_FOUND_MESSAGE)
        return BlogPost.from_snapshot(snaps[0])

    def list_posts(
        self,
        store: DocumentStore,
        *,
        tag: Optional[BlogTag] = None,
        year: Optional[int] = None,
        month: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> List[BlogPost]:
        """Newest first, optionally narrowed to one tag and/or one year/month."""
        snaps = store.query(
            Collections.BLOG_POSTS, order_by="createdAt", descending=True
        )
        posts = [BlogPost.from_snapshot(s) for s in snaps]

        if tag is not None:
            posts = [p for p in posts if tag in p.tags]
        if year is not None:
            posts = [p for p in posts if p.created_at and p.created_at.year == year]
        if month is not None:
            posts = [p for p in posts if p.created_at and p.created_at.month == month]

        if limit is not None:
            posts = posts[:limit]
        return posts

    def resolve_from_free_text(
        self, store: DocumentStore, text: Optional[str]
    ) -> Optional[BlogPost]:
        """
        Find a post from what a member typed into a link picker.

        Accepts a slug, a `/blog/<slug>` path or the exact title.
        """
        raw = (text or "").strip()
        if not raw:
            return None

        cleaned = raw
        for prefix in ("/blog/", "blog/"):
            if cleaned.startswith(prefix):
                cleaned = cleaned[len(prefix):]
                break

        snaps = store.query(Collections.BLOG_POSTS, where={"slug": cleaned}, limit=1)
        if not snaps:
            snaps = store.query(Collections.BLOG_POSTS, where={"title": raw}, limit=1)
        if not snaps:
            return None
        return BlogPost.from_snapshot(snaps[0])

    # --- writes ---

    def create(
        self, store: DocumentStore, *, author: UserProfile, post_in: BlogPostSave
    ) -> BlogPost:
        """
        Publish a new post, reserving its slug and optionally creating the
        linked calendar event in the same transaction.

        Raises:
            ValidationError: no alias, bad title or missing event start
            AuthorizationError: author lacks a post creator role
            ConflictError: slug already reserved by another post
        """
        if not author.alias:
            raise ValidationError("Set your Alias in Profile before publishing.")
        if not author.has_any_role(POST_CREATOR_ROLES):
            raise AuthorizationError("You do not have permission to create blog posts.")

        title, slug = validate_title(post_in.title)
        start, end = _event_window(post_in)
        content_text = plain_text(post_in.content_json).strip()

        # Ids are fixed before the callback so a retry writes the same documents
        post_id = new_id("post")
        event_id = new_id("evt") if post_in.create_event else None

        post = BlogPost(
            title=title,
            slug=slug,
            tags=post_in.tags,
            content_json=post_in.content_json,
            content_text=content_text,
            author_uid=author.id,
            author_alias_snapshot=author.alias,
            author_pronouns_snapshot=author.pronouns,
            author_photo_snapshot=author.photo_url,
            linked_event_id=event_id,
        )
        post_doc = post.to_document()
        post_doc.update(
            eventStartAt=to_timestamp(start),
            eventEndAt=to_timestamp(end),
            createdAt=SERVER_TIMESTAMP,
            updatedAt=SERVER_TIMESTAMP,
        )

        def reserve(tx: Transaction) -> None:
            index_snap = tx.get(Collections.SLUG_INDEX, slug)
            if index_snap.exists and index_snap.get("postId") != post_id:
                raise ConflictError(SLUG_TAKEN_MESSAGE, key=slug)

            tx.set(
                Collections.SLUG_INDEX,
                slug,
                {"postId": post_id, "createdAt": SERVER_TIMESTAMP, "schemaVersion": 1},
            )
            tx.set(Collections.BLOG_POSTS, post_id, post_doc)
            if event_id:
                tx.set(
                    Collections.EVENTS,
                    event_id,
                    _linked_event_document(
                        title=title, start=start, end=end, post_id=post_id, slug=slug
                    ),
                )

        store.transaction(reserve)
        logger.info(
            f"Blog post {post_id} published with slug '{slug}'",
            extra={"post_id": post_id, "slug": slug, "event_id": event_id},
        )
        return self.get_or_404(store, post_id)

    def update(
        self,
        store: DocumentStore,
        *,
        editor: UserProfile,
        post_id: str,
        post_in: BlogPostSave,
    ) -> BlogPost:
        """
        Save an edited post.

        A changed title moves the Slug Index entry. The event toggle drives
        the link: off unlinks (the event stays on the calendar without a
        back-reference), on with a live linked event updates it in place,
        on without one creates a new event.
        """
        if not editor.alias:
            raise ValidationError("Set your Alias in Profile before publishing.")
        if not editor.has_any_role(POST_EDITOR_ROLES):
            raise AuthorizationError("You do not have permission to edit blog posts.")

        title, slug = validate_title(post_in.title)
        start, end = _event_window(post_in)
        content_text = plain_text(post_in.content_json).strip()
        fresh_event_id = new_id("evt")

        def save(tx: Transaction) -> Dict[str, Any]:
            post_snap = tx.get(Collections.BLOG_POSTS, post_id)
            if not post_snap.exists:
                raise NotFoundError(POST_NOT_FOUND_MESSAGE)

            old_slug = post_snap.get("slug")
            prev_event_id = post_snap.get("linkedEventId")

            slug_changed = old_slug != slug
            new_index_snap = old_index_snap = None
            if slug_changed:
                new_index_snap = tx.get(Collections.SLUG_INDEX, slug)
                if new_index_snap.exists and new_index_snap.get("postId") != post_id:
                    raise ConflictError(SLUG_TAKEN_MESSAGE, key=slug)
                if old_slug:
                    old_index_snap = tx.get(Collections.SLUG_INDEX, old_slug)

            prev_event_snap = (
                tx.get(Collections.EVENTS, prev_event_id) if prev_event_id else None
            )
            prev_event_alive = prev_event_snap is not None and prev_event_snap.exists

            # Reads are done; everything below only queues writes
            if slug_changed:
                if not new_index_snap.exists:
                    tx.set(
                        Collections.SLUG_INDEX,
                        slug,
                        {
                            "postId": post_id,
                            "createdAt": SERVER_TIMESTAMP,
                            "schemaVersion": 1,
                        },
                    )
                if old_index_snap is not None and old_index_snap.get("postId") == post_id:
                    tx.delete(Collections.SLUG_INDEX, old_slug)

            event_id = None
            event_action = "none"
            if start is not None:
                if prev_event_alive:
                    event_id = prev_event_id
                    event_action = "updated"
                    tx.update(
                        Collections.EVENTS,
                        event_id,
                        {
                            "title": title,
                            "startAt": to_timestamp(start),
                            "endAt": to_timestamp(end),
                            "linkedBlogPostId": post_id,
                            "linkedBlogSlug": slug,
                            "updatedAt": SERVER_TIMESTAMP,
                        },
                    )
                else:
                    event_id = fresh_event_id
                    event_action = "created"
                    tx.set(
                        Collections.EVENTS,
                        event_id,
                        _linked_event_document(
                            title=title,
                            start=start,
                            end=end,
                            post_id=post_id,
                            slug=slug,
                        ),
                    )
            elif prev_event_alive and prev_event_snap.get("linkedBlogPostId") == post_id:
                event_action = "unlinked"
                tx.update(
                    Collections.EVENTS,
                    prev_event_id,
                    {
                        "linkedBlogPostId": None,
                        "linkedBlogSlug": None,
                        "updatedAt": SERVER_TIMESTAMP,
                    },
                )

            tx.update(
                Collections.BLOG_POSTS,
                post_id,
                {
                    "title": title,
                    "slug": slug,
                    "tags": [t.value for t in post_in.tags],
                    "contentJson": post_in.content_json,
                    "contentText": content_text,
                    "linkedEventId": event_id,
                    "eventStartAt": to_timestamp(start),
                    "eventEndAt": to_timestamp(end),
                    "updatedAt": SERVER_TIMESTAMP,
                    "schemaVersion": 1,
                },
            )
            return {"old_slug": old_slug, "event_id": event_id, "event": event_action}

        outcome = store.transaction(save)
        logger.info(
            f"Blog post {post_id} saved (slug '{outcome['old_slug']}' -> '{slug}', "
            f"event {outcome['event']})",
            extra={"post_id": post_id, "slug": slug, "event_id": outcome["event_id"]},
        )
        return self.get_or_404(store, post_id)

    def remove(self, store: DocumentStore, *, editor: UserProfile, post_id: str) -> None:
        """Delete a post, release its slug and clear the linked event's back-reference."""
        if not editor.has_any_role(POST_EDITOR_ROLES):
            raise AuthorizationError("You do not have permission to delete blog posts.")

        def delete_post(tx: Transaction) -> Optional[str]:
            post_snap = tx.get(Collections.BLOG_POSTS, post_id)
            if not post_snap.exists:
                raise NotFoundError(POST_NOT_FOUND_MESSAGE)

            slug = post_snap.get("slug")
            event_id = post_snap.get("linkedEventId")
            index_snap = tx.get(Collections.SLUG_INDEX, slug) if slug else None
            event_snap = tx.get(Collections.EVENTS, event_id) if event_id else None

            tx.delete(Collections.BLOG_POSTS, post_id)
            if index_snap is not None and index_snap.get("postId") == post_id:
                tx.delete(Collections.SLUG_INDEX, slug)
            if event_snap is not None and event_snap.get("linkedBlogPostId") == post_id:
                tx.update(
                    Collections.EVENTS,
                    event_id,
                    {
                        "linkedBlogPostId": None,
                        "linkedBlogSlug": None,
                        "updatedAt": SERVER_TIMESTAMP,
                    },
                )
            return slug

        slug = store.transaction(delete_post)
        logger.info(
            f"Blog post {post_id} deleted by {editor.id}, slug '{slug}' released",
            extra={"post_id": post_id, "slug": slug},
        )


blog_post = CRUDBlogPost()
