# clubhouse/crud/crud_comment.py
"""
CRUD operations for comment threads on blog posts and calendar events.

Threads are one level deep: a reply's parent must be a top-level comment.
Deleting a comment removes its replies with it.
"""

import logging
from typing import Callable, Dict, List, Optional

from clubhouse.constants.collections import Collections
from clubhouse.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from clubhouse.schemas.comment import (
    Comment,
    CommentCreate,
    CommentUpdate,
    CommentWithReplies,
    ThreadKind,
)
from clubhouse.schemas.rich_text import plain_text
from clubhouse.schemas.user import UserProfile
from clubhouse.store import (
    SERVER_TIMESTAMP,
    DocumentSnapshot,
    DocumentStore,
    Subscription,
    Transaction,
    WriteOp,
)
from clubhouse.utils.ids import new_id

logger = logging.getLogger(__name__)

COMMENT_NOT_FOUND_MESSAGE = "Comment not found."

_THREAD_NOT_FOUND = {
    ThreadKind.blog_post: "Post not found.",
    ThreadKind.event: "Event not found.",
}


def _comment_text(content_json) -> str:
    text = plain_text(content_json).strip()
    if not text:
        raise ValidationError("Comment cannot be empty.", field="contentJson")
    return text


def group_thread(comments: List[Comment]) -> List[CommentWithReplies]:
    """Top-level comments in order, each carrying its replies in order."""
    top_level: Dict[str, CommentWithReplies] = {}
    for c in comments:
        if c.parent_id is None:
            top_level[c.id] = CommentWithReplies(**c.model_dump())
    for c in comments:
        if c.parent_id is not None and c.parent_id in top_level:
            top_level[c.parent_id].replies.append(c)
    return list(top_level.values())


class CRUDComment:
    """CRUD operations for Comment."""

    def _collection(self, kind: ThreadKind, thread_id: str) -> str:
        return Collections.comments(kind.collection, thread_id)

    def get(
        self, store: DocumentStore, *, kind: ThreadKind, thread_id: str, comment_id: str
    ) -> Optional[Comment]:
        return Comment.from_snapshot(
            store.get(self._collection(kind, thread_id), comment_id)
        )

    def list_thread(
        self, store: DocumentStore, *, kind: ThreadKind, thread_id: str
    ) -> List[CommentWithReplies]:
        snaps = store.query(self._collection(kind, thread_id), order_by="createdAt")
        return group_thread([Comment.from_snapshot(s) for s in snaps])

    def watch_thread(
        self,
        store: DocumentStore,
        *,
        kind: ThreadKind,
        thread_id: str,
        listener: Callable[[List[CommentWithReplies]], None],
    ) -> Subscription:
        """Live view of a thread; call `close()` on the result to stop."""

        def on_change(snaps: List[DocumentSnapshot]) -> None:
            listener(group_thread([Comment.from_snapshot(s) for s in snaps]))

        return store.subscribe(
            self._collection(kind, thread_id), on_change, order_by="createdAt"
        )

    def create(
        self,
        store: DocumentStore,
        *,
        author: UserProfile,
        kind: ThreadKind,
        thread_id: str,
        comment_in: CommentCreate,
    ) -> Comment:
        """
        Add a top-level comment or a reply.

        Raises:
            ValidationError: author has no alias, empty text or reply to a reply
            NotFoundError: thread or parent comment missing
        """
        if not author.alias:
            raise ValidationError(
                "Please set an Alias in your Profile before commenting."
            )
        text = _comment_text(comment_in.content_json)

        collection = self._collection(kind, thread_id)
        comment_id = new_id("cmt")
        comment = Comment(
            parent_id=comment_in.parent_id,
            author_uid=author.id,
            author_alias_snapshot=author.alias,
            author_pronouns_snapshot=author.pronouns,
            author_photo_snapshot=author.photo_url,
            content_json=comment_in.content_json,
            text=text,
        )
        doc = comment.to_document()
        doc["createdAt"] = SERVER_TIMESTAMP

        def add(tx: Transaction) -> None:
            if not tx.get(kind.collection, thread_id).exists:
                raise NotFoundError(_THREAD_NOT_FOUND[kind])
            if comment_in.parent_id:
                parent = tx.get(collection, comment_in.parent_id)
                if not parent.exists:
                    raise NotFoundError(COMMENT_NOT_FOUND_MESSAGE)
                if parent.get("parentId"):
                    raise ValidationError(
                        "Replies can only be made to top-level comments.",
                        field="parentId",
                    )
            tx.set(collection, comment_id, doc)

        store.transaction(add)
        logger.info(
            f"Comment {comment_id} added to {kind.collection}/{thread_id}",
            extra={"comment_id": comment_id, "parent_id": comment_in.parent_id},
        )
        return self.get(store, kind=kind, thread_id=thread_id, comment_id=comment_id)

    def update(
        self,
        store: DocumentStore,
        *,
        actor: UserProfile,
        kind: ThreadKind,
        thread_id: str,
        comment_id: str,
        comment_in: CommentUpdate,
    ) -> Comment:
        """Only the author may edit a comment."""
        text = _comment_text(comment_in.content_json)
        collection = self._collection(kind, thread_id)

        def edit(tx: Transaction) -> None:
            snap = tx.get(collection, comment_id)
            if not snap.exists:
                raise NotFoundError(COMMENT_NOT_FOUND_MESSAGE)
            if snap.get("authorUid") != actor.id:
                raise AuthorizationError("Only the author can edit this comment.")
            tx.update(
                collection,
                comment_id,
                {
                    "contentJson": comment_in.content_json,
                    "text": text,
                    "editedAt": SERVER_TIMESTAMP,
                },
            )

        store.transaction(edit)
        return self.get(store, kind=kind, thread_id=thread_id, comment_id=comment_id)

    def remove_with_replies(
        self,
        store: DocumentStore,
        *,
        actor: UserProfile,
        kind: ThreadKind,
        thread_id: str,
        comment_id: str,
    ) -> int:
        """
        Delete a comment and every reply to it in one batch write.

        Not a transaction: a reply posted between the query and the batch
        survives as an orphan, which threads simply don't display.

        Returns:
            Number of comments deleted.
        """
        collection = self._collection(kind, thread_id)
        target = store.get(collection, comment_id)
        if not target.exists:
            raise NotFoundError(COMMENT_NOT_FOUND_MESSAGE)
        if target.get("authorUid") != actor.id and not actor.is_staff:
            raise AuthorizationError("You can only delete your own comments.")

        replies = store.query(collection, where={"parentId": comment_id})
        ops = [WriteOp("delete", collection, comment_id)]
        ops.extend(WriteOp("delete", collection, r.key) for r in replies)
        store.batch_write(ops)

        logger.info(
            f"Deleted comment {comment_id} and {len(replies)} replies from "
            f"{kind.collection}/{thread_id}",
            extra={"comment_id": comment_id, "actor": actor.id},
        )
        return len(ops)


comment = CRUDComment()
