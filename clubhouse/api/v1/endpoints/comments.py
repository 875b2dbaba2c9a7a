# clubhouse/api/v1/endpoints/comments.py
"""
Comment threads on blog posts and calendar events.

Both thread kinds share these routes: `/{blog-posts|events}/{id}/comments`.
"""

from typing import List

from fastapi import APIRouter, Depends, status

from clubhouse import crud
from clubhouse.api import deps
from clubhouse.schemas.comment import (
    Comment,
    CommentCreate,
    CommentDeleteResult,
    CommentUpdate,
    CommentWithReplies,
    ThreadKind,
)
from clubhouse.schemas.user import UserProfile
from clubhouse.store import DocumentStore

router = APIRouter(prefix="/{kind}/{threadId}/comments", tags=["Comments"])


@router.get("", response_model=List[CommentWithReplies])
def list_comments(
    kind: ThreadKind, threadId: str, store: DocumentStore = Depends(deps.get_store)
):
    return crud.comment.list_thread(store, kind=kind, thread_id=threadId)


@router.post("", response_model=Comment, status_code=status.HTTP_201_CREATED)
def add_comment(
    kind: ThreadKind,
    threadId: str,
    comment_in: CommentCreate,
    member: UserProfile = Depends(deps.get_current_member),
    store: DocumentStore = Depends(deps.get_store),
):
    return crud.comment.create(
        store, author=member, kind=kind, thread_id=threadId, comment_in=comment_in
    )


@router.patch("/{commentId}", response_model=Comment)
def edit_comment(
    kind: ThreadKind,
    threadId: str,
    commentId: str,
    comment_in: CommentUpdate,
    member: UserProfile = Depends(deps.get_current_member),
    store: DocumentStore = Depends(deps.get_store),
):
    return crud.comment.update(
        store,
        actor=member,
        kind=kind,
        thread_id=threadId,
        comment_id=commentId,
        comment_in=comment_in,
    )


@router.delete("/{commentId}", response_model=CommentDeleteResult)
def delete_comment(
    kind: ThreadKind,
    threadId: str,
    commentId: str,
    member: UserProfile = Depends(deps.get_current_member),
    store: DocumentStore = Depends(deps.get_store),
):
    """Deletes the comment and its replies."""
    deleted = crud.comment.remove_with_replies(
        store, actor=member, kind=kind, thread_id=threadId, comment_id=commentId
    )
    return CommentDeleteResult(deleted=deleted)
