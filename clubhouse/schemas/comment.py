# clubhouse/schemas/comment.py
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import Field

from clubhouse.schemas.base import CamelModel, DocumentModel
from clubhouse.schemas.rich_text import RichTextDoc


class ThreadKind(str, Enum):
    """Documents that carry a comment thread."""

    blog_post = "blog-posts"
    event = "events"

    @property
    def collection(self) -> str:
        return "blogPosts" if self is ThreadKind.blog_post else "events"


class Comment(DocumentModel):
    parent_id: Optional[str] = None

    author_uid: str
    author_alias_snapshot: str
    author_pronouns_snapshot: Optional[str] = None
    author_photo_snapshot: Optional[str] = None

    content_json: Optional[RichTextDoc] = None
    text: str = ""

    created_at: Optional[datetime] = None
    edited_at: Optional[datetime] = None


class CommentCreate(CamelModel):
    content_json: RichTextDoc
    parent_id: Optional[str] = Field(None, description="Top-level comment to reply to")


class CommentUpdate(CamelModel):
    content_json: RichTextDoc


class CommentWithReplies(Comment):
    replies: List[Comment] = Field(default_factory=list)


class CommentDeleteResult(CamelModel):
    deleted: int
