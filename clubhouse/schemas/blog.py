# clubhouse/schemas/blog.py
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import Field, model_validator

from clubhouse.schemas.base import CamelModel, DocumentModel
from clubhouse.schemas.rich_text import EMPTY_DOC, RichTextDoc, paragraph_doc


class BlogTag(str, Enum):
    news = "News"
    guide = "Guide"
    advertisement = "Advertisement"
    recruitment = "Recruitment"
    event = "Event"


class BlogPost(DocumentModel):
    title: str
    slug: str
    tags: List[BlogTag] = Field(default_factory=list)
    content_json: RichTextDoc = Field(default_factory=lambda: dict(EMPTY_DOC))
    content_text: str = ""

    author_uid: str
    author_alias_snapshot: str
    author_pronouns_snapshot: Optional[str] = None
    author_photo_snapshot: Optional[str] = None

    # Mirror of the linked calendar event
    linked_event_id: Optional[str] = None
    event_start_at: Optional[datetime] = None
    event_end_at: Optional[datetime] = None

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def upgrade(cls, data: Dict[str, Any], from_version: int) -> Dict[str, Any]:
        # Posts written before the rich text editor only carry contentText
        if from_version < 1 and not data.get("contentJson"):
            data["contentJson"] = paragraph_doc(str(data.get("contentText") or ""))
        return data


class BlogPostSave(CamelModel):
    """Editor payload for creating or editing a post."""

    title: str = Field(..., json_schema_extra={"example": "Session Zero Recap"})
    tags: List[BlogTag] = Field(default_factory=list)
    content_json: RichTextDoc = Field(default_factory=lambda: dict(EMPTY_DOC))

    # Blog -> Calendar integration
    create_event: bool = False
    event_start_at: Optional[datetime] = None
    event_end_at: Optional[datetime] = None

    @model_validator(mode="after")
    def dedupe_tags(self):
        self.tags = list(dict.fromkeys(self.tags))
        return self
