# clubhouse/models/document.py
from sqlalchemy import JSON, Column, DateTime, Integer, String, text
from sqlalchemy.sql import func

from clubhouse.db.base_class import Base


class Document(Base):
    """
    One document of the document store.

    `collection` is a slash separated path ("blogPosts", "events/evt_1/rsvps")
    and `key` the document id inside it. `version` starts at 1 and is bumped
    on every committed write; transactions use it for compare-and-swap.
    """

    __tablename__ = "documents"

    collection = Column(String(255), primary_key=True)
    key = Column(String(255), primary_key=True)
    data = Column(JSON, nullable=False)
    version = Column(Integer, nullable=False, server_default=text("1"))
    createdAt = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updatedAt = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
