# clubhouse/constants/collections.py
"""
Collection paths in the document store.

Sub-collections are addressed by path, e.g. `events/evt_1/rsvps`.
"""


class Collections:
    USERS = "users"
    ALIAS_INDEX = "aliasIndex"
    BLOG_POSTS = "blogPosts"
    SLUG_INDEX = "blogSlugIndex"
    EVENTS = "events"

    CHARACTER_SHEET_KEY = "main"

    @staticmethod
    def comments(thread_collection: str, parent_id: str) -> str:
        return f"{thread_collection}/{parent_id}/comments"

    @staticmethod
    def rsvps(event_id: str) -> str:
        return f"{Collections.EVENTS}/{event_id}/rsvps"

    @staticmethod
    def character_sheet(uid: str) -> str:
        return f"{Collections.USERS}/{uid}/characterSheet"
