# clubhouse/crud/__init__.py

from .crud_alias import alias
from .crud_blog_post import blog_post
from .crud_calendar_event import calendar_event
from .crud_character_sheet import character_sheet
from .crud_comment import comment
from .crud_rsvp import rsvp
from .crud_user import user
