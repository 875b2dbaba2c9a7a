# clubhouse/api/v1/api.py

from fastapi import APIRouter

from clubhouse.api.v1.endpoints import (
    admin_users,
    blog,
    calendar,
    character_sheet,
    comments,
    health,
    profile,
    rsvps,
)

# This is the main router for the v1 API.
api_router = APIRouter()

api_router.include_router(health.router)
api_router.include_router(profile.router)
api_router.include_router(character_sheet.router)
api_router.include_router(admin_users.router)
api_router.include_router(blog.router)
api_router.include_router(calendar.router)
api_router.include_router(rsvps.router)
# Catch-all thread routes go last
api_router.include_router(comments.router)
