# clubhouse/schemas/user.py
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import Field, field_validator

from clubhouse.schemas.base import CamelModel, DocumentModel


class ClubRole(str, Enum):
    player = "Player"
    dm = "DM"
    officer = "Officer"
    moderator = "Moderator"
    admin = "Admin"


# Roles allowed to moderate: manage the calendar, delete any comment
STAFF_ROLES = {ClubRole.admin, ClubRole.moderator, ClubRole.officer}
POST_CREATOR_ROLES = {ClubRole.admin, ClubRole.officer, ClubRole.moderator}
POST_EDITOR_ROLES = {ClubRole.admin, ClubRole.moderator}


class Theme(str, Enum):
    dark = "dark"
    light = "light"


class UserProfile(DocumentModel):
    alias: Optional[str] = None
    pronouns: Optional[str] = None
    roles: List[ClubRole] = Field(default_factory=lambda: [ClubRole.player])
    photo_url: Optional[str] = None
    theme: Theme = Theme.dark
    accent_color: str = "#7c3aed"
    display_name_snapshot: Optional[str] = None
    created_at: Optional[datetime] = None
    last_seen_at: Optional[datetime] = None

    @field_validator("roles", mode="before")
    @classmethod
    def drop_unknown_roles(cls, v):
        # Roles edited by hand in the database console may contain typos
        if not isinstance(v, list):
            return [ClubRole.player]
        known = {r.value for r in ClubRole}
        return [r for r in v if r in known] or [ClubRole.player]

    def has_any_role(self, roles) -> bool:
        return any(role in roles for role in self.roles)

    @property
    def is_staff(self) -> bool:
        return self.has_any_role(STAFF_ROLES)

    @property
    def is_admin(self) -> bool:
        return ClubRole.admin in self.roles


class AliasClaim(CamelModel):
    alias: str = Field(..., json_schema_extra={"example": "Rook"})


class AliasClaimResult(CamelModel):
    status: str = Field(..., description="'claimed' or 'unchanged'")
    alias: str


class PreferencesUpdate(CamelModel):
    pronouns: Optional[str] = Field(None, json_schema_extra={"example": "they/them"})
    theme: Optional[Theme] = None
    accent_color: Optional[str] = Field(None, json_schema_extra={"example": "#7c3aed"})


class RolesUpdate(CamelModel):
    roles: List[ClubRole]
