# clubhouse/crud/crud_user.py
"""
CRUD operations for member profiles and role administration.
"""

import logging
from typing import List, Optional

from clubhouse.constants.collections import Collections
from clubhouse.core.config import settings
from clubhouse.core.exceptions import AuthorizationError, NotFoundError
from clubhouse.schemas.token import Identity
from clubhouse.schemas.user import ClubRole, PreferencesUpdate, UserProfile
from clubhouse.store import SERVER_TIMESTAMP, DocumentStore, Transaction
from clubhouse.utils.validators import clean_optional_text, validate_accent_color

logger = logging.getLogger(__name__)


class CRUDUser:
    """CRUD operations for user profiles."""

    def get(self, store: DocumentStore, uid: str) -> Optional[UserProfile]:
        return UserProfile.from_snapshot(store.get(Collections.USERS, uid))

    def get_or_404(self, store: DocumentStore, uid: str) -> UserProfile:
        profile = self.get(store, uid)
        if profile is None:
            raise NotFoundError("User not found.")
        return profile

    def ensure_user(self, store: DocumentStore, *, identity: Identity) -> UserProfile:
        """
        Return the member's profile, provisioning it on first sign-in.

        New members get the base role and default theme; their photo and
        display name are copied from the identity provider.
        """
        existing = self.get(store, identity.id)
        if existing is not None:
            return existing

        def provision(tx: Transaction) -> bool:
            snap = tx.get(Collections.USERS, identity.id)
            if snap.exists:
                return False
            profile = UserProfile(
                roles=[ClubRole(settings.BASE_ROLE)],
                photo_url=identity.photo_url,
                theme=settings.DEFAULT_THEME,
                accent_color=settings.DEFAULT_ACCENT_COLOR,
                display_name_snapshot=identity.display_name,
            )
            doc = profile.to_document()
            doc["createdAt"] = SERVER_TIMESTAMP
            doc["lastSeenAt"] = SERVER_TIMESTAMP
            tx.set(Collections.USERS, identity.id, doc)
            return True

        if store.transaction(provision):
            logger.info(f"Provisioned profile for new member {identity.id}")
        return self.get_or_404(store, identity.id)

    def update_preferences(
        self, store: DocumentStore, *, uid: str, prefs_in: PreferencesUpdate
    ) -> UserProfile:
        update_data = prefs_in.model_dump(exclude_unset=True)
        fields = {}
        if "pronouns" in update_data:
            fields["pronouns"] = clean_optional_text(update_data["pronouns"])
        if update_data.get("theme") is not None:
            fields["theme"] = prefs_in.theme.value
        if update_data.get("accent_color") is not None:
            fields["accentColor"] = validate_accent_color(prefs_in.accent_color)

        if fields:
            store.update(Collections.USERS, uid, fields)
        return self.get_or_404(store, uid)

    def list_users(
        self, store: DocumentStore, *, search: Optional[str] = None, limit: int = 200
    ) -> List[UserProfile]:
        """Newest members first, optionally filtered by a free-text search."""
        snaps = store.query(
            Collections.USERS, order_by="createdAt", descending=True, limit=limit
        )
        users = [UserProfile.from_snapshot(s) for s in snaps]

        needle = (search or "").strip().lower()
        if not needle:
            return users

        def haystack(u: UserProfile) -> str:
            return " ".join(
                [
                    u.alias or "",
                    u.display_name_snapshot or "",
                    u.id,
                    " ".join(r.value for r in u.roles),
                ]
            ).lower()

        return [u for u in users if needle in haystack(u)]

    def set_roles(
        self,
        store: DocumentStore,
        *,
        actor: UserProfile,
        uid: str,
        roles: List[ClubRole],
    ) -> UserProfile:
        """Replace a member's roles. The base role is always kept."""
        if not actor.is_admin:
            raise AuthorizationError("Only admins can change roles.")

        wanted = set(roles) | {ClubRole(settings.BASE_ROLE)}
        ordered = [r.value for r in ClubRole if r in wanted]

        store.update(Collections.USERS, uid, {"roles": ordered})
        logger.info(
            f"Roles for {uid} set to {ordered} by {actor.id}",
            extra={"uid": uid, "actor": actor.id},
        )
        return self.get_or_404(store, uid)


user = CRUDUser()
