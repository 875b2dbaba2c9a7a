# clubhouse/crud/crud_alias.py
"""
Exclusive alias claims.

The Alias Index maps a normalized alias (trimmed, case-folded) to the uid
that owns it. Claiming a new alias and releasing the old one happen in one
transaction, so no other transaction ever sees a member holding both or
neither.
"""

import logging

from clubhouse.constants.collections import Collections
from clubhouse.core.exceptions import ConflictError, NotFoundError
from clubhouse.schemas.user import AliasClaimResult, UserProfile
from clubhouse.store import SERVER_TIMESTAMP, DocumentStore, Transaction
from clubhouse.utils.validators import alias_key, clean_alias

logger = logging.getLogger(__name__)


class CRUDAlias:
    """Claims and releases entries in the Alias Index."""

    def claim(
        self, store: DocumentStore, *, member: UserProfile, raw_alias: str
    ) -> AliasClaimResult:
        """
        Claim `raw_alias` for `member`, releasing their previous alias.

        Raises:
            ValidationError: malformed alias (before any transaction)
            ConflictError: alias owned by another member
        """
        uid = member.id
        cleaned = clean_alias(raw_alias)
        new_key = alias_key(cleaned)
        current_key = alias_key(member.alias) if member.alias else None

        if current_key == new_key:
            return AliasClaimResult(status="unchanged", alias=member.alias)

        def reserve(tx: Transaction) -> None:
            user_snap = tx.get(Collections.USERS, uid)
            if not user_snap.exists:
                raise NotFoundError("User not found.")

            new_snap = tx.get(Collections.ALIAS_INDEX, new_key)
            taken_by = new_snap.get("uid")
            if taken_by and taken_by != uid:
                raise ConflictError("That alias is already taken.", key=new_key)

            # Re-derive the old key from the stored profile, not the caller's copy
            stored_alias = user_snap.get("alias")
            old_key = alias_key(stored_alias) if stored_alias else None
            old_snap = None
            if old_key and old_key != new_key:
                old_snap = tx.get(Collections.ALIAS_INDEX, old_key)

            # All checks are done; writes start here
            if old_snap is not None and old_snap.get("uid") == uid:
                tx.delete(Collections.ALIAS_INDEX, old_key)

            if not new_snap.exists:
                tx.set(
                    Collections.ALIAS_INDEX,
                    new_key,
                    {"uid": uid, "createdAt": SERVER_TIMESTAMP, "schemaVersion": 1},
                )

            tx.update(Collections.USERS, uid, {"alias": cleaned})

        store.transaction(reserve)
        logger.info(
            f"Alias '{cleaned}' claimed by {uid}",
            extra={"uid": uid, "alias_key": new_key, "released": current_key},
        )
        return AliasClaimResult(status="claimed", alias=cleaned)


alias = CRUDAlias()
