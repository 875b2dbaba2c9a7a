# clubhouse/api/v1/endpoints/profile.py
from fastapi import APIRouter, Depends

from clubhouse import crud
from clubhouse.api import deps
from clubhouse.schemas.user import (
    AliasClaim,
    AliasClaimResult,
    PreferencesUpdate,
    UserProfile,
)
from clubhouse.store import DocumentStore

router = APIRouter(prefix="/me", tags=["Profile"])


@router.get("", response_model=UserProfile)
def read_me(member: UserProfile = Depends(deps.get_current_member)):
    """The signed-in member's profile. Created with defaults on first call."""
    return member


@router.patch("/preferences", response_model=UserProfile)
def update_preferences(
    prefs_in: PreferencesUpdate,
    member: UserProfile = Depends(deps.get_current_member),
    store: DocumentStore = Depends(deps.get_store),
):
    return crud.user.update_preferences(store, uid=member.id, prefs_in=prefs_in)


@router.put("/alias", response_model=AliasClaimResult)
def claim_alias(
    alias_in: AliasClaim,
    member: UserProfile = Depends(deps.get_current_member),
    store: DocumentStore = Depends(deps.get_store),
):
    """
    Claim a unique alias, releasing the member's previous one.

    Returns 409 if another member already holds it (case-insensitive).
    """
    return crud.alias.claim(store, member=member, raw_alias=alias_in.alias)
