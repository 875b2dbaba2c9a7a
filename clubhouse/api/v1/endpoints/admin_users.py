# clubhouse/api/v1/endpoints/admin_users.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from clubhouse import crud
from clubhouse.api import deps
from clubhouse.core.exceptions import AuthorizationError
from clubhouse.schemas.user import RolesUpdate, UserProfile
from clubhouse.store import DocumentStore

router = APIRouter(prefix="/admin/users", tags=["Admin"])


@router.get("", response_model=List[UserProfile])
def list_users(
    q: Optional[str] = Query(None, description="Search alias, name, uid or role"),
    member: UserProfile = Depends(deps.get_current_member),
    store: DocumentStore = Depends(deps.get_store),
):
    if not member.is_admin:
        raise AuthorizationError("Only admins can manage users.")
    return crud.user.list_users(store, search=q)


@router.put("/{uid}/roles", response_model=UserProfile)
def set_roles(
    uid: str,
    roles_in: RolesUpdate,
    member: UserProfile = Depends(deps.get_current_member),
    store: DocumentStore = Depends(deps.get_store),
):
    return crud.user.set_roles(store, actor=member, uid=uid, roles=roles_in.roles)
