# clubhouse/api/v1/endpoints/character_sheet.py
"""
Character sheet endpoints.

Every member edits only their own sheet; each call returns the whole
updated sheet.
"""

from fastapi import APIRouter, Depends

from clubhouse import crud
from clubhouse.api import deps
from clubhouse.schemas.character_sheet import (
    AttributeKey,
    AttributeValue,
    CategoryName,
    CharacterSheet,
    CharacterSheetUpdate,
    InventoryItemUpdate,
    ProficiencyCreate,
    ProficiencyUpdate,
    SkillUpdate,
)
from clubhouse.schemas.user import UserProfile
from clubhouse.store import DocumentStore

router = APIRouter(prefix="/me/character-sheet", tags=["Character Sheet"])


@router.get("", response_model=CharacterSheet)
def read_sheet(
    member: UserProfile = Depends(deps.get_current_member),
    store: DocumentStore = Depends(deps.get_store),
):
    return crud.character_sheet.get_or_create(store, uid=member.id)


@router.patch("", response_model=CharacterSheet)
def update_sheet(
    sheet_in: CharacterSheetUpdate,
    member: UserProfile = Depends(deps.get_current_member),
    store: DocumentStore = Depends(deps.get_store),
):
    return crud.character_sheet.update_fields(store, uid=member.id, sheet_in=sheet_in)


@router.put("/attributes/{key}", response_model=CharacterSheet)
def set_attribute(
    key: AttributeKey,
    value_in: AttributeValue,
    member: UserProfile = Depends(deps.get_current_member),
    store: DocumentStore = Depends(deps.get_store),
):
    return crud.character_sheet.set_attribute(
        store, uid=member.id, key=key, value=value_in.value
    )


# --- proficiencies ---


@router.post("/proficiencies", response_model=CharacterSheet)
def add_proficiency(
    prof_in: ProficiencyCreate,
    member: UserProfile = Depends(deps.get_current_member),
    store: DocumentStore = Depends(deps.get_store),
):
    return crud.character_sheet.add_proficiency(store, uid=member.id, prof_in=prof_in)


@router.patch("/proficiencies/{profId}", response_model=CharacterSheet)
def update_proficiency(
    profId: str,
    prof_in: ProficiencyUpdate,
    member: UserProfile = Depends(deps.get_current_member),
    store: DocumentStore = Depends(deps.get_store),
):
    return crud.character_sheet.update_proficiency(
        store, uid=member.id, prof_id=profId, prof_in=prof_in
    )


@router.delete("/proficiencies/{profId}", response_model=CharacterSheet)
def delete_proficiency(
    profId: str,
    member: UserProfile = Depends(deps.get_current_member),
    store: DocumentStore = Depends(deps.get_store),
):
    return crud.character_sheet.delete_proficiency(store, uid=member.id, prof_id=profId)


# --- skills ---


@router.post("/skills", response_model=CharacterSheet)
def add_skill(
    member: UserProfile = Depends(deps.get_current_member),
    store: DocumentStore = Depends(deps.get_store),
):
    return crud.character_sheet.add_skill(store, uid=member.id)


@router.patch("/skills/{skillId}", response_model=CharacterSheet)
def update_skill(
    skillId: str,
    skill_in: SkillUpdate,
    member: UserProfile = Depends(deps.get_current_member),
    store: DocumentStore = Depends(deps.get_store),
):
    return crud.character_sheet.update_skill(
        store, uid=member.id, skill_id=skillId, skill_in=skill_in
    )


@router.delete("/skills/{skillId}", response_model=CharacterSheet)
def delete_skill(
    skillId: str,
    member: UserProfile = Depends(deps.get_current_member),
    store: DocumentStore = Depends(deps.get_store),
):
    return crud.character_sheet.delete_skill(store, uid=member.id, skill_id=skillId)


# --- inventory ---


@router.post("/inventory", response_model=CharacterSheet)
def add_category(
    category_in: CategoryName,
    member: UserProfile = Depends(deps.get_current_member),
    store: DocumentStore = Depends(deps.get_store),
):
    return crud.character_sheet.add_category(
        store, uid=member.id, name=category_in.name
    )


@router.patch("/inventory/{categoryId}", response_model=CharacterSheet)
def rename_category(
    categoryId: str,
    category_in: CategoryName,
    member: UserProfile = Depends(deps.get_current_member),
    store: DocumentStore = Depends(deps.get_store),
):
    return crud.character_sheet.rename_category(
        store, uid=member.id, category_id=categoryId, name=category_in.name
    )


@router.delete("/inventory/{categoryId}", response_model=CharacterSheet)
def delete_category(
    categoryId: str,
    member: UserProfile = Depends(deps.get_current_member),
    store: DocumentStore = Depends(deps.get_store),
):
    return crud.character_sheet.delete_category(
        store, uid=member.id, category_id=categoryId
    )


@router.post("/inventory/{categoryId}/items", response_model=CharacterSheet)
def add_item(
    categoryId: str,
    member: UserProfile = Depends(deps.get_current_member),
    store: DocumentStore = Depends(deps.get_store),
):
    return crud.character_sheet.add_item(store, uid=member.id, category_id=categoryId)


@router.put("/inventory/{categoryId}/items/{itemId}", response_model=CharacterSheet)
def update_item(
    categoryId: str,
    itemId: str,
    item_in: InventoryItemUpdate,
    member: UserProfile = Depends(deps.get_current_member),
    store: DocumentStore = Depends(deps.get_store),
):
    return crud.character_sheet.update_item(
        store, uid=member.id, category_id=categoryId, item_id=itemId, item_in=item_in
    )


@router.delete("/inventory/{categoryId}/items/{itemId}", response_model=CharacterSheet)
def delete_item(
    categoryId: str,
    itemId: str,
    member: UserProfile = Depends(deps.get_current_member),
    store: DocumentStore = Depends(deps.get_store),
):
    return crud.character_sheet.delete_item(
        store, uid=member.id, category_id=categoryId, item_id=itemId
    )
