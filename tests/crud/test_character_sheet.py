# tests/crud/test_character_sheet.py

import pytest

from clubhouse import crud
from clubhouse.core.exceptions import NotFoundError
from clubhouse.schemas.character_sheet import (
    AttributeKey,
    CharacterSheetUpdate,
    InventoryItemUpdate,
    ProficiencyCreate,
    ProficiencyUpdate,
    SkillUpdate,
)

UID = "u_a"
sheets = crud.character_sheet


def test_new_sheet_has_defaults(store):
    sheet = sheets.get_or_create(store, uid=UID)

    assert sheet.level == 1
    assert sheet.proficiency_bonus == 2
    assert sheet.attributes.str_ == 10
    assert [c.name for c in sheet.inventory_categories] == ["General"]
    assert sheet.updated_at is not None


def test_get_or_create_does_not_reset(store):
    sheets.update_fields(store, uid=UID, sheet_in=CharacterSheetUpdate(character_name="Vex"))

    sheet = sheets.get_or_create(store, uid=UID)

    assert sheet.character_name == "Vex"


def test_update_fields_clamps_negatives(store):
    sheet = sheets.update_fields(
        store,
        uid=UID,
        sheet_in=CharacterSheetUpdate(level=-3, experience=-1, currency=25, current_hp=-4),
    )

    assert sheet.level == 0
    assert sheet.experience == 0
    assert sheet.currency == 25
    # Hit points may go below zero
    assert sheet.current_hp == -4


def test_unset_fields_are_left_alone(store):
    sheets.update_fields(store, uid=UID, sheet_in=CharacterSheetUpdate(class_name="Bard"))

    sheet = sheets.update_fields(store, uid=UID, sheet_in=CharacterSheetUpdate(level=3))

    assert sheet.class_name == "Bard"
    assert sheet.level == 3


@pytest.mark.parametrize(
    "key, attr", [(AttributeKey.str_, "str_"), (AttributeKey.int_, "int_"), (AttributeKey.wis, "wis")]
)
def test_set_attribute(store, key, attr):
    sheet = sheets.set_attribute(store, uid=UID, key=key, value=17)

    assert getattr(sheet.attributes, attr) == 17


def test_proficiency_lifecycle(store):
    sheet = sheets.add_proficiency(
        store, uid=UID, prof_in=ProficiencyCreate(attribute=AttributeKey.dex, name="Stealth")
    )
    prof = sheet.proficiencies[0]
    assert prof.name == "Stealth"
    assert prof.proficient is False

    sheet = sheets.update_proficiency(
        store, uid=UID, prof_id=prof.id, prof_in=ProficiencyUpdate(proficient=True)
    )
    assert sheet.proficiencies[0].proficient is True
    assert sheet.proficiencies[0].name == "Stealth"

    sheet = sheets.delete_proficiency(store, uid=UID, prof_id=prof.id)
    assert sheet.proficiencies == []


def test_skill_used_count_is_clamped(store):
    skill_id = sheets.add_skill(store, uid=UID).skills[0].id

    sheet = sheets.update_skill(
        store,
        uid=UID,
        skill_id=skill_id,
        skill_in=SkillUpdate(name="Bardic Inspiration", uses_per="long rest", used_count=-2),
    )

    skill = sheet.skills[0]
    assert skill.name == "Bardic Inspiration"
    assert skill.uses_per == "long rest"
    assert skill.used_count == 0

    assert sheets.delete_skill(store, uid=UID, skill_id=skill_id).skills == []


def test_deleting_last_category_leaves_fresh_general(store):
    general_id = sheets.get_or_create(store, uid=UID).inventory_categories[0].id
    sheets.add_item(store, uid=UID, category_id=general_id)

    sheet = sheets.delete_category(store, uid=UID, category_id=general_id)

    assert len(sheet.inventory_categories) == 1
    fresh = sheet.inventory_categories[0]
    assert fresh.name == "General"
    assert fresh.id != general_id
    assert fresh.items == []


def test_categories_and_items(store):
    sheet = sheets.add_category(store, uid=UID, name="  Potions ")
    potions = sheet.inventory_categories[-1]
    assert potions.name == "Potions"

    sheet = sheets.rename_category(store, uid=UID, category_id=potions.id, name="   ")
    assert sheet.inventory_categories[-1].name == "Potions"
    sheet = sheets.rename_category(store, uid=UID, category_id=potions.id, name="Brews")
    assert sheet.inventory_categories[-1].name == "Brews"

    sheet = sheets.add_item(store, uid=UID, category_id=potions.id)
    item = sheet.inventory_categories[-1].items[0]
    assert item.quantity == 1

    sheet = sheets.update_item(
        store,
        uid=UID,
        category_id=potions.id,
        item_id=item.id,
        item_in=InventoryItemUpdate(name="Healing Potion", quantity=3),
    )
    assert sheet.inventory_categories[-1].items[0].name == "Healing Potion"
    assert sheet.inventory_categories[-1].items[0].quantity == 3

    sheet = sheets.delete_item(store, uid=UID, category_id=potions.id, item_id=item.id)
    assert sheet.inventory_categories[-1].items == []

    sheet = sheets.delete_category(store, uid=UID, category_id=potions.id)
    assert [c.name for c in sheet.inventory_categories] == ["General"]


def test_missing_entries_raise_not_found(store):
    sheets.get_or_create(store, uid=UID)

    with pytest.raises(NotFoundError) as exc_info:
        sheets.delete_skill(store, uid=UID, skill_id="skill_nope")
    assert exc_info.value.message == "Skill not found."
    with pytest.raises(NotFoundError):
        sheets.add_item(store, uid=UID, category_id="cat_nope")
    with pytest.raises(NotFoundError):
        sheets.update_proficiency(
            store, uid=UID, prof_id="prof_nope", prof_in=ProficiencyUpdate(name="x")
        )
