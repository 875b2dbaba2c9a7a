# clubhouse/crud/crud_character_sheet.py
"""
CRUD operations for a member's character sheet.

Each member owns exactly one sheet at users/{uid}/characterSheet/main. Every
change is a read-modify-write of the whole document inside a transaction,
so two tabs editing different parts of the sheet never lose each other's
changes.
"""

import logging
from typing import Callable, List, TypeVar

from clubhouse.constants.collections import Collections
from clubhouse.core.exceptions import NotFoundError
from clubhouse.schemas.character_sheet import (
    AttributeKey,
    CharacterSheet,
    CharacterSheetUpdate,
    InventoryCategory,
    InventoryItem,
    InventoryItemUpdate,
    Proficiency,
    ProficiencyCreate,
    ProficiencyUpdate,
    Skill,
    SkillUpdate,
    default_categories,
)
from clubhouse.store import SERVER_TIMESTAMP, DocumentStore, Transaction

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Fields that can never go negative
NON_NEGATIVE_FIELDS = ("level", "experience", "currency")


def _find(items: List[T], item_id: str, label: str) -> T:
    for item in items:
        if item.id == item_id:
            return item
    raise NotFoundError(f"{label} not found.")


class CRUDCharacterSheet:
    """CRUD operations for CharacterSheet."""

    def get_or_create(self, store: DocumentStore, *, uid: str) -> CharacterSheet:
        collection = Collections.character_sheet(uid)

        def ensure(tx: Transaction) -> bool:
            if tx.get(collection, Collections.CHARACTER_SHEET_KEY).exists:
                return False
            doc = CharacterSheet().to_document()
            doc["updatedAt"] = SERVER_TIMESTAMP
            tx.set(collection, Collections.CHARACTER_SHEET_KEY, doc)
            return True

        existing = CharacterSheet.from_snapshot(
            store.get(collection, Collections.CHARACTER_SHEET_KEY)
        )
        if existing is not None:
            return existing

        if store.transaction(ensure):
            logger.info(f"Created character sheet for {uid}")
        return CharacterSheet.from_snapshot(
            store.get(collection, Collections.CHARACTER_SHEET_KEY)
        )

    def _mutate(
        self, store: DocumentStore, uid: str, change: Callable[[CharacterSheet], None]
    ) -> CharacterSheet:
        """Apply `change` to a freshly read sheet and write it back atomically."""
        collection = Collections.character_sheet(uid)

        def write(tx: Transaction) -> CharacterSheet:
            snap = tx.get(collection, Collections.CHARACTER_SHEET_KEY)
            sheet = CharacterSheet.from_snapshot(snap) or CharacterSheet()
            change(sheet)
            doc = sheet.to_document()
            doc["updatedAt"] = SERVER_TIMESTAMP
            tx.set(collection, Collections.CHARACTER_SHEET_KEY, doc)
            return sheet

        store.transaction(write)
        return CharacterSheet.from_snapshot(
            store.get(collection, Collections.CHARACTER_SHEET_KEY)
        )

    def update_fields(
        self, store: DocumentStore, *, uid: str, sheet_in: CharacterSheetUpdate
    ) -> CharacterSheet:
        update_data = sheet_in.model_dump(exclude_unset=True, exclude_none=True)
        for field in NON_NEGATIVE_FIELDS:
            if field in update_data:
                update_data[field] = max(0, update_data[field])

        def change(sheet: CharacterSheet) -> None:
            for field, value in update_data.items():
                setattr(sheet, field, value)

        return self._mutate(store, uid, change)

    def set_attribute(
        self, store: DocumentStore, *, uid: str, key: AttributeKey, value: int
    ) -> CharacterSheet:
        attr_name = {"str": "str_", "int": "int_"}.get(key.value, key.value)

        def change(sheet: CharacterSheet) -> None:
            setattr(sheet.attributes, attr_name, value)

        return self._mutate(store, uid, change)

    # --- proficiencies ---

    def add_proficiency(
        self, store: DocumentStore, *, uid: str, prof_in: ProficiencyCreate
    ) -> CharacterSheet:
        # Built once so a retried transaction adds the same id
        prof = Proficiency(attribute=prof_in.attribute, name=prof_in.name)
        return self._mutate(
            store, uid, lambda sheet: sheet.proficiencies.append(prof.model_copy())
        )

    def update_proficiency(
        self,
        store: DocumentStore,
        *,
        uid: str,
        prof_id: str,
        prof_in: ProficiencyUpdate,
    ) -> CharacterSheet:
        update_data = prof_in.model_dump(exclude_unset=True, exclude_none=True)

        def change(sheet: CharacterSheet) -> None:
            prof = _find(sheet.proficiencies, prof_id, "Proficiency")
            for field, value in update_data.items():
                setattr(prof, field, value)

        return self._mutate(store, uid, change)

    def delete_proficiency(
        self, store: DocumentStore, *, uid: str, prof_id: str
    ) -> CharacterSheet:
        def change(sheet: CharacterSheet) -> None:
            _find(sheet.proficiencies, prof_id, "Proficiency")
            sheet.proficiencies = [p for p in sheet.proficiencies if p.id != prof_id]

        return self._mutate(store, uid, change)

    # --- skills ---

    def add_skill(self, store: DocumentStore, *, uid: str) -> CharacterSheet:
        skill = Skill()
        return self._mutate(
            store, uid, lambda sheet: sheet.skills.append(skill.model_copy())
        )

    def update_skill(
        self, store: DocumentStore, *, uid: str, skill_id: str, skill_in: SkillUpdate
    ) -> CharacterSheet:
        update_data = skill_in.model_dump(exclude_unset=True, exclude_none=True)
        if "used_count" in update_data:
            update_data["used_count"] = max(0, update_data["used_count"])

        def change(sheet: CharacterSheet) -> None:
            skill = _find(sheet.skills, skill_id, "Skill")
            for field, value in update_data.items():
                setattr(skill, field, value)

        return self._mutate(store, uid, change)

    def delete_skill(
        self, store: DocumentStore, *, uid: str, skill_id: str
    ) -> CharacterSheet:
        def change(sheet: CharacterSheet) -> None:
            _find(sheet.skills, skill_id, "Skill")
            sheet.skills = [s for s in sheet.skills if s.id != skill_id]

        return self._mutate(store, uid, change)

    # --- inventory ---

    def add_category(
        self, store: DocumentStore, *, uid: str, name: str
    ) -> CharacterSheet:
        category = InventoryCategory(name=name.strip() or "New Category")
        return self._mutate(
            store,
            uid,
            lambda sheet: sheet.inventory_categories.append(category.model_copy(deep=True)),
        )

    def rename_category(
        self, store: DocumentStore, *, uid: str, category_id: str, name: str
    ) -> CharacterSheet:
        def change(sheet: CharacterSheet) -> None:
            category = _find(sheet.inventory_categories, category_id, "Category")
            category.name = name.strip() or category.name

        return self._mutate(store, uid, change)

    def delete_category(
        self, store: DocumentStore, *, uid: str, category_id: str
    ) -> CharacterSheet:
        """Deleting the last category leaves a fresh, empty General category."""
        replacement = default_categories()

        def change(sheet: CharacterSheet) -> None:
            _find(sheet.inventory_categories, category_id, "Category")
            remaining = [
                c for c in sheet.inventory_categories if c.id != category_id
            ]
            sheet.inventory_categories = remaining or [
                c.model_copy(deep=True) for c in replacement
            ]

        return self._mutate(store, uid, change)

    def add_item(
        self, store: DocumentStore, *, uid: str, category_id: str
    ) -> CharacterSheet:
        item = InventoryItem()

        def change(sheet: CharacterSheet) -> None:
            category = _find(sheet.inventory_categories, category_id, "Category")
            category.items.append(item.model_copy())

        return self._mutate(store, uid, change)

    def update_item(
        self,
        store: DocumentStore,
        *,
        uid: str,
        category_id: str,
        item_id: str,
        item_in: InventoryItemUpdate,
    ) -> CharacterSheet:
        def change(sheet: CharacterSheet) -> None:
            category = _find(sheet.inventory_categories, category_id, "Category")
            item = _find(category.items, item_id, "Item")
            item.name = item_in.name
            item.quantity = item_in.quantity

        return self._mutate(store, uid, change)

    def delete_item(
        self, store: DocumentStore, *, uid: str, category_id: str, item_id: str
    ) -> CharacterSheet:
        def change(sheet: CharacterSheet) -> None:
            category = _find(sheet.inventory_categories, category_id, "Category")
            _find(category.items, item_id, "Item")
            category.items = [i for i in category.items if i.id != item_id]

        return self._mutate(store, uid, change)


character_sheet = CRUDCharacterSheet()
