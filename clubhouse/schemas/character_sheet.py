# clubhouse/schemas/character_sheet.py
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import Field

from clubhouse.schemas.base import CamelModel, DocumentModel
from clubhouse.utils.ids import new_id


class AttributeKey(str, Enum):
    str_ = "str"
    dex = "dex"
    con = "con"
    int_ = "int"
    wis = "wis"
    cha = "cha"


class Attributes(CamelModel):
    str_: int = Field(10, alias="str")
    dex: int = 10
    con: int = 10
    int_: int = Field(10, alias="int")
    wis: int = 10
    cha: int = 10


class Proficiency(CamelModel):
    id: str = Field(default_factory=lambda: new_id("prof"))
    attribute: AttributeKey
    name: str = ""
    proficient: bool = False


class Skill(CamelModel):
    id: str = Field(default_factory=lambda: new_id("skill"))
    name: str = ""
    uses_per: str = ""
    used_count: int = Field(0, ge=0)
    description: str = ""


class InventoryItem(CamelModel):
    id: str = Field(default_factory=lambda: new_id("item"))
    name: str = ""
    quantity: int = 1


class InventoryCategory(CamelModel):
    id: str = Field(default_factory=lambda: new_id("cat"))
    name: str
    items: List[InventoryItem] = Field(default_factory=list)


def default_categories() -> List[InventoryCategory]:
    return [InventoryCategory(name="General")]


class CharacterSheet(DocumentModel):
    portrait_url: str = ""
    character_name: str = ""
    level: int = 1
    class_name: str = ""
    experience: int = 0
    currency: int = 0
    max_hp: int = 0
    current_hp: int = 0
    proficiency_bonus: int = 2

    attributes: Attributes = Field(default_factory=Attributes)
    proficiencies: List[Proficiency] = Field(default_factory=list)
    skills: List[Skill] = Field(default_factory=list)
    inventory_categories: List[InventoryCategory] = Field(
        default_factory=default_categories
    )

    updated_at: Optional[datetime] = None


class CharacterSheetUpdate(CamelModel):
    portrait_url: Optional[str] = None
    character_name: Optional[str] = None
    level: Optional[int] = None
    class_name: Optional[str] = None
    experience: Optional[int] = None
    currency: Optional[int] = None
    max_hp: Optional[int] = None
    current_hp: Optional[int] = None
    proficiency_bonus: Optional[int] = None


class AttributeValue(CamelModel):
    value: int


class ProficiencyCreate(CamelModel):
    attribute: AttributeKey
    name: str = ""


class ProficiencyUpdate(CamelModel):
    name: Optional[str] = None
    proficient: Optional[bool] = None


class SkillUpdate(CamelModel):
    name: Optional[str] = None
    uses_per: Optional[str] = None
    used_count: Optional[int] = None
    description: Optional[str] = None


class CategoryName(CamelModel):
    name: str = Field(..., min_length=1)


class InventoryItemUpdate(CamelModel):
    name: str
    quantity: int
