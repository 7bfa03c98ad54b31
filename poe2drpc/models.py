"""Character classes, ascendancies and the state carried into a status update."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class CharacterClass(Enum):
    MERCENARY = "Mercenary"
    MONK = "Monk"
    RANGER = "Ranger"
    SORCERESS = "Sorceress"
    WARRIOR = "Warrior"
    WITCH = "Witch"

    def __str__(self) -> str:
        return self.value

    @property
    def display_name(self) -> str:
        return self.value

    @property
    def icon_key(self) -> str:
        """Discord asset name for the class portrait."""
        return self.value.lower()

    @property
    def ascendancies(self) -> tuple[ClassAscendancy, ClassAscendancy]:
        first, second = (a for a in ClassAscendancy if a.character_class is self)
        return first, second

    @classmethod
    def parse(cls, text: str) -> CharacterClass | None:
        """Case-insensitive lookup by display name. Returns None on a miss."""
        return _CLASS_MAP.get(text.lower())


class ClassAscendancy(Enum):
    WITCHHUNTER = "Witchhunter"
    GEMLING_LEGIONNAIRE = "Gemling Legionnaire"
    ACOLYTE_OF_CHAYULA = "Acolyte of Chayula"
    INVOKER = "Invoker"
    DEADEYE = "Deadeye"
    PATHFINDER = "Pathfinder"
    CHRONOMANCER = "Chronomancer"
    STORMWEAVER = "Stormweaver"
    TITAN = "Titan"
    WARBRINGER = "Warbringer"
    BLOOD_MAGE = "Blood Mage"
    INFERNALIST = "Infernalist"

    def __str__(self) -> str:
        return self.value

    @property
    def display_name(self) -> str:
        return self.value

    @property
    def character_class(self) -> CharacterClass:
        return _ASCENDANCY_CLASS[self]

    @property
    def icon_key(self) -> str:
        """Discord asset name, e.g. ``witch_blood_mage``."""
        return f"{self.character_class.icon_key}_{self.name.lower()}"

    @classmethod
    def parse(cls, text: str) -> ClassAscendancy | None:
        """Case-insensitive lookup by display name (spaces included)."""
        return _ASCENDANCY_MAP.get(text.lower())


_CLASS_MAP: dict[str, CharacterClass] = {c.value.lower(): c for c in CharacterClass}

_ASCENDANCY_MAP: dict[str, ClassAscendancy] = {
    a.value.lower(): a for a in ClassAscendancy
}

_ASCENDANCY_CLASS: dict[ClassAscendancy, CharacterClass] = {
    ClassAscendancy.WITCHHUNTER: CharacterClass.MERCENARY,
    ClassAscendancy.GEMLING_LEGIONNAIRE: CharacterClass.MERCENARY,
    ClassAscendancy.ACOLYTE_OF_CHAYULA: CharacterClass.MONK,
    ClassAscendancy.INVOKER: CharacterClass.MONK,
    ClassAscendancy.DEADEYE: CharacterClass.RANGER,
    ClassAscendancy.PATHFINDER: CharacterClass.RANGER,
    ClassAscendancy.CHRONOMANCER: CharacterClass.SORCERESS,
    ClassAscendancy.STORMWEAVER: CharacterClass.SORCERESS,
    ClassAscendancy.TITAN: CharacterClass.WARRIOR,
    ClassAscendancy.WARBRINGER: CharacterClass.WARRIOR,
    ClassAscendancy.BLOOD_MAGE: CharacterClass.WITCH,
    ClassAscendancy.INFERNALIST: CharacterClass.WITCH,
}


@dataclass(frozen=True, slots=True)
class ClassState:
    """Latest level-up attributed to the local character."""

    character_class: CharacterClass
    ascendancy: ClassAscendancy | None
    username: str
    level: int


@dataclass(frozen=True, slots=True)
class AreaState:
    """Latest generated area. ``entered_at`` is Unix time when the line was seen."""

    level: int
    display_name: str
    seed: int
    entered_at: int
