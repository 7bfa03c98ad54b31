"""Parser for Path of Exile 2 Client.txt lines."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Union

from poe2drpc.models import CharacterClass, ClassAscendancy
from poe2drpc.translations import Translations

logger = logging.getLogger(__name__)

# Client.txt line examples:
# 2024/12/06 21:03:01 1234567 cffb0719 [INFO Client 1234] : Exilefriend (Stormweaver) is now level 42
# 2024/12/06 21:03:05 1234571 2caa1679 [DEBUG Client 1234] Generating level 42 area "G3_town" with seed 1
# 2024/12/06 21:03:09 1234575 cffb0719 [INFO Client 1234] : Otherguy has joined the area.

# Level-up: ": Name (Class or Ascendancy) is now level N"
_RE_LEVEL_UP = re.compile(
    r": (\w+)"  # username
    r" \(([^()]+)\)"  # class or ascendancy, may contain spaces
    r" is now level (\d+)"  # level
)

# Area generation: '] Generating level N area "Key" with seed N'
_RE_GENERATING_AREA = re.compile(
    r"\] Generating level (\d+)"  # area level
    r' area "([^"]+)"'  # raw area id
    r" with seed (\d+)"  # seed
)

# Other player entering our instance: ": Name has joined the area."
_RE_JOINED_AREA = re.compile(r": (\w+) has joined the area\.")

# Level is a 16-bit unsigned value, seed a 64-bit one
MAX_LEVEL = 0xFFFF
MAX_SEED = 0xFFFF_FFFF_FFFF_FFFF


class MalformedLineError(ValueError):
    """A line matched a grammar but one of its fields is unusable."""


@dataclass(frozen=True, slots=True)
class LevelUpEvent:
    """``<username> (<class>) is now level <level>``."""

    username: str
    character_class: CharacterClass
    ascendancy: ClassAscendancy | None
    level: int


@dataclass(frozen=True, slots=True)
class AreaGeneratedEvent:
    """``Generating level <level> area "<area_key>" with seed <seed>``."""

    level: int
    area_key: str
    display_name: str
    seed: int


@dataclass(frozen=True, slots=True)
class PlayerJoinedEvent:
    """``<username> has joined the area.``"""

    username: str


LineEvent = Union[LevelUpEvent, AreaGeneratedEvent, PlayerJoinedEvent]


def _parse_uint(raw: str, field: str, maximum: int) -> int:
    try:
        value = int(raw)
    except ValueError as e:
        raise MalformedLineError(f"{field} is not a number: {raw!r}") from e
    if value < 0 or value > maximum:
        raise MalformedLineError(f"{field} out of range: {raw}")
    return value


def resolve_class(name: str) -> tuple[CharacterClass, ClassAscendancy | None]:
    """Resolve the class shown in a level-up line.

    Ascendancy names are tried first; the base class is derived from them.
    Raises MalformedLineError if the name is neither.
    """
    ascendancy = ClassAscendancy.parse(name)
    if ascendancy is not None:
        return ascendancy.character_class, ascendancy

    character_class = CharacterClass.parse(name)
    if character_class is None:
        raise MalformedLineError(f"Unknown class or ascendancy: {name!r}")
    return character_class, None


def _level_up(m: re.Match) -> LevelUpEvent:
    character_class, ascendancy = resolve_class(m.group(2))
    return LevelUpEvent(
        username=m.group(1),
        character_class=character_class,
        ascendancy=ascendancy,
        level=_parse_uint(m.group(3), "level", MAX_LEVEL),
    )


def _area_generated(m: re.Match, translations: Translations) -> AreaGeneratedEvent:
    area_key = m.group(2)
    return AreaGeneratedEvent(
        level=_parse_uint(m.group(1), "area level", MAX_LEVEL),
        area_key=area_key,
        display_name=translations.display_name(area_key),
        seed=_parse_uint(m.group(3), "seed", MAX_SEED),
    )


def parse_line(line: str, translations: Translations) -> LineEvent | None:
    """Classify one Client.txt line.

    Grammars are tried in a fixed order: level-up, area generation, player
    joined. The first one whose pattern matches decides the outcome. Returns
    None for lines matching nothing, and for malformed lines (logged).
    """
    try:
        m = _RE_LEVEL_UP.search(line)
        if m:
            return _level_up(m)

        m = _RE_GENERATING_AREA.search(line)
        if m:
            return _area_generated(m, translations)
    except MalformedLineError as e:
        logger.warning("Dropping malformed line (%s): %s", e, line.strip()[:200])
        return None

    m = _RE_JOINED_AREA.search(line)
    if m:
        return PlayerJoinedEvent(username=m.group(1))

    return None
