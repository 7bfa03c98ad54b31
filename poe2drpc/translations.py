"""Area id -> display name lookup.

The table is loaded once at startup, either from the built-in defaults
(translations_data.py) or from a JSON file shaped like::

    {"areas": {"G1_town": "Clearfell Encampment", ...}}
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType

from poe2drpc.translations_data import DEFAULT_AREAS

logger = logging.getLogger(__name__)

# Raw ids of Cruel difficulty areas start with this prefix
CRUEL_PREFIX = "C_"
CRUEL_QUALIFIER = "Cruel"


class TranslationsError(Exception):
    """Translation file is unreadable or malformed."""


class Translations:
    """Immutable area name table."""

    def __init__(self, areas: Mapping[str, str]) -> None:
        self._areas: Mapping[str, str] = MappingProxyType(dict(areas))

    def __len__(self) -> int:
        return len(self._areas)

    def __contains__(self, area_key: object) -> bool:
        return area_key in self._areas

    @property
    def areas(self) -> Mapping[str, str]:
        return self._areas

    def lookup(self, area_key: str) -> str | None:
        """Return the display name for a raw area id, or None if unknown.

        ``C_<id>`` resolves through ``<id>`` and is rendered as ``Cruel <name>``.
        """
        is_cruel = area_key.startswith(CRUEL_PREFIX)
        base_key = area_key[len(CRUEL_PREFIX):] if is_cruel else area_key
        name = self._areas.get(base_key)
        if name is None:
            return None
        return f"{CRUEL_QUALIFIER} {name}" if is_cruel else name

    def display_name(self, area_key: str) -> str:
        """Like lookup(), but falls back to the raw id unchanged."""
        name = self.lookup(area_key)
        if name is None:
            logger.debug("No translation for area %r", area_key)
            return area_key
        return name

    @classmethod
    def default(cls) -> Translations:
        return cls(DEFAULT_AREAS)

    @classmethod
    def from_json(cls, text: str) -> Translations:
        """Parse the ``{"areas": {...}}`` JSON document."""
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise TranslationsError(f"Invalid translations JSON: {e}") from e

        areas = data.get("areas") if isinstance(data, dict) else None
        if not isinstance(areas, dict):
            raise TranslationsError('Translations must be an object with an "areas" object')

        for key, value in areas.items():
            if not isinstance(value, str):
                raise TranslationsError(f"Area {key!r} has a non-string name: {value!r}")
        return cls(areas)

    @classmethod
    def load(cls, path: str | Path | None = None) -> Translations:
        """Load translations from a file, or the built-in table when path is None."""
        if path is None:
            translations = cls.default()
            logger.debug("Using built-in translations (%d areas)", len(translations))
            return translations

        try:
            text = Path(path).read_text(encoding="utf-8")
        except OSError as e:
            raise TranslationsError(f"Cannot read translations file {path}: {e}") from e

        translations = cls.from_json(text)
        logger.info("Loaded %d area translations from %s", len(translations), path)
        return translations
