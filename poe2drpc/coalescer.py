"""Merges the latest class and area state into one status update."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from poe2drpc.models import AreaState, ClassState

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class StatusPayload:
    """Sink-ready status. Fields left as None are not part of this update."""

    details: str | None = None
    state: str | None = None
    start: int | None = None
    large_image: str | None = None
    large_text: str | None = None
    small_image: str | None = None
    small_text: str | None = None


def build_payload(class_state: ClassState | None, area_state: AreaState | None) -> StatusPayload:
    """Assemble a payload from whichever states are present."""
    fields: dict[str, str | int] = {}

    if class_state is not None:
        fields["details"] = class_state.username
        cls = class_state.character_class
        ascendancy = class_state.ascendancy
        if ascendancy is not None:
            fields["large_image"] = ascendancy.icon_key
            fields["large_text"] = f"{ascendancy} ({class_state.level})"
            fields["small_image"] = cls.icon_key
            fields["small_text"] = str(cls)
        else:
            fields["large_image"] = cls.icon_key
            fields["large_text"] = f"{cls} ({class_state.level})"

    if area_state is not None:
        fields["state"] = f"{area_state.display_name} ({area_state.level})"
        fields["start"] = area_state.entered_at

    return StatusPayload(**fields)


class StatusCoalescer:
    """Holds at most one pending class state and one pending area state.

    Later events overwrite earlier ones of the same kind; take_pending()
    hands out a single combined payload and forgets both.
    """

    def __init__(self) -> None:
        self._class_state: ClassState | None = None
        self._area_state: AreaState | None = None

    @property
    def class_state(self) -> ClassState | None:
        return self._class_state

    @property
    def area_state(self) -> AreaState | None:
        return self._area_state

    @property
    def has_pending(self) -> bool:
        return self._class_state is not None or self._area_state is not None

    def record_class(self, state: ClassState) -> None:
        self._class_state = state

    def record_area(self, state: AreaState) -> None:
        self._area_state = state

    def clear(self) -> None:
        self._class_state = None
        self._area_state = None

    def take_pending(self) -> StatusPayload | None:
        """Return the combined payload and clear both states, or None if idle."""
        if not self.has_pending:
            return None
        logger.debug(
            "Coalesced status: class=%s, area=%s", self._class_state, self._area_state,
        )
        payload = build_payload(self._class_state, self._area_state)
        self.clear()
        return payload
