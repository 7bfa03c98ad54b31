"""Names of other players seen in the current session."""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


class UsernameFilter:
    """Blacklist of players that joined our area.

    Anyone who visibly joins the instance is not the local character, so
    their level-up lines must not be attributed to us. The set only grows
    during a session and is emptied with reset() when the game exits.
    """

    def __init__(self) -> None:
        self._names: set[str] = set()

    def __len__(self) -> int:
        return len(self._names)

    def __contains__(self, username: object) -> bool:
        return username in self._names

    def record(self, username: str) -> None:
        if username not in self._names:
            self._names.add(username)
            logger.debug("Blacklisted %s (%d names)", username, len(self._names))

    def is_filtered(self, username: str) -> bool:
        return username in self._names

    def reset(self) -> None:
        self._names.clear()
