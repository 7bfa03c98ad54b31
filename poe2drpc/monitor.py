"""Presence monitor: liveness check -> log tail -> parser -> coalescer -> sink.

One thread, one loop. While the game is closed the monitor idles; when it
starts, the whole log is replayed once to learn who else is around and the
character's last level-up, then only appended lines are read. Whenever a
poll finds nothing new, pending state is pushed to the sink.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from poe2drpc.coalescer import StatusCoalescer
from poe2drpc.liveness import LivenessOracle
from poe2drpc.models import AreaState, ClassState
from poe2drpc.parser import (
    AreaGeneratedEvent,
    LevelUpEvent,
    LineEvent,
    PlayerJoinedEvent,
    parse_line,
)
from poe2drpc.sink import SinkError, StatusSink, push_status
from poe2drpc.translations import Translations
from poe2drpc.usernames import UsernameFilter
from poe2drpc.watcher import LogTail

logger = logging.getLogger(__name__)


class MonitorState(Enum):
    IDLE = "idle"
    SESSION_START = "session_start"
    LIVE = "live"
    SESSION_END = "session_end"


@dataclass
class MonitorConfig:
    """Monitor configuration."""

    log_path: Path = Path("logs/Client.txt")
    poll_interval: float = 0.5  # between reads while the game runs
    idle_interval: float = 5.0  # between liveness checks while it doesn't


class PresenceMonitor:
    """Drives the session state machine.

    Flow: IDLE -> SESSION_START -> LIVE (poll cycles) -> SESSION_END -> IDLE.
    step() performs one transition and returns how long to wait before the
    next one; run() repeats that forever.
    """

    def __init__(
        self,
        config: MonitorConfig,
        translations: Translations,
        liveness: LivenessOracle,
        sink: StatusSink,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._config = config
        self._translations = translations
        self._liveness = liveness
        self._sink = sink
        self._sleep = sleep
        self._clock = clock

        self._tail = LogTail(config.log_path)
        self._usernames = UsernameFilter()
        self._coalescer = StatusCoalescer()
        self._state = MonitorState.IDLE

    @property
    def state(self) -> MonitorState:
        return self._state

    @property
    def usernames(self) -> UsernameFilter:
        return self._usernames

    @property
    def coalescer(self) -> StatusCoalescer:
        return self._coalescer

    def run(self) -> None:
        """Monitor until the process is killed."""
        logger.info("Starting monitor loop on %s", self._config.log_path)
        while True:
            delay = self.step()
            if delay > 0:
                self._sleep(delay)

    def step(self) -> float:
        """Advance the state machine once. Returns seconds to wait."""
        if self._state is MonitorState.IDLE:
            if not self._liveness.is_target_running():
                return self._config.idle_interval
            logger.info("Game process detected")
            self._state = MonitorState.SESSION_START
            return 0.0

        if self._state is MonitorState.SESSION_START:
            self._start_session()
            self._state = MonitorState.LIVE
            return 0.0

        if self._state is MonitorState.LIVE:
            if not self._liveness.is_target_running():
                logger.info("Game process gone")
                self._state = MonitorState.SESSION_END
                return 0.0
            self.poll()
            return self._config.poll_interval

        self._end_session()
        self._state = MonitorState.IDLE
        return self._config.idle_interval

    def poll(self) -> bool:
        """One live cycle: handle new lines, or push pending state if quiet.

        Returns True if the log grew this cycle. Bytes that do not yet
        complete a line still count as growth, so nothing is pushed.
        """
        lines = self._tail.read_new()
        for line in lines:
            self._handle_event(parse_line(line, self._translations))
        if lines or self._tail.grew:
            return True

        payload = self._coalescer.take_pending()
        if payload is not None:
            logger.info("Updating status: %s", payload)
            push_status(self._sink, payload)
        return False

    # ------------------------------------------------------------------
    # Session transitions
    # ------------------------------------------------------------------

    def _start_session(self) -> None:
        try:
            self._sink.connect()
        except SinkError as e:
            # First push goes through the reconnect path
            logger.warning("Cannot connect status sink: %s", e)

        history = self._tail.read_all()
        self._seed(parse_line(line, self._translations) for line in history)
        logger.info(
            "Session started: %d history lines, %d other players, class=%s",
            len(history), len(self._usernames), self._coalescer.class_state,
        )

    def _seed(self, events: Iterable[LineEvent | None]) -> None:
        """Seed the blacklist and last level-up from the log history.

        Every joined player is blacklisted before level-ups are considered,
        so a player who levelled before we saw them join is still excluded.
        Past areas are not seeded; their timestamps would be wrong.
        """
        level_ups: list[LevelUpEvent] = []
        for event in events:
            if isinstance(event, PlayerJoinedEvent):
                self._usernames.record(event.username)
            elif isinstance(event, LevelUpEvent):
                level_ups.append(event)

        for event in level_ups:
            self._record_level_up(event)

    def _end_session(self) -> None:
        try:
            self._sink.clear_status()
        except SinkError as e:
            logger.warning("Cannot clear status: %s", e)
        try:
            self._sink.disconnect()
        except SinkError as e:
            logger.warning("Cannot disconnect status sink: %s", e)

        self._usernames.reset()
        self._coalescer.clear()
        logger.info("Session ended")

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def _handle_event(self, event: LineEvent | None) -> None:
        if isinstance(event, LevelUpEvent):
            self._record_level_up(event)
        elif isinstance(event, AreaGeneratedEvent):
            logger.debug("Entered %s (level %d)", event.display_name, event.level)
            self._coalescer.record_area(AreaState(
                level=event.level,
                display_name=event.display_name,
                seed=event.seed,
                entered_at=int(self._clock()),
            ))
        elif isinstance(event, PlayerJoinedEvent):
            self._usernames.record(event.username)

    def _record_level_up(self, event: LevelUpEvent) -> None:
        if self._usernames.is_filtered(event.username):
            logger.debug("Ignoring level-up of other player %s", event.username)
            return
        self._coalescer.record_class(ClassState(
            character_class=event.character_class,
            ascendancy=event.ascendancy,
            username=event.username,
            level=event.level,
        ))
