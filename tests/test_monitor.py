"""Tests for the presence monitor state machine."""

import logging

import pytest

from poe2drpc.coalescer import StatusPayload
from poe2drpc.models import CharacterClass, ClassAscendancy
from poe2drpc.monitor import MonitorConfig, MonitorState, PresenceMonitor
from poe2drpc.sink import SinkConnectionError, SinkError
from poe2drpc.translations import Translations

_INFO = "2024/12/06 21:03:01 1234567 cffb0719 [INFO Client 1234]"
_DEBUG = "2024/12/06 21:03:01 1234567 2caa1679 [DEBUG Client 1234]"


def level_up(name, cls, level):
    return f"{_INFO} : {name} ({cls}) is now level {level}\n"


def joined(name):
    return f"{_INFO} : {name} has joined the area.\n"


def area(key, level, seed=1):
    return f'{_DEBUG} Generating level {level} area "{key}" with seed {seed}\n'


class FakeLiveness:
    def __init__(self, running=False):
        self.running = running

    def is_target_running(self):
        return self.running


class FakeSink:
    def __init__(self):
        self.calls = []
        self.payloads = []
        self.set_status_errors = []
        self.connect_error = None
        self.clear_error = None
        self.disconnect_error = None

    def connect(self):
        self.calls.append("connect")
        if self.connect_error:
            raise self.connect_error

    def set_status(self, payload):
        self.calls.append("set_status")
        if self.set_status_errors:
            raise self.set_status_errors.pop(0)
        self.payloads.append(payload)

    def clear_status(self):
        self.calls.append("clear_status")
        if self.clear_error:
            raise self.clear_error

    def disconnect(self):
        self.calls.append("disconnect")
        if self.disconnect_error:
            raise self.disconnect_error

    def reconnect(self):
        self.calls.append("reconnect")


@pytest.fixture
def log_file(tmp_path):
    path = tmp_path / "Client.txt"
    path.write_text("", encoding="utf-8")
    return path


@pytest.fixture
def liveness():
    return FakeLiveness()


@pytest.fixture
def sink():
    return FakeSink()


@pytest.fixture
def monitor(log_file, liveness, sink):
    return PresenceMonitor(
        config=MonitorConfig(log_path=log_file, poll_interval=0.5, idle_interval=5.0),
        translations=Translations({"G1_town": "Ogham"}),
        liveness=liveness,
        sink=sink,
        sleep=lambda _: None,
        clock=lambda: 1733515385.7,
    )


def append(path, text):
    with open(path, "a", encoding="utf-8") as f:
        f.write(text)


def start_session(monitor, liveness):
    liveness.running = True
    monitor.step()  # IDLE -> SESSION_START
    monitor.step()  # SESSION_START -> LIVE
    assert monitor.state is MonitorState.LIVE


class TestSessionLifecycle:
    """Test state transitions driven by process liveness."""

    def test_idle_while_not_running(self, monitor, sink):
        assert monitor.step() == 5.0
        assert monitor.state is MonitorState.IDLE
        assert sink.calls == []

    def test_start_connects(self, monitor, liveness, sink):
        start_session(monitor, liveness)
        assert sink.calls == ["connect"]

    def test_live_cycle_waits_poll_interval(self, monitor, liveness):
        start_session(monitor, liveness)
        assert monitor.step() == 0.5

    def test_end_clears_and_disconnects(self, monitor, liveness, sink, log_file):
        start_session(monitor, liveness)
        append(log_file, joined("Bob") + area("G1_town", 15))
        monitor.step()

        liveness.running = False
        monitor.step()  # LIVE -> SESSION_END
        assert monitor.state is MonitorState.SESSION_END
        assert monitor.step() == 5.0
        assert monitor.state is MonitorState.IDLE
        assert sink.calls == ["connect", "clear_status", "disconnect"]
        assert len(monitor.usernames) == 0
        assert not monitor.coalescer.has_pending

    def test_restart_reseeds_from_history(self, monitor, liveness, sink, log_file):
        append(log_file, level_up("Alice", "Witch", 2))
        start_session(monitor, liveness)
        monitor.step()
        liveness.running = False
        monitor.step()
        monitor.step()

        append(log_file, level_up("Alice", "Infernalist", 40))
        start_session(monitor, liveness)
        monitor.step()
        assert sink.payloads[-1].large_text == "Infernalist (40)"


class TestSeeding:
    """Test history replay at session start."""

    def test_last_level_up_seeded(self, monitor, liveness, sink, log_file):
        append(log_file, level_up("Alice", "Sorceress", 10) + level_up("Alice", "Stormweaver", 80))
        start_session(monitor, liveness)
        state = monitor.coalescer.class_state
        assert state.character_class is CharacterClass.SORCERESS
        assert state.ascendancy is ClassAscendancy.STORMWEAVER
        assert state.level == 80

    def test_player_joining_later_is_excluded(self, monitor, liveness, log_file):
        append(log_file, level_up("Alice", "Witch", 5) + level_up("Bob", "Monk", 9) + joined("Bob"))
        start_session(monitor, liveness)
        assert monitor.coalescer.class_state.username == "Alice"
        assert monitor.usernames.is_filtered("Bob")

    def test_areas_not_seeded(self, monitor, liveness, log_file):
        append(log_file, area("G1_town", 15))
        start_session(monitor, liveness)
        assert monitor.coalescer.area_state is None

    def test_seeded_state_pushed_on_first_quiet_cycle(self, monitor, liveness, sink, log_file):
        append(log_file, level_up("Alice", "Witch", 5))
        start_session(monitor, liveness)
        monitor.step()
        assert sink.payloads == [StatusPayload(
            details="Alice", large_image="witch", large_text="Witch (5)",
        )]


class TestLiveCycle:
    """Test incremental reads, debounce and pushes."""

    def test_blacklisted_level_up_ignored(self, monitor, liveness, sink, log_file):
        start_session(monitor, liveness)
        append(log_file, joined("Bob") + level_up("Bob", "Witch", 5))
        monitor.step()
        assert monitor.coalescer.class_state is None
        monitor.step()
        assert sink.payloads == []

    def test_unknown_player_attributed(self, monitor, liveness, log_file):
        start_session(monitor, liveness)
        append(log_file, joined("Bob") + level_up("Alice", "Witch", 5))
        monitor.step()
        assert monitor.coalescer.class_state.username == "Alice"

    def test_combined_push(self, monitor, liveness, sink, log_file):
        start_session(monitor, liveness)
        append(log_file, level_up("Alice", "Stormweaver", 80) + area("C_G1_town", 45))
        monitor.step()
        monitor.step()
        assert sink.payloads == [StatusPayload(
            details="Alice",
            state="Cruel Ogham (45)",
            start=1733515385,
            large_image="sorceress_stormweaver",
            large_text="Stormweaver (80)",
            small_image="sorceress",
            small_text="Sorceress",
        )]

    def test_only_latest_area_pushed(self, monitor, liveness, sink, log_file):
        start_session(monitor, liveness)
        append(log_file, area("G1_town", 15))
        monitor.step()
        append(log_file, area("G1_4", 16))
        monitor.step()
        monitor.step()
        assert [p.state for p in sink.payloads] == ["G1_4 (16)"]

    def test_no_push_while_lines_arrive(self, monitor, liveness, sink, log_file):
        start_session(monitor, liveness)
        for level in range(2, 6):
            append(log_file, level_up("Alice", "Witch", level))
            monitor.step()
            assert sink.payloads == []
        monitor.step()
        assert [p.large_text for p in sink.payloads] == ["Witch (5)"]

    def test_push_then_clear(self, monitor, liveness, sink, log_file):
        start_session(monitor, liveness)
        append(log_file, area("G1_town", 15))
        monitor.step()
        monitor.step()
        monitor.step()
        monitor.step()
        assert len(sink.payloads) == 1
        assert not monitor.coalescer.has_pending

    def test_malformed_line_does_not_stop_cycle(self, monitor, liveness, sink, log_file):
        start_session(monitor, liveness)
        append(log_file, level_up("Alice", "Templar", 5) + area("G1_town", 15))
        monitor.step()
        monitor.step()
        assert [p.state for p in sink.payloads] == ["Ogham (15)"]


class TestSinkFailures:
    """Test reconnect-and-retry during pushes."""

    def test_broken_connection_retried(self, monitor, liveness, sink, log_file):
        start_session(monitor, liveness)
        sink.set_status_errors = [SinkConnectionError("gone")]
        append(log_file, area("G1_town", 15))
        monitor.step()
        monitor.step()
        assert sink.calls[-3:] == ["set_status", "reconnect", "set_status"]
        assert len(sink.payloads) == 1

    def test_failed_push_still_clears(self, monitor, liveness, sink, log_file):
        start_session(monitor, liveness)
        sink.set_status_errors = [SinkConnectionError("gone"), SinkConnectionError("gone")]
        append(log_file, area("G1_town", 15))
        monitor.step()
        monitor.step()
        assert sink.payloads == []
        assert not monitor.coalescer.has_pending
        monitor.step()
        assert sink.calls.count("set_status") == 2

    def test_connect_failure_still_goes_live(self, monitor, liveness, sink, log_file):
        sink.connect_error = SinkConnectionError("discord not running")
        # Not connected yet, so the first write fails until reconnect
        sink.set_status_errors = [SinkConnectionError("not connected")]
        start_session(monitor, liveness)
        append(log_file, area("G1_town", 15))
        monitor.step()
        monitor.step()
        assert sink.calls == ["connect", "set_status", "reconnect", "set_status"]
        assert [p.state for p in sink.payloads] == ["Ogham (15)"]

    def test_end_survives_clear_and_disconnect_errors(self, monitor, liveness, sink, log_file):
        sink.clear_error = SinkError("pipe closed")
        sink.disconnect_error = SinkError("pipe closed")
        start_session(monitor, liveness)
        append(log_file, joined("Bob") + area("G1_town", 15))
        monitor.step()

        liveness.running = False
        monitor.step()
        assert monitor.step() == 5.0
        assert monitor.state is MonitorState.IDLE
        assert sink.calls == ["connect", "clear_status", "disconnect"]
        assert len(monitor.usernames) == 0
        assert not monitor.coalescer.has_pending


class TestPartialLines:
    """Test that bytes still being written hold back a push."""

    def test_partial_line_is_not_quiet(self, monitor, liveness, sink, log_file):
        start_session(monitor, liveness)
        append(log_file, area("G1_town", 15))
        monitor.step()
        append(log_file, f"{_INFO} : Ali")
        monitor.step()
        assert sink.payloads == []

        append(log_file, "ce (Witch) is now level 5\n")
        monitor.step()
        assert sink.payloads == []
        monitor.step()
        assert sink.payloads == [StatusPayload(
            details="Alice",
            state="Ogham (15)",
            start=1733515385,
            large_image="witch",
            large_text="Witch (5)",
        )]


class TestLogging:
    def test_push_logged_once_at_info(self, monitor, liveness, log_file, caplog):
        start_session(monitor, liveness)
        append(log_file, area("G1_town", 15))
        monitor.step()
        caplog.clear()
        with caplog.at_level(logging.DEBUG):
            monitor.step()
        info = [r.getMessage() for r in caplog.records if r.levelno >= logging.INFO]
        assert len(info) == 1
        assert info[0].startswith("Updating status:")
