"""Status sink: Discord Rich Presence over the local IPC pipe."""

from __future__ import annotations

import contextlib
import logging
from collections.abc import Callable
from dataclasses import asdict
from typing import Any, Protocol

from pypresence import Presence
from pypresence.exceptions import (
    ConnectionTimeout,
    DiscordNotFound,
    InvalidPipe,
    PipeClosed,
    PyPresenceException,
)

from poe2drpc.coalescer import StatusPayload

logger = logging.getLogger(__name__)

# Discord application that owns the Path of Exile 2 assets
DEFAULT_CLIENT_ID = "550890770056347648"

# Failures that mean the pipe to Discord is gone and a reconnect may help
_CONNECTION_ERRORS = (
    PipeClosed,
    InvalidPipe,
    DiscordNotFound,
    ConnectionTimeout,
    ConnectionError,
    EOFError,
)


class SinkError(Exception):
    """Status could not be delivered."""


class SinkConnectionError(SinkError):
    """Connection to the sink is broken; reconnecting may help."""


class StatusSink(Protocol):
    def connect(self) -> None: ...

    def set_status(self, payload: StatusPayload) -> None: ...

    def clear_status(self) -> None: ...

    def disconnect(self) -> None: ...

    def reconnect(self) -> None: ...


class DiscordStatusSink:
    """Shows the status as a Discord activity.

    The activity is cumulative: a payload only overwrites the fields it
    carries, the rest keep what was shown before until clear_status().

    Usage:
        sink = DiscordStatusSink()
        sink.connect()
        sink.set_status(StatusPayload(details="Exilefriend"))
        sink.clear_status()
        sink.disconnect()
    """

    def __init__(
        self,
        client_id: str = DEFAULT_CLIENT_ID,
        client_factory: Callable[[str], Any] = Presence,
    ) -> None:
        self._client_id = client_id
        self._client_factory = client_factory
        self._rpc: Any = None
        self._activity: dict[str, str | int] = {}

    @property
    def is_connected(self) -> bool:
        return self._rpc is not None

    @property
    def activity(self) -> dict[str, str | int]:
        return dict(self._activity)

    def connect(self) -> None:
        if self._rpc is not None:
            return
        rpc = self._client_factory(self._client_id)
        self._call(rpc.connect)
        self._rpc = rpc
        logger.info("Connected to Discord RPC")

    def disconnect(self) -> None:
        rpc, self._rpc = self._rpc, None
        if rpc is None:
            return
        self._call(rpc.close)
        logger.info("Disconnected from Discord RPC")

    def reconnect(self) -> None:
        """Drop the current pipe (ignoring errors) and open a new one."""
        rpc, self._rpc = self._rpc, None
        if rpc is not None:
            with contextlib.suppress(Exception):
                rpc.close()
        logger.info("Reconnecting to Discord RPC")
        self.connect()

    def set_status(self, payload: StatusPayload) -> None:
        activity = dict(self._activity)
        activity.update({k: v for k, v in asdict(payload).items() if v is not None})
        logger.debug("Setting activity: %s", activity)
        self._call(self._require_rpc().update, **activity)
        self._activity = activity

    def clear_status(self) -> None:
        self._activity = {}
        self._call(self._require_rpc().clear)
        logger.debug("Cleared activity")

    def _require_rpc(self) -> Any:
        if self._rpc is None:
            raise SinkConnectionError("Not connected to Discord")
        return self._rpc

    @staticmethod
    def _call(func: Callable[..., Any], **kwargs: Any) -> Any:
        """Invoke a pypresence method, translating its errors to SinkError."""
        try:
            return func(**kwargs)
        except _CONNECTION_ERRORS as e:
            raise SinkConnectionError(f"Discord connection lost: {e!r}") from e
        except (PyPresenceException, OSError, RuntimeError) as e:
            raise SinkError(f"Discord RPC error: {e!r}") from e


def push_status(sink: StatusSink, payload: StatusPayload) -> bool:
    """Deliver a payload, reconnecting and retrying once on a broken pipe.

    Returns True on success. Failures are logged and the payload dropped;
    the next quiet cycle carries fresher state anyway.
    """
    try:
        sink.set_status(payload)
        return True
    except SinkConnectionError as e:
        logger.warning("Status push failed (%s), reconnecting", e)
    except SinkError as e:
        logger.error("Status push failed, dropping update: %s", e)
        return False

    try:
        sink.reconnect()
        sink.set_status(payload)
        return True
    except SinkError as e:
        logger.error("Status push retry failed, dropping update: %s", e)
        return False
