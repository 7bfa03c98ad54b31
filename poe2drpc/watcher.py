"""Incremental reader for Client.txt.

The game appends to the log while it runs; we poll it instead of using
filesystem events. The file is opened by path on every read, so nothing is
held open while the game is closed.
"""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)

_ENCODING = "utf-8"


def _decode_lines(data: bytes) -> list[str]:
    text = data.decode(_ENCODING, errors="replace")
    return [line for line in text.splitlines() if line.strip()]


class LogTail:
    """Read cursor over an append-only text log.

    Usage:
        tail = LogTail(Path("logs/Client.txt"))
        history = tail.read_all()   # whole file, cursor moves to the end
        ...
        new_lines = tail.read_new() # only complete lines appended since
    """

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._position: int = 0
        self._last_size: int = 0
        self._grew = False

    @property
    def file_path(self) -> Path:
        return self._file_path

    @property
    def position(self) -> int:
        return self._position

    @property
    def grew(self) -> bool:
        """True if the last read_new() saw the file size change, even when
        the new bytes did not complete a line."""
        return self._grew

    def read_all(self) -> list[str]:
        """Read the whole file from the start and leave the cursor at its end.

        As with read_new(), an unfinished last line is left for later.
        """
        self._position = 0
        self._grew = False
        try:
            with open(self._file_path, "rb") as f:
                data = f.read()
        except OSError as e:
            logger.warning("Cannot read log history: %s", e)
            self.seek_to_end()
            return []
        self._last_size = len(data)
        self._position = data.rfind(b"\n") + 1
        return _decode_lines(data[: self._position])

    def seek_to_end(self) -> None:
        """Move the cursor to end of file so only new lines are returned."""
        self._grew = False
        try:
            self._position = self._file_path.stat().st_size
        except OSError:
            self._position = 0
        self._last_size = self._position

    def read_new(self) -> list[str]:
        """Return complete lines appended since the last read.

        An unfinished trailing line stays unread until its newline arrives.
        Read errors count as "nothing new" and are retried on the next call.
        """
        self._grew = False
        try:
            size = self._file_path.stat().st_size
        except OSError as e:
            logger.warning("Cannot stat log file: %s", e)
            return []

        self._grew = size != self._last_size
        self._last_size = size

        # File was truncated or recreated - reset position
        if size < self._position:
            logger.info("Log truncated or recreated, reading from the start")
            self._position = 0

        if size == self._position:
            return []

        try:
            with open(self._file_path, "rb") as f:
                f.seek(self._position)
                data = f.read()
        except OSError as e:
            logger.warning("Cannot read log file: %s", e)
            self._grew = False
            return []

        end = data.rfind(b"\n")
        if end < 0:
            return []
        self._position += end + 1
        return _decode_lines(data[: end + 1])
