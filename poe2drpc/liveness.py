"""Detects whether the Path of Exile 2 client is running."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Protocol

import psutil

logger = logging.getLogger(__name__)

# Executable names across the standalone, Steam and 64-bit builds
GAME_PROCESS_NAMES: tuple[str, ...] = (
    "PathOfExile_x64Steam.exe",
    "PathOfExile_x64.exe",
    "PathOfExileSteam.exe",
    "PathOfExile.exe",
)


class LivenessOracle(Protocol):
    def is_target_running(self) -> bool: ...


class ProcessLiveness:
    """Scans the OS process table for a known game executable.

    Names are compared case-insensitively, with and without ``.exe`` so the
    same list works for Wine/Proton process tables.
    """

    def __init__(self, process_names: Iterable[str] = GAME_PROCESS_NAMES) -> None:
        names: set[str] = set()
        for name in process_names:
            lowered = name.lower()
            names.add(lowered)
            names.add(lowered.removesuffix(".exe"))
        self._names = frozenset(names)

    def is_target_running(self) -> bool:
        for proc in psutil.process_iter(["name"]):
            try:
                name = proc.info["name"]
            except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess, KeyError):
                continue
            if name and name.lower() in self._names:
                return True
        return False
