"""Application configuration management."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass
from pathlib import Path

from poe2drpc.sink import DEFAULT_CLIENT_ID

logger = logging.getLogger(__name__)

CONFIG_FILE = "config.json"

# Standard PoE2 install locations (standalone client, then Steam)
_GAME_PATHS = [
    Path("C:/Program Files (x86)/Grinding Gear Games/Path of Exile 2"),
    Path("C:/Program Files/Grinding Gear Games/Path of Exile 2"),
    Path("C:/Program Files (x86)/Steam/steamapps/common/Path of Exile 2"),
    Path("C:/Program Files/Steam/steamapps/common/Path of Exile 2"),
    Path.home() / ".local/share/Steam/steamapps/common/Path of Exile 2",
]

# Client log relative path inside the game install
_CLIENT_LOG_RELATIVE = "logs/Client.txt"

# Environment overrides (also read from .env)
_ENV_OVERRIDES = {
    "POE2DRPC_GAME_DIR": "game_dir",
    "POE2DRPC_TRANSLATIONS": "translations_file",
    "POE2DRPC_CLIENT_ID": "client_id",
}


class ConfigError(Exception):
    """Startup configuration cannot be satisfied."""


@dataclass
class AppConfig:
    """Application settings."""

    # Paths
    game_dir: str = ""
    translations_file: str = ""
    log_file: str = "poe2-drpc.log"

    # Discord
    client_id: str = DEFAULT_CLIENT_ID

    # Polling (seconds)
    poll_interval: float = 0.5
    idle_interval: float = 5.0

    # Debug
    debug: bool = False

    def save(self, path: str = CONFIG_FILE) -> None:
        """Save config to JSON file."""
        Path(path).write_text(
            json.dumps(asdict(self), indent=2, ensure_ascii=False),
            encoding="utf-8",
        )

    @classmethod
    def load(cls, path: str = CONFIG_FILE) -> AppConfig:
        """Load config from JSON file, using defaults for missing fields."""
        try:
            data = json.loads(Path(path).read_text(encoding="utf-8"))
        except FileNotFoundError:
            return cls()
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable config %s: %s", path, e)
            return cls()

        if not isinstance(data, dict):
            logger.warning("Ignoring config %s: not a JSON object", path)
            return cls()

        defaults = asdict(cls())
        unknown = set(data) - set(defaults)
        if unknown:
            logger.warning("Ignoring unknown config keys: %s", ", ".join(sorted(unknown)))
        for key, value in data.items():
            if key in unknown:
                continue
            try:
                defaults[key] = _coerce(value, defaults[key])
            except (TypeError, ValueError):
                logger.warning("Ignoring invalid config value %s=%r", key, value)
        return cls(**defaults)

    def apply_env(self, environ: dict[str, str] | None = None) -> None:
        """Override settings from POE2DRPC_* environment variables."""
        env = os.environ if environ is None else environ
        for var, attr in _ENV_OVERRIDES.items():
            value = env.get(var)
            if value:
                logger.debug("%s overridden by %s", attr, var)
                setattr(self, attr, value)


def _coerce(value: object, default: object) -> object:
    """Convert a JSON value to the type of the field default.

    Intervals accept numbers or numeric strings and must be positive.
    """
    if isinstance(default, bool):
        if not isinstance(value, bool):
            raise TypeError(f"expected true/false, got {value!r}")
        return value
    if isinstance(default, float):
        if isinstance(value, bool) or not isinstance(value, (int, float, str)):
            raise TypeError(f"expected a number, got {value!r}")
        number = float(value)
        if not number > 0:
            raise ValueError(f"expected a positive number, got {value!r}")
        return number
    if not isinstance(value, str):
        raise TypeError(f"expected a string, got {value!r}")
    return value


def detect_game_dir() -> str:
    """Try to find the Path of Exile 2 installation path."""
    for p in _GAME_PATHS:
        if p.exists():
            return str(p)
    return ""


def resolve_log_path(config: AppConfig) -> Path:
    """Resolve Client.txt from config, raising ConfigError if it is missing."""
    game_dir = config.game_dir or detect_game_dir()
    if not game_dir:
        raise ConfigError("Game directory not found, pass --game-dir")

    log_path = Path(game_dir) / _CLIENT_LOG_RELATIVE
    if not log_path.is_file():
        raise ConfigError(f"Client log not found: {log_path}")
    return log_path
