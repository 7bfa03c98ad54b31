"""poe2-drpc — entry point.

Usage:
    poe2-drpc
    poe2-drpc --game-dir "D:/Games/Path of Exile 2" --translations-file areas.json
"""

from __future__ import annotations

import argparse
import logging
import logging.handlers
import sys

from dotenv import load_dotenv

from poe2drpc.config import CONFIG_FILE, AppConfig, ConfigError, resolve_log_path
from poe2drpc.liveness import ProcessLiveness
from poe2drpc.monitor import MonitorConfig, PresenceMonitor
from poe2drpc.sink import DiscordStatusSink
from poe2drpc.translations import Translations, TranslationsError

VERSION = "0.3.0"

_LOG_FMT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

logger = logging.getLogger(__name__)


def setup_logging(log_file: str, debug: bool = False) -> None:
    """Log everything to the file and routine progress to stdout."""
    file_handler = logging.FileHandler(log_file, encoding="utf-8", mode="w")
    file_handler.setLevel(logging.DEBUG)
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.DEBUG if debug else logging.INFO)
    logging.basicConfig(
        level=logging.DEBUG,
        format=_LOG_FMT,
        handlers=[file_handler, console_handler],
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="poe2-drpc",
        description="Discord Rich Presence for Path of Exile 2",
    )
    parser.add_argument("-g", "--game-dir", help="Path to the game directory")
    parser.add_argument("-t", "--translations-file", help="Path to translations.json")
    parser.add_argument(
        "-c", "--config", default=CONFIG_FILE,
        help=f"Path to the config file (default: {CONFIG_FILE})",
    )
    parser.add_argument("--debug", action="store_true", help="Verbose console output")
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> AppConfig:
    """Config file, then environment, then command line."""
    config = AppConfig.load(args.config)
    config.apply_env()
    if args.game_dir:
        config.game_dir = args.game_dir
    if args.translations_file:
        config.translations_file = args.translations_file
    if args.debug:
        config.debug = True
    return config


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    args = parse_args(argv)
    # Config decides where logs go; hold its warnings until that is set up
    startup = logging.handlers.BufferingHandler(capacity=1000)
    root = logging.getLogger()
    root.addHandler(startup)
    try:
        config = build_config(args)
    finally:
        root.removeHandler(startup)
    setup_logging(config.log_file, config.debug)
    for record in startup.buffer:
        logging.getLogger(record.name).handle(record)
    startup.close()
    logger.debug("Config: %s", config)

    try:
        translations = Translations.load(config.translations_file or None)
        log_path = resolve_log_path(config)
    except (TranslationsError, ConfigError) as e:
        logger.error("%s", e)
        return 1
    logger.debug("Client log: %s", log_path)

    monitor = PresenceMonitor(
        config=MonitorConfig(
            log_path=log_path,
            poll_interval=config.poll_interval,
            idle_interval=config.idle_interval,
        ),
        translations=translations,
        liveness=ProcessLiveness(),
        sink=DiscordStatusSink(client_id=config.client_id),
    )

    logger.info("poe2-drpc %s started", VERSION)
    try:
        monitor.run()
    except KeyboardInterrupt:
        logger.info("Shutting down...")
    return 0


if __name__ == "__main__":
    sys.exit(main())
