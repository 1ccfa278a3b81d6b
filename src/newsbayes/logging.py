"""Logging setup for the command-line tools.

Records go to ``<root>/logs``: ``newsbayes.log`` keeps INFO and above, and
``debug.log`` (when enabled) keeps everything. The console gets one line per
record, prefixed with a level symbol that is coloured on terminals.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from logging.handlers import RotatingFileHandler
from pathlib import Path

from .config import ConfigError, LoggingConfig

FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_DIR_NAME = "logs"
MAIN_LOG_NAME = "newsbayes.log"
DEBUG_LOG_NAME = "debug.log"
MAX_LOG_BYTES = 5_000_000
LOG_BACKUPS = 5

LEVEL_NAMES = ("DEBUG", "INFO", "WARNING", "WARN", "ERROR", "CRITICAL")

LEVEL_SYMBOLS = {
    logging.DEBUG: "D",
    logging.INFO: "I",
    logging.WARNING: "!",
    logging.ERROR: "X",
    logging.CRITICAL: "X",
}
LEVEL_COLORS = {
    logging.DEBUG: "\x1b[36m",
    logging.INFO: "\x1b[32m",
    logging.WARNING: "\x1b[33m",
    logging.ERROR: "\x1b[31m",
    logging.CRITICAL: "\x1b[35m",
}
RESET = "\x1b[0m"


class ConsoleFormatter(logging.Formatter):
    def __init__(self, use_color: bool) -> None:
        super().__init__("%(message)s")
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        symbol = LEVEL_SYMBOLS.get(record.levelno, "?")
        if self.use_color:
            symbol = f"{LEVEL_COLORS.get(record.levelno, '')}{symbol}{RESET}"
        return f"{symbol} {super().format(record)}"


def level_from_string(level: str) -> int:
    """Map a configured level name (case-insensitive) to its number."""

    name = level.strip().upper()
    if name not in LEVEL_NAMES:
        raise ConfigError(f"Unknown log level: {level}")
    return logging.getLevelName(name)


def log_dir(root_dir: Path) -> Path:
    return root_dir.expanduser() / LOG_DIR_NAME


def configure_logging(logging_config: LoggingConfig, root_dir: Path) -> None:
    """Replace the root logger's handlers with the file and console handlers."""

    level = level_from_string(logging_config.level)
    directory = log_dir(root_dir)
    directory.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        level=level,
        handlers=list(_handlers(directory, debug_file=logging_config.debug_file)),
        force=True,
    )


def _handlers(directory: Path, *, debug_file: bool) -> Iterator[logging.Handler]:
    yield _rotating_file(directory / MAIN_LOG_NAME, logging.INFO)
    if debug_file:
        yield _rotating_file(directory / DEBUG_LOG_NAME, logging.DEBUG)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(logging.DEBUG)
    console.setFormatter(ConsoleFormatter(_is_terminal(console.stream)))
    yield console


def _rotating_file(path: Path, level: int) -> logging.Handler:
    handler = RotatingFileHandler(
        path, maxBytes=MAX_LOG_BYTES, backupCount=LOG_BACKUPS, encoding="utf-8"
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(FILE_FORMAT))
    return handler


def _is_terminal(stream: object) -> bool:
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


__all__ = ["ConsoleFormatter", "configure_logging", "level_from_string", "log_dir"]
