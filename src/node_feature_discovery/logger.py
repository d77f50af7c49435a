"""
Logging for Node Feature Discovery

One named logger shared by every module:
- INFO lines are printed bare, they are what shows up in ``kubectl logs``
- other levels are stamped with time and level; DEBUG also names the
  thread, which tells the per-source pool workers apart
- NFD_LOG_FILE adds a detailed file log, always at DEBUG
- LOG_LEVEL selects the console level (default INFO)

Usage:
    from node_feature_discovery.logger import logger

    logger.info("Feature label: ...")
"""

import logging
import os
import sys
from pathlib import Path
from typing import Optional, Union


LOGGER_NAME = "node_feature_discovery"

_LEVEL_NAMES = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

_TIME = "%H:%M:%S"
_FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(threadName)s | %(name)s:%(lineno)d | %(message)s"


def level_from_env(default: int = logging.INFO) -> int:
    """Console level from LOG_LEVEL; unknown names fall back to ``default``."""
    name = os.environ.get("LOG_LEVEL", "").strip().upper()
    return _LEVEL_NAMES.get(name, default)


class ConsoleFormatter(logging.Formatter):
    """Bare INFO lines, stamped lines for everything else."""

    def __init__(self):
        super().__init__(datefmt=_TIME)
        self._bare = logging.Formatter("%(message)s")
        self._stamped = logging.Formatter("%(asctime)s [%(levelname)s] %(message)s", datefmt=_TIME)
        self._debug = logging.Formatter("%(asctime)s [DEBUG] (%(threadName)s) %(message)s", datefmt=_TIME)

    def format(self, record: logging.LogRecord) -> str:
        if record.levelno == logging.INFO:
            return self._bare.format(record)
        if record.levelno <= logging.DEBUG:
            return self._debug.format(record)
        return self._stamped.format(record)


def configure_logging(
    level: Optional[int] = None,
    log_file: Union[str, Path, None] = None,
) -> logging.Logger:
    """
    Attach the console (stderr) and optional file handlers to the package logger.

    Calling it again replaces the handlers, so the level or file can be
    changed after import.
    """
    log = logging.getLogger(LOGGER_NAME)
    for handler in list(log.handlers):
        log.removeHandler(handler)
        handler.close()

    console_level = level if level is not None else level_from_env()

    # stderr, stdout carries the dry-run label table
    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(ConsoleFormatter())
    log.addHandler(console)

    if log_file is None:
        log_file = os.environ.get("NFD_LOG_FILE") or None
    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        log.addHandler(file_handler)

    log.setLevel(logging.DEBUG if log_file else console_level)
    return log


logger = configure_logging()
