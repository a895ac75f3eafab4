"""Rotating log file for taskflow.

Core modules log through ``logging.getLogger(__name__)`` and never touch
handlers. The CLI calls :func:`get_logger` once per command, which attaches
the file handler to the ``taskflow`` parent logger so every ``taskflow.*``
record lands in the same file.

The level defaults to DEBUG and can be lowered with ``TASKFLOW_LOG_LEVEL``.
"""

from __future__ import annotations

import logging
import logging.handlers
import os
from pathlib import Path

from platformdirs import user_log_dir

LOGGER_NAME = "taskflow"
LOG_FILE_NAME = "taskflow.log"
LEVEL_ENV_VAR = "TASKFLOW_LOG_LEVEL"

_MAX_BYTES = 5 * 1024 * 1024
_BACKUP_COUNT = 3
_FORMAT = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"

_logger: logging.Logger | None = None


def log_file_path() -> Path:
    return Path(user_log_dir(LOGGER_NAME)) / LOG_FILE_NAME


def _level_from_env() -> int:
    name = os.environ.get(LEVEL_ENV_VAR, "").strip().upper()
    level = logging.getLevelName(name) if name else logging.DEBUG
    # getLevelName returns "Level X" for names it does not know
    return level if isinstance(level, int) else logging.DEBUG


def _file_handler(path: Path) -> logging.Handler:
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.handlers.RotatingFileHandler(
        path, maxBytes=_MAX_BYTES, backupCount=_BACKUP_COUNT, encoding="utf-8"
    )
    handler.setFormatter(logging.Formatter(_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S"))
    return handler


def get_logger() -> logging.Logger:
    """Return the ``taskflow`` logger, attaching the file handler on first use."""
    global _logger
    if _logger is not None:
        return _logger

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(_level_from_env())
    if not logger.handlers:
        logger.addHandler(_file_handler(log_file_path()))
    # Keep command logs off the terminal
    logger.propagate = False

    _logger = logger
    return _logger


def reset_logger() -> None:
    """Close and detach the file handler so the next call starts fresh."""
    global _logger
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    _logger = None
