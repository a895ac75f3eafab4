"""Tests for the rotating log file."""

from __future__ import annotations

import logging
from unittest.mock import patch

import pytest

from taskflow.utils import logger as logger_mod


@pytest.fixture(autouse=True)
def log_dir(tmp_path):
    """Point the log file at tmp_path and start each test without handlers."""
    saved = list(logging.getLogger(logger_mod.LOGGER_NAME).handlers)
    saved_instance = logger_mod._logger
    logging.getLogger(logger_mod.LOGGER_NAME).handlers.clear()
    logger_mod._logger = None

    with patch("taskflow.utils.logger.user_log_dir", return_value=str(tmp_path)):
        yield tmp_path

    logger_mod.reset_logger()
    logging.getLogger(logger_mod.LOGGER_NAME).handlers[:] = saved
    logger_mod._logger = saved_instance


def test_get_logger_creates_log_file(log_dir):
    logger = logger_mod.get_logger()

    assert (log_dir / "taskflow.log").exists()
    assert logger.name == "taskflow"
    assert logger.propagate is False


def test_get_logger_returns_singleton():
    assert logger_mod.get_logger() is logger_mod.get_logger()


def test_log_file_path(log_dir):
    assert logger_mod.log_file_path() == log_dir / "taskflow.log"


def test_child_records_reach_the_log_file(log_dir):
    """Records from ``taskflow.*`` loggers are written by the shared handler."""
    logger = logger_mod.get_logger()

    logger.getChild("reducers").warning("Unknown action type: FOO")
    logger_mod.reset_logger()

    content = (log_dir / "taskflow.log").read_text(encoding="utf-8")
    assert "WARNING" in content
    assert "[taskflow.reducers] Unknown action type: FOO" in content


def test_reset_logger_detaches_handler():
    logger = logger_mod.get_logger()
    handler = logger.handlers[0]

    logger_mod.reset_logger()

    assert logger.handlers == []
    assert handler.stream is None
    assert logger_mod.get_logger().handlers


def test_level_from_environment(monkeypatch):
    monkeypatch.setenv("TASKFLOW_LOG_LEVEL", "warning")

    assert logger_mod.get_logger().level == logging.WARNING


def test_unknown_level_falls_back_to_debug(monkeypatch):
    monkeypatch.setenv("TASKFLOW_LOG_LEVEL", "chatty")

    assert logger_mod.get_logger().level == logging.DEBUG


def test_get_logger_creates_parent_dirs(tmp_path):
    nested = tmp_path / "a" / "b"
    with patch("taskflow.utils.logger.user_log_dir", return_value=str(nested)):
        logger_mod.get_logger()

    assert nested.is_dir()
