"""
test_logging_config.py — Tests for dfscrm/logging_config.py

Called by: pytest
Depends on: dfscrm/logging_config.py
"""

import logging
import os
from unittest.mock import patch

import pytest
from loguru import logger

from dfscrm.logging_config import DEV_FORMAT, QUIET_LOGGERS, setup_logging


@pytest.fixture(autouse=True)
def _clean_loguru():
    logger.remove()
    yield
    logger.remove()


@pytest.fixture()
def captured():
    """Messages written after setup_logging() (which removes earlier sinks)."""
    messages = []
    setup_logging()
    logger.add(lambda m: messages.append(str(m)), format="{message}")
    return messages


class TestDevelopmentMode:
    def test_single_colored_console_sink(self):
        with patch.dict(os.environ, {"APP_ENV": "development"}):
            with patch("loguru.logger.add") as mock_add:
                setup_logging()
        [call] = mock_add.call_args_list
        assert call.kwargs["format"] == DEV_FORMAT
        assert call.kwargs["colorize"] is True

    def test_sqlalchemy_record_reaches_loguru(self, captured):
        logging.getLogger("sqlalchemy.pool").warning("pool exhausted")
        assert any("pool exhausted" in m for m in captured)

    def test_quiet_loggers_drop_info(self, captured):
        logging.getLogger("httpx").info("HTTP Request: GET /customers")
        assert not any("/customers" in m for m in captured)
        assert all(logging.getLogger(n).level == logging.WARNING for n in QUIET_LOGGERS)

    def test_log_level_from_env(self):
        with patch.dict(os.environ, {"LOG_LEVEL": "warning"}):
            setup_logging()
        messages = []
        logger.add(lambda m: messages.append(str(m)), level="WARNING", format="{message}")
        logger.info("reconciled 3 customers")
        logger.warning("unparseable invoice date")
        assert messages == ["unparseable invoice date\n"]


class TestProductionMode:
    def test_json_stdout_without_file(self):
        env = {k: v for k, v in os.environ.items() if k != "LOG_FILE"}
        env["APP_ENV"] = "production"
        with patch.dict(os.environ, env, clear=True):
            with patch("loguru.logger.add") as mock_add:
                setup_logging()
        [call] = mock_add.call_args_list
        assert call.kwargs["serialize"] is True

    def test_log_file_rotates(self):
        with patch.dict(os.environ, {"APP_ENV": "production", "LOG_FILE": "/tmp/dfscrm.log"}):
            with patch("loguru.logger.add") as mock_add:
                setup_logging()
        file_calls = [c for c in mock_add.call_args_list if c.args and c.args[0] == "/tmp/dfscrm.log"]
        assert len(file_calls) == 1
        assert file_calls[0].kwargs["rotation"] == "50 MB"
        assert file_calls[0].kwargs["serialize"] is True
