"""Tests for structlog / stdlib logging setup."""

from __future__ import annotations

import logging
import os
from unittest.mock import patch

import pytest
import structlog

from kira_dependencies.core.logging import setup_logging


@pytest.fixture(autouse=True)
def _restore_logging():
    yield
    structlog.reset_defaults()
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(logging.WARNING)
    logging.getLogger("kira_dependencies").setLevel(logging.NOTSET)


class TestSetupLogging:
    def test_default_level_is_info(self):
        with patch.dict(os.environ, {}, clear=True):
            setup_logging()
        assert logging.getLogger().level == logging.INFO
        assert logging.getLogger("kira_dependencies").level == logging.INFO

    def test_verbose_is_debug(self):
        with patch.dict(os.environ, {}, clear=True):
            setup_logging(verbose=True)
        assert logging.getLogger().level == logging.DEBUG

    def test_env_level_wins_over_verbose(self):
        with patch.dict(os.environ, {"KIRA_LOG_LEVEL": "warning"}, clear=True):
            setup_logging(verbose=True)
        assert logging.getLogger("kira_dependencies").level == logging.WARNING

    def test_logs_go_to_stderr(self, capsys):
        with patch.dict(os.environ, {}, clear=True):
            setup_logging()
        structlog.get_logger("kira_dependencies.test").info("update.fetch_files")
        captured = capsys.readouterr()
        assert "update.fetch_files" in captured.err
        assert captured.out == ""

    def test_json_format(self, capsys):
        with patch.dict(os.environ, {"KIRA_LOG_FORMAT": "json"}, clear=True):
            setup_logging()
        structlog.get_logger("kira_dependencies.test").info("update.up_to_date", checked=3)
        line = capsys.readouterr().err.strip().splitlines()[-1]
        assert '"event": "update.up_to_date"' in line
        assert '"checked": 3' in line
