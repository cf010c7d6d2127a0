"""Unit tests for the logging setup."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import logging
from logging.handlers import RotatingFileHandler
from fleetsync.config import settings
from fleetsync.utils.logger import AUDIT_LOGGER, get_logger


def file_handlers(logger):
    return {os.path.basename(h.baseFilename): h for h in logger.handlers
            if isinstance(h, RotatingFileHandler)}


class TestLogging:
    def test_root_has_console_and_main_file(self):
        get_logger(__name__)
        root = logging.getLogger()

        assert "fleetsync.log" in file_handlers(root)
        assert file_handlers(root)["fleetsync.log"].level == logging.getLevelName(settings.LOG_FILE_LEVEL.upper())
        consoles = [h for h in root.handlers if type(h) is logging.StreamHandler]
        assert consoles and consoles[0].level == logging.getLevelName(settings.LOG_LEVEL.upper())

    def test_audit_trail_has_its_own_file(self):
        audit_logger = get_logger(AUDIT_LOGGER)

        assert "audit.log" in file_handlers(audit_logger)
        assert "audit.log" not in file_handlers(logging.getLogger())

    def test_configuration_runs_once(self):
        get_logger("a")
        before = len(logging.getLogger().handlers)

        get_logger("b")

        assert len(logging.getLogger().handlers) == before
