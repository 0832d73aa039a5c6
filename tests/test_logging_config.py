"""
Tests unitarios para setup_logging.

python -m pytest tests/test_logging_config.py
"""

import logging
from logging.handlers import TimedRotatingFileHandler
from unittest.mock import patch

import pytest

from config.logging_config import setup_logging


@pytest.fixture
def restore_root_logger():
    """Restaurar handlers y nivel del logger raíz después del test."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestSetupLogging:
    """Tests de configuración de logging."""

    def test_console_and_rotating_file(self, tmp_path, restore_root_logger):
        with patch("config.logging_config.settings") as mock_settings:
            mock_settings.general.DEBUG = False
            mock_settings.general.LOG_LEVEL = "WARNING"
            mock_settings.logging.LOG_DIR = str(tmp_path)
            mock_settings.logging.LOG_RETENTION_DAYS = 3

            root = setup_logging("appcenter")

            assert root.level == logging.WARNING
            assert len(root.handlers) == 2
            file_handler = root.handlers[1]
            assert isinstance(file_handler, TimedRotatingFileHandler)
            assert file_handler.backupCount == 3
            assert (tmp_path / "appcenter.log").exists()

    def test_debug_forces_debug_level(self, restore_root_logger):
        with patch("config.logging_config.settings") as mock_settings:
            mock_settings.general.DEBUG = True
            mock_settings.general.LOG_LEVEL = "INFO"

            root = setup_logging("appcenter", to_file=False)

            assert root.level == logging.DEBUG
            assert len(root.handlers) == 1
