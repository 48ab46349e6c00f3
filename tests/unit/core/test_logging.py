"""
Unit Tests for Centralized Logging.

Tests the logging configuration, handlers and source handling.
"""

import json
import logging
from unittest.mock import MagicMock, patch

import pytest
import structlog

from notorica.core import logging as logging_module
from notorica.core.logging import (
    VALID_SOURCES,
    get_logger,
    log_with_source,
    setup_logging,
)

TEST_CONFIG = {
    "level": "INFO",
    "format": "json",
    "handlers": {
        "console": {"enabled": True},
        "file": {
            "enabled": False,
            "path": "logs/test.jsonl",
            "max_bytes": 1024,
            "backup_count": 1,
        },
    },
}


@pytest.fixture(autouse=True)
def _restore_root_logger():
    """setup_logging replaces root handlers; put the originals back."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        if handler not in handlers:
            handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)
    logging_module._logging_config = None
    structlog.reset_defaults()


class TestValidSources:
    def test_contains_expected_values(self):
        assert VALID_SOURCES == frozenset({"cli", "storage", "preferences", "internal", "unknown"})

    def test_is_frozenset(self):
        assert isinstance(VALID_SOURCES, frozenset)


class TestLoggingConfigLoading:
    def test_reads_yaml_once(self):
        logging_module._logging_config = None
        with patch.object(logging_module, "load_yaml_config", return_value=TEST_CONFIG) as mock_load:
            first = logging_module._load_logging_config()
            second = logging_module._load_logging_config()

        assert first is second
        assert first["level"] == "INFO"
        mock_load.assert_called_once_with("logging.yaml")

    def test_project_yaml_is_valid(self):
        logging_module._logging_config = None
        config = logging_module._load_logging_config()
        assert config["handlers"]["file"]["path"] == "logs/notorica.jsonl"


class TestSetupLogging:
    def test_console_only(self):
        logging_module._logging_config = TEST_CONFIG
        setup_logging()

        root = logging.getLogger()
        assert root.level == logging.INFO
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0], logging.StreamHandler)

    def test_level_override(self):
        logging_module._logging_config = TEST_CONFIG
        setup_logging(level="DEBUG", format_type="console")
        assert logging.getLogger().level == logging.DEBUG

    def test_console_can_be_disabled(self):
        logging_module._logging_config = TEST_CONFIG
        setup_logging(enable_console=False)
        assert logging.getLogger().handlers == []

    def test_file_handler_writes_json_lines(self, tmp_path):
        logging_module._logging_config = TEST_CONFIG
        log_path = tmp_path / "logs" / "test.jsonl"

        with patch.object(logging_module, "_resolve_log_path", return_value=log_path):
            setup_logging(enable_console=False, enable_file_logging=True)

        logger = get_logger("tests.logging")
        log_with_source(logger, "storage", "warning", "Write failed", key="notes")
        for handler in logging.getLogger().handlers:
            handler.flush()

        record = json.loads(log_path.read_text(encoding="utf-8").strip().splitlines()[-1])
        assert record["event"] == "Write failed"
        assert record["source"] == "storage"
        assert record["key"] == "notes"
        assert record["level"] == "warning"
        assert "timestamp" in record

    def test_sqlalchemy_logger_quietened(self):
        logging_module._logging_config = TEST_CONFIG
        setup_logging(level="DEBUG")
        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING
        assert logging.getLogger("aiosqlite").level == logging.WARNING

    def test_second_call_replaces_handlers(self):
        logging_module._logging_config = TEST_CONFIG
        setup_logging()
        setup_logging(format_type="console")
        assert len(logging.getLogger().handlers) == 1


class TestLogWithSource:
    def test_passes_source_and_fields(self):
        logger = MagicMock()
        log_with_source(logger, "preferences", "info", "Loaded", preference="dark_mode")
        logger.info.assert_called_once_with("Loaded", source="preferences", preference="dark_mode")

    def test_level_is_case_insensitive(self):
        logger = MagicMock()
        log_with_source(logger, "cli", "ERROR", "Boom")
        logger.error.assert_called_once_with("Boom", source="cli")

    def test_unrecognized_source_becomes_unknown(self):
        logger = MagicMock()
        log_with_source(logger, "network", "warning", "Odd")
        logger.warning.assert_called_once_with("Odd", source="unknown")

    def test_unknown_level_raises(self):
        logger = MagicMock(spec=["info"])
        with pytest.raises(AttributeError):
            log_with_source(logger, "cli", "verbose", "Nope")
