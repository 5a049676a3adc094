"""Tests for logging setup: handlers, renderers and bound context."""

import logging
import logging.handlers

import pytest
import structlog
from inventory.utils.logging import add_context, clear_context, setup_stdlib_logging, setup_structlog


@pytest.fixture()
def restore_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers = handlers
    root.setLevel(level)
    structlog.reset_defaults()
    clear_context()


@pytest.mark.usefixtures("restore_logging")
class TestStdlibLogging:
    def test_console_only_without_directory(self, monkeypatch):
        monkeypatch.delenv("LOG_DIR", raising=False)
        monkeypatch.setenv("LOG_LEVEL", "INFO")
        setup_stdlib_logging()

        root = logging.getLogger()
        assert len(root.handlers) == 1
        assert root.level == logging.INFO

    def test_rotating_files_with_directory(self, monkeypatch, tmp_path):
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        setup_stdlib_logging(str(tmp_path / "logs"))

        file_handlers = [
            h for h in logging.getLogger().handlers if isinstance(h, logging.handlers.RotatingFileHandler)
        ]
        assert len(file_handlers) == 2
        assert {h.level for h in file_handlers} == {logging.DEBUG, logging.ERROR}

        logging.getLogger("inventory.test").error("disk check")
        for handler in file_handlers:
            handler.flush()
        assert "disk check" in (tmp_path / "logs" / "inventory_error.log").read_text()


@pytest.mark.usefixtures("restore_logging")
class TestStructlog:
    def test_json_renderer_in_production(self, monkeypatch):
        monkeypatch.setenv("ENV", "production")
        setup_structlog()
        assert isinstance(structlog.get_config()["processors"][-1], structlog.processors.JSONRenderer)

    def test_console_renderer_in_development(self, monkeypatch):
        monkeypatch.setenv("ENV", "development")
        setup_structlog()
        assert isinstance(structlog.get_config()["processors"][-1], structlog.dev.ConsoleRenderer)

    def test_bound_context_is_merged(self):
        add_context(request_id="req-42")
        assert structlog.contextvars.get_contextvars() == {"request_id": "req-42"}
        clear_context()
        assert structlog.contextvars.get_contextvars() == {}
