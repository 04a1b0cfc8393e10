import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

import pytest

from cyoa.presentation.cli import logging_setup


def test_configure_logging_reads_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    log_path = tmp_path / "logs" / "cyoa.log"
    monkeypatch.setenv("CYOA_LOG_LEVEL", "debug")
    monkeypatch.setenv("CYOA_LOG_PATH", str(log_path))
    monkeypatch.setattr(logging_setup, "_CONFIGURED", False)
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    try:
        logging_setup.configure_logging()

        assert root.level == logging.DEBUG
        file_handlers = [handler for handler in root.handlers if isinstance(handler, RotatingFileHandler)]
        assert len(file_handlers) == 1
        logging.getLogger("cyoa.test").debug("hello from test")
        file_handlers[0].flush()
        assert "hello from test" in log_path.read_text(encoding="utf-8")

        logging_setup.configure_logging()
        assert len(root.handlers) == 2
    finally:
        for handler in root.handlers:
            handler.close()
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)


def test_unknown_level_falls_back_to_warning(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CYOA_LOG_LEVEL", "chatty")
    monkeypatch.delenv("CYOA_LOG_PATH", raising=False)
    monkeypatch.setattr(logging_setup, "_CONFIGURED", False)
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    try:
        logging_setup.configure_logging()
        assert root.level == logging.WARNING
        assert len(root.handlers) == 1
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
