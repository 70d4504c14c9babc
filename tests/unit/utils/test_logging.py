import logging
from pathlib import Path
from unittest.mock import patch

import pytest

from gemini_chat.utils.logging import (
    configure_logger,
    get_logger,
    should_use_rich_logging,
    update_logger_level,
)


@pytest.fixture
def logger_name(request) -> str:
    name = f"gemini_chat_test.{request.node.name}"
    yield name
    logging.Logger.manager.loggerDict.pop(name, None)


def test_get_logger_configures_new_logger(logger_name):
    logger = get_logger(logger_name, level="debug")
    assert logger.name == logger_name
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 1
    assert not logger.propagate


def test_get_logger_returns_existing_logger(logger_name):
    first = get_logger(logger_name, level="warning")
    second = get_logger(logger_name, level="debug")
    assert first is second
    assert second.level == logging.WARNING


def test_configure_logger_with_log_dir(logger_name, tmp_path: Path):
    configure_logger(logger_name, level="info", log_dir=tmp_path / "logs")
    logger = logging.getLogger(logger_name)
    assert len(logger.handlers) == 2
    file_handler = logger.handlers[1]
    assert isinstance(file_handler, logging.FileHandler)
    logger.info("hello")
    file_handler.flush()
    log_file = tmp_path / "logs" / f"{logger_name}.log"
    assert "hello" in log_file.read_text()
    file_handler.close()


def test_update_logger_level(logger_name):
    get_logger(logger_name, level="info")
    update_logger_level(logger_name, level="error")
    logger = logging.getLogger(logger_name)
    assert logger.level == logging.ERROR
    assert all(handler.level == logging.ERROR for handler in logger.handlers)


@pytest.mark.parametrize("value", ["1", "true", "YES", "on"])
def test_should_use_rich_logging_disabled_by_env(monkeypatch, value):
    monkeypatch.setenv("GEMINI_CHAT_DISABLE_RICH_LOGGING", value)
    with patch("gemini_chat.utils.logging.sys") as mock_sys:
        mock_sys.stdout.isatty.return_value = True
        assert not should_use_rich_logging()


def test_should_use_rich_logging_on_tty(monkeypatch):
    monkeypatch.delenv("GEMINI_CHAT_DISABLE_RICH_LOGGING", raising=False)
    with patch("gemini_chat.utils.logging.sys") as mock_sys:
        mock_sys.stdout.isatty.return_value = True
        assert should_use_rich_logging()
        mock_sys.stdout.isatty.return_value = False
        assert not should_use_rich_logging()


def test_configure_logger_uses_rich_handler_on_tty(logger_name):
    from rich.logging import RichHandler

    with patch(
        "gemini_chat.utils.logging.should_use_rich_logging", return_value=True
    ):
        configure_logger(logger_name, level="debug")
    assert isinstance(logging.getLogger(logger_name).handlers[0], RichHandler)


def test_configure_logger_uses_stream_handler_without_tty(logger_name):
    with patch(
        "gemini_chat.utils.logging.should_use_rich_logging", return_value=False
    ):
        configure_logger(logger_name)
    handler = logging.getLogger(logger_name).handlers[0]
    assert type(handler) is logging.StreamHandler
