"""Tests for logging configuration."""

import logging
from pathlib import Path

from rich.logging import RichHandler

from rtlab.config.logging import LoggingConfig, configure_logging


def test_console_handler() -> None:
    """Test that console logging installs a RichHandler."""
    logger = configure_logging(LoggingConfig(level="WARNING"), logger_name="rtlab.t1")
    assert logger.level == logging.WARNING
    assert any(isinstance(h, RichHandler) for h in logger.handlers)
    configure_logging(LoggingConfig(console=False), logger_name="rtlab.t1")


def test_file_handler(tmp_path: Path) -> None:
    """Test that messages reach the configured file."""
    path = tmp_path / "logs" / "rt.log"
    logger = configure_logging(
        LoggingConfig(level="DEBUG", console=False, file=path), logger_name="rtlab.t2"
    )
    logger.debug("trial started")
    for handler in logger.handlers:
        handler.flush()

    assert "trial started" in path.read_text()
    configure_logging(LoggingConfig(console=False), logger_name="rtlab.t2")


def test_reconfigure_replaces_handlers() -> None:
    """Test that calling again does not stack handlers."""
    configure_logging(LoggingConfig(), logger_name="rtlab.t3")
    logger = configure_logging(LoggingConfig(), logger_name="rtlab.t3")
    assert sum(isinstance(h, RichHandler) for h in logger.handlers) == 1
    configure_logging(LoggingConfig(console=False), logger_name="rtlab.t3")
