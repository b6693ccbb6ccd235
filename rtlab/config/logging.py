"""Logging configuration for the rtlab package."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field
from rich.logging import RichHandler

_installed_handlers: dict[str, list[logging.Handler]] = {}


class LoggingConfig(BaseModel):
    """Configuration for logging.

    Parameters
    ----------
    level : str
        Log level.
    format : str
        Log format string for file output.
    file : Path | None
        Log file path.
    console : bool
        Whether to log to console.

    Examples
    --------
    >>> config = LoggingConfig()
    >>> config.level
    'INFO'
    >>> config.console
    True
    """

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Log level"
    )
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format",
    )
    file: Path | None = Field(default=None, description="Log file path")
    console: bool = Field(default=True, description="Log to console")


def configure_logging(config: LoggingConfig, logger_name: str = "rtlab") -> logging.Logger:
    """Install handlers on the package logger according to a LoggingConfig.

    Handlers installed by a previous call are removed first, so the
    function can be called again when the configuration changes.

    Parameters
    ----------
    config : LoggingConfig
        Logging configuration.
    logger_name : str
        Logger to configure.

    Returns
    -------
    logging.Logger
        The configured logger.
    """
    logger = logging.getLogger(logger_name)
    logger.setLevel(config.level)

    installed = _installed_handlers.setdefault(logger_name, [])
    while installed:
        handler = installed.pop()
        logger.removeHandler(handler)
        handler.close()

    if config.console:
        console_handler = RichHandler(show_path=False, rich_tracebacks=True)
        console_handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(console_handler)
        installed.append(console_handler)

    if config.file is not None:
        config.file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(config.file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(config.format))
        logger.addHandler(file_handler)
        installed.append(file_handler)

    return logger
