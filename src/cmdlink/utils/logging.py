"""Logging setup utilities for cmdlink.

Configures logging for the entire application based on the logging
configuration settings.
"""

from __future__ import annotations

import logging
import sys

from cmdlink.config.settings import LoggingConfig


def setup_logging(config: LoggingConfig | None = None) -> None:
    """Configure logging for the cmdlink application.

    Sets up the package logger with the specified level, format, and
    optional file handler. uvicorn's loggers are routed through the same
    handlers, with its access log kept quiet.

    Args:
        config: Logging configuration. If None, uses defaults
                (INFO level, stderr output).
    """
    if config is None:
        config = LoggingConfig()

    level = getattr(logging, config.level.upper(), logging.INFO)
    formatter = logging.Formatter(config.format)

    handlers: list[logging.Handler] = []

    # Console handler
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    handlers.append(console_handler)

    # File handler (optional)
    if config.file:
        file_handler = logging.FileHandler(config.file)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    root_logger = logging.getLogger("cmdlink")
    root_logger.setLevel(level)
    for handler in handlers:
        root_logger.addHandler(handler)

    uvicorn_logger = logging.getLogger("uvicorn")
    uvicorn_logger.handlers = list(handlers)
    uvicorn_logger.propagate = False
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    root_logger.info("Logging initialized at %s level", config.level)


def log_null_error(logger: logging.Logger, name: str) -> None:
    """Report a required argument that arrived empty or missing."""
    logger.error("%s is null or empty!", name)
