"""Centralized logging configuration for easymoney.

- configure_logging(): attach a single rich handler to the package logger
  ("easymoney"). Called once by the CLI at startup.
- get_logger(name): acquire a module logger. Library modules never attach
  their own handlers.
"""

import logging
import os

from rich.console import Console
from rich.logging import RichHandler

PKG_LOGGER_NAME = "easymoney"
LOG_LEVEL_ENV = "EASYMONEY_LOG_LEVEL"

_configured = False


def parse_level(level: int | str | None) -> int:
    """Resolve a level from an int, a level name, or the environment.

    Args:
        level: Level as int or name (e.g., "DEBUG"). If None, falls back to
            EASYMONEY_LOG_LEVEL, then WARNING.

    Returns:
        Numeric logging level.
    """
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        name = level.strip().upper()
        if name.isdigit():
            return int(name)
        numeric = getattr(logging, name, None)
        if isinstance(numeric, int):
            return numeric
        return logging.WARNING

    env_val = os.environ.get(LOG_LEVEL_ENV)
    if env_val:
        return parse_level(env_val)
    return logging.WARNING


def configure_logging(level: int | str | None = None) -> None:
    """Configure the package logger.

    Repeated calls only adjust the level.

    Args:
        level: Logging level; see parse_level.
    """
    global _configured

    logger = logging.getLogger(PKG_LOGGER_NAME)
    numeric = parse_level(level)
    logger.setLevel(numeric)

    if _configured:
        for handler in logger.handlers:
            handler.setLevel(numeric)
        return

    for handler in list(logger.handlers):
        if isinstance(handler, logging.NullHandler):
            logger.removeHandler(handler)

    handler = RichHandler(console=Console(stderr=True), show_path=False, rich_tracebacks=False)
    handler.setLevel(numeric)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False

    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Return a logger, with a NullHandler on the package logger until configured."""
    pkg_logger = logging.getLogger(PKG_LOGGER_NAME)
    if not _configured and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)
