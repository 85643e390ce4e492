"""
core/logging_config.py
Console logging setup for processes embedding the engine.

The engine modules only ever call logging.getLogger(__name__); the host
process decides whether and how records are emitted.
"""

import logging

from core.config import get_settings

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_HANDLER_NAME = "swarm-engine-console"


def setup_logging(level: int | str | None = None) -> logging.Logger:
    """
    Configure the root logger with a single console handler.

    Args:
        level: Logging level (name or number). Defaults to settings.LOG_LEVEL.

    Returns:
        The configured root logger. Calling this again replaces the
        handler instead of stacking duplicates.
    """
    if level is None:
        level = get_settings().LOG_LEVEL
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root = logging.getLogger()
    root.setLevel(level)

    # Remove our previous handler to avoid duplicates
    for handler in list(root.handlers):
        if handler.get_name() == _HANDLER_NAME:
            root.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.set_name(_HANDLER_NAME)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    root.addHandler(console_handler)

    root.debug("Logging initialized at level %s", logging.getLevelName(level))
    return root
