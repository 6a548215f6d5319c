"""
Logging configuration for the application.
"""
import logging
from typing import Union

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(level: Union[int, str] = logging.INFO) -> logging.Logger:
    """
    Install a single stream handler on the package logger.

    Calling this more than once only updates the level.

    Args:
        level: Logging level as int or name ("DEBUG", "INFO", ...)

    Returns:
        The configured ``inkstamp`` logger
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logger = logging.getLogger("inkstamp")
    logger.setLevel(level)

    if not any(getattr(h, "_inkstamp", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._inkstamp = True
        logger.addHandler(handler)

    return logger
