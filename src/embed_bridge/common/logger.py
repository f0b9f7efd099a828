"""
Logging setup for Embed Bridge.
All modules obtain their logger through setup_logger(__name__).
"""

import logging
import os
import sys
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Environment variable controlling the default level
LOG_LEVEL_ENV = "EMBED_BRIDGE_LOG_LEVEL"


def _resolve_level(level: Optional[str]) -> int:
    """
    Resolve a level name to a logging level.

    Args:
        level: Level name (e.g. 'DEBUG'). If None, read from environment.

    Returns:
        Numeric logging level (INFO if the name is unknown)
    """
    name = (level or os.environ.get(LOG_LEVEL_ENV, "INFO")).upper()
    return getattr(logging, name, logging.INFO)


def setup_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """
    Get a logger configured with the standard Embed Bridge handler.

    Calling this repeatedly for the same name never adds a second handler.

    Args:
        name: Logger name, usually __name__
        level: Optional level name overriding EMBED_BRIDGE_LOG_LEVEL

    Returns:
        Configured logger
    """
    logger = logging.getLogger(name)
    logger.setLevel(_resolve_level(level))

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
        logger.addHandler(handler)

    return logger
