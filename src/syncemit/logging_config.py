import logging
import os
from typing import Optional

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s"


def resolve_level(default_level: int = logging.INFO) -> int:
    """Return the level named by SYNCEMIT_LOG_LEVEL, or ``default_level`` if unset or unknown."""
    level_name = os.getenv("SYNCEMIT_LOG_LEVEL")
    if not level_name:
        return default_level
    level = logging.getLevelName(level_name.strip().upper())
    return level if isinstance(level, int) else default_level


def configure_logging(default_level: int = logging.INFO, logger_name: Optional[str] = "syncemit") -> None:
    """Install a root handler with the package format and set the emitter log level.

    The level applies to ``logger_name`` (the package logger by default) so that
    enabling DEBUG for listener registration and dispatch does not raise the
    verbosity of the host application. Pass ``None`` to set it on the root logger.
    """
    level = resolve_level(default_level)
    logging.basicConfig(format=LOG_FORMAT)
    logging.getLogger(logger_name).setLevel(level)
