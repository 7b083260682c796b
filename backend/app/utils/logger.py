"""Logging configuration for the application."""
import logging
import sys
from typing import Optional

from app.config import Settings, settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

logger = logging.getLogger("app")

_handler = logging.StreamHandler(sys.stdout)
_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))


def _resolve_level(config: Settings) -> int:
    if config.log_level:
        return logging.getLevelName(config.log_level.upper())
    return logging.DEBUG if config.environment == "development" else logging.INFO


def configure_logging(config: Optional[Settings] = None) -> None:
    """
    Attach a stdout handler to the "app" logger and set its level.

    Safe to call more than once; the handler is only added the first time.
    Handlers attached by others are left alone.

    Args:
        config: Settings to read the level from; module settings if omitted
    """
    level = _resolve_level(config or settings)
    logger.setLevel(level)

    _handler.setLevel(level)
    if _handler not in logger.handlers:
        logger.addHandler(_handler)

    # Prevent duplicate logs through uvicorn's root handlers
    logger.propagate = False


configure_logging()

__all__ = ["logger", "configure_logging", "LOG_FORMAT"]
