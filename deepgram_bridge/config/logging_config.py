"""
Logging setup for the bridge process.

The application logs through a single named logger. configure_logging() attaches
a stdout handler and, when the log directory is writable, a size-rotated file
handler. The level comes from the caller or, failing that, from LOG_LEVEL as it
stands when the function runs, so a value loaded from .env is honoured.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from deepgram_bridge.config import settings
from deepgram_bridge.config.constants import LOG_FILE_NAME, LOG_FORMAT, LOGGER_NAME

LOG_DIR = Path("logs")
MAX_LOG_SIZE = 10 * 1024 * 1024  # 10 MB
BACKUP_COUNT = 5


def resolve_level(level: Optional[str] = None) -> int:
    """Map a level name (or the LOG_LEVEL setting) to a logging level number."""
    name = (level or settings.get_log_level()).strip().upper()
    value = logging.getLevelName(name)
    return value if isinstance(value, int) else logging.INFO


def _file_handler(formatter: logging.Formatter) -> RotatingFileHandler:
    LOG_DIR.mkdir(exist_ok=True)
    handler = RotatingFileHandler(
        LOG_DIR / LOG_FILE_NAME,
        maxBytes=MAX_LOG_SIZE,
        backupCount=BACKUP_COUNT,
    )
    handler.setFormatter(formatter)
    return handler


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """
    Configure the bridge logger, replacing any handlers from an earlier call.

    Args:
        level: Level name; defaults to the LOG_LEVEL environment variable

    Returns:
        logging.Logger: The configured "deepgram_bridge" logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(resolve_level(level))

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    formatter = logging.Formatter(LOG_FORMAT)
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    try:
        logger.addHandler(_file_handler(formatter))
    except OSError as e:
        logger.warning(f"File logging disabled, console only: {e}")

    # Records stay on our handlers, not the root logger's
    logger.propagate = False

    logger.info(f"Logging configured at {logging.getLevelName(logger.level)}")
    return logger
