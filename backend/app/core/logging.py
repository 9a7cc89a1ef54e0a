"""
Logging setup.

Configures loguru sinks from settings.
"""

import sys

from loguru import logger

from app.core.config import settings

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
)


def setup_logging() -> None:
    """Replace the default loguru sink with configured ones."""
    logger.remove()
    logger.add(sys.stderr, level=settings.log_level.upper(), format=LOG_FORMAT)

    if settings.log_file:
        logger.add(
            settings.log_file,
            level=settings.log_level.upper(),
            rotation=settings.log_rotation,
            retention=settings.log_retention,
            encoding="utf-8",
            enqueue=True,
        )
