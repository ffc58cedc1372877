"""Process logging: loguru sinks for stdout and an appending log file."""
from __future__ import annotations

import sys

from loguru import logger

from embed.app.config.settings import Settings

_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {message} | {extra}"


def configure_logging(settings: Settings) -> None:
    """Replace loguru's default sink with stdout plus ``settings.log_file``.

    An empty ``log_file`` keeps stdout only.
    """
    logger.remove()
    logger.add(sys.stdout, level=settings.log_level, format=_FORMAT, colorize=False)
    if settings.log_file:
        logger.add(
            settings.log_file,
            level=settings.log_level,
            format=_FORMAT,
            mode="a",
            enqueue=True,
        )
