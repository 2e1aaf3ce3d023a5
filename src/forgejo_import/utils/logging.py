"""Logging utilities for forgejo-import."""

import os
import sys
from pathlib import Path
from typing import Optional

from loguru import logger

LOG_LEVEL_ENV = 'FORGEJO_IMPORT_LOG'

CONSOLE_FORMAT = (
    '<green>{time:YYYY-MM-DD HH:mm:ss}</green> | '
    '<level>{level: <8}</level> | '
    '<cyan>{extra[component]}</cyan> | '
    '<level>{message}</level>'
)

FILE_FORMAT = (
    '{time:YYYY-MM-DD HH:mm:ss} | '
    '{level: <8} | '
    '{name}:{function}:{line} | '
    '{message}'
)


def resolve_level(level: Optional[str] = None) -> str:
    """Pick the effective log level.

    An explicit level wins, then the ``FORGEJO_IMPORT_LOG`` environment
    variable, then INFO.
    """
    return (level or os.getenv(LOG_LEVEL_ENV) or 'INFO').upper()


def setup_logging(
    level: Optional[str] = None,
    log_file: Optional[str] = None,
) -> None:
    """Setup logging configuration using loguru.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional log file path
    """
    level = resolve_level(level)

    logger.remove()
    logger.configure(extra={'component': 'forgejo-import'})

    logger.add(
        sys.stderr,
        format=CONSOLE_FORMAT,
        level=level,
        colorize=True,
        backtrace=True,
        diagnose=False,
    )

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_file,
            format=FILE_FORMAT,
            level=level,
            rotation='10 MB',
            retention='30 days',
            compression='gz',
            backtrace=True,
            diagnose=False,
        )

    logger.debug(f'Logging initialized with level: {level}')
    if log_file:
        logger.debug(f'Log file: {log_file}')
