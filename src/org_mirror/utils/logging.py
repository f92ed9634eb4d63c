"""Logging utilities for the organization mirroring tool."""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from .security import mask_credentials


def _mask_record(record) -> None:
    record['message'] = mask_credentials(record['message'])


def setup_logging(
    level: str = 'INFO',
    log_file: Optional[str] = None,
    log_format: Optional[str] = None,
) -> None:
    """Setup logging configuration using loguru.

    Console output on stderr is mirrored line for line into ``log_file``,
    which is opened in append mode. Credentials embedded in URLs are masked
    in both sinks.

    Args:
        level: Log level (DEBUG, INFO, SUCCESS, WARNING, ERROR, CRITICAL)
        log_file: Optional log file path
        log_format: Optional custom console log format
    """
    # Remove default handler
    logger.remove()
    logger.configure(patcher=_mask_record)

    if log_format is None:
        log_format = (
            '<green>{time:YYYY-MM-DD HH:mm:ss}</green> | '
            '<level>{level: <8}</level> | '
            '<level>{message}</level>'
        )

    logger.add(
        sys.stderr,
        format=log_format,
        level=level,
        colorize=True,
        backtrace=True,
        diagnose=False,
    )

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        # File format (no colors)
        file_format = (
            '{time:YYYY-MM-DD HH:mm:ss} | '
            '{level: <8} | '
            '{name}:{function}:{line} | '
            '{message}'
        )

        logger.add(
            log_file,
            format=file_format,
            level=level,
            mode='a',
            encoding='utf-8',
            backtrace=True,
            diagnose=False,
        )

    logger.debug(f'Logging initialized with level: {level}')
    if log_file:
        logger.info(f'Log file: {log_file}')
