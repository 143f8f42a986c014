"""
Logging utilities for rbucket.

Every module logs under the "rbucket" namespace (guard wipes at INFO, drops
and undo at DEBUG). Nothing is emitted until the embedding application
either configures the root logger itself or calls configure_logging(),
which attaches handlers to the "rbucket" logger only.
"""
import logging
import os
import sys
from pathlib import Path
from typing import Any, List, Optional

PACKAGE_LOGGER = 'rbucket'

_configured = False
_HANDLER_TAG = "_rbucket_handler"
_CONSOLE_FMT = '%(asctime)s | %(levelname)-5s | %(name)s | %(message)s'
_FILE_FMT = '%(asctime)s | %(levelname)-5s | %(name)s | %(funcName)s:%(lineno)d | %(message)s'


def _level(name: str, fallback: int) -> int:
    value = logging.getLevelName(name.upper())
    return value if isinstance(value, int) else fallback


def _tag(handler: logging.Handler, fmt: str, datefmt: str, level: int) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))
    setattr(handler, _HANDLER_TAG, True)
    return handler


def package_handlers() -> List[logging.Handler]:
    """Handlers previously attached by configure_logging()."""
    return [h for h in logging.getLogger(PACKAGE_LOGGER).handlers if getattr(h, _HANDLER_TAG, False)]


def configure_logging(
    level: str = 'INFO',
    log_file: Optional[str] = None,
    file_level: str = 'DEBUG',
    force: bool = False,
    console: bool = True,
) -> logging.Logger:
    """
    Route bucket log messages (e.g. guard wipes) to the console and/or a file.

    Only the "rbucket" logger is touched; the application's root logging is
    left alone. Repeat calls are ignored unless force=True, in which case the
    handlers installed earlier are replaced.

    Args:
        level: Console log level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional path to log file
        file_level: Log level for file output (default DEBUG)
        force: If True, reconfigure even if already configured
        console: Whether to add a console handler

    Environment variable overrides:
        LOG_LEVEL: Override the level parameter
        LOG_FILE: Override the log_file parameter

    Returns:
        The "rbucket" package logger
    """
    global _configured

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    if _configured and not force:
        return package_logger

    level = os.getenv('LOG_LEVEL', level).upper()
    if log_file is None:
        log_file = os.getenv('LOG_FILE')

    for handler in package_handlers():
        package_logger.removeHandler(handler)
        handler.close()

    package_logger.setLevel(logging.DEBUG)  # filter at handler level

    if console:
        package_logger.addHandler(
            _tag(logging.StreamHandler(sys.stdout), _CONSOLE_FMT, '%H:%M:%S', _level(level, logging.INFO))
        )

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        package_logger.addHandler(
            _tag(
                logging.FileHandler(log_file, encoding='utf-8'),
                _FILE_FMT,
                '%Y-%m-%d %H:%M:%S',
                _level(file_level, logging.DEBUG),
            )
        )

    _configured = True
    package_logger.debug(f"Bucket logging configured: level={level}, file={log_file or 'none'}")
    return package_logger


def reset_logging() -> None:
    """Detach handlers added by configure_logging() and restore defaults."""
    global _configured
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in package_handlers():
        package_logger.removeHandler(handler)
        handler.close()
    package_logger.setLevel(logging.NOTSET)
    _configured = False


def format_count(n: int, singular: str, plural: Optional[str] = None) -> str:
    """
    Format a count with proper singular/plural form.

    Returns:
        Formatted string like "1 item" or "5 items"
    """
    if plural is None:
        plural = singular + 's'
    return f"{n:,} {singular if n == 1 else plural}"


def truncate_list(items: List[Any], max_items: int = 3, format_fn=str) -> str:
    """Format a list for logging, e.g. "1, 2, 3 (+5 more)"."""
    if not items:
        return "(none)"

    result = ', '.join(format_fn(item) for item in items[:max_items])
    if len(items) > max_items:
        result += f" (+{len(items) - max_items} more)"
    return result
