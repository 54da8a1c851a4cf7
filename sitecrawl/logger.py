# sitecrawl/logger.py
"""Logging for sitecrawl.

Records go to stderr, because stdout carries the crawl result (one URL per
line). A rotating log file can be added with ``--log-file``. Modules log
through the shared instance::

    from sitecrawl.logger import logger
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, Optional, Union

DEFAULT_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOGGER_NAME: Final[str] = "sitecrawl"

LOG_FILE_MAX_BYTES: Final[int] = 5 * 1024 * 1024
LOG_FILE_BACKUPS: Final[int] = 3

Level = Union[int, str]


def _handlers(log_file: Optional[Union[str, Path]], fmt: str) -> list[logging.Handler]:
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file is not None:
        handlers.append(
            RotatingFileHandler(
                str(log_file),
                maxBytes=LOG_FILE_MAX_BYTES,
                backupCount=LOG_FILE_BACKUPS,
                encoding="utf-8",
            )
        )
    formatter = logging.Formatter(fmt)
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def configure(
    *,
    level: Level = "INFO",
    log_file: Optional[Union[str, Path]] = None,
    log_format: str = DEFAULT_FORMAT,
    replace_handlers: bool = True,
) -> logging.Logger:
    """Attach handlers to the ``sitecrawl`` logger and set its level.

    With *replace_handlers* the previous handlers are closed first, so the
    CLI can call this once per invocation. Records do not propagate to the
    root logger.
    """
    crawl_logger = logging.getLogger(LOGGER_NAME)
    crawl_logger.setLevel(level)

    if replace_handlers:
        for handler in list(crawl_logger.handlers):
            crawl_logger.removeHandler(handler)
            handler.close()

    for handler in _handlers(log_file, log_format):
        crawl_logger.addHandler(handler)

    crawl_logger.propagate = False
    return crawl_logger


def init_logging(
    level: Level = "WARNING",
    log_file: Optional[Union[str, Path]] = None,
    log_format: str = DEFAULT_FORMAT,
) -> logging.Logger:
    return configure(level=level, log_file=log_file, log_format=log_format, replace_handlers=True)


logger: logging.Logger = init_logging()

__all__ = ["logger", "configure", "init_logging", "DEFAULT_FORMAT", "LOGGER_NAME"]
