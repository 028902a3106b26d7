# -*- coding: utf-8 -*-
"""
Logging Setup Module

Configures the root logger once at startup: a console handler plus a
rotating log file in the user data directory.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

LOG_FILE_NAME = "sprite-player.log"
FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s"
CONSOLE_FORMAT = "%(levelname)s: %(name)s: %(message)s"


def setup_logging(
    level: str = "INFO",
    log_dir: Optional[Path] = None,
    max_bytes: int = 2 * 1024 * 1024,
    backup_count: int = 3,
) -> Optional[Path]:
    """
    Configure application logging.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR)
        log_dir: Directory for the rotating log file; None disables file logging
        max_bytes: Maximum size of the log file before rotation
        backup_count: Number of rotated files to keep

    Returns:
        Path of the log file, or None if file logging is off or unavailable
    """
    resolved_level = getattr(logging, str(level).upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(resolved_level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(resolved_level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    root_logger.addHandler(console_handler)

    log_file = None
    if log_dir is not None:
        try:
            log_dir.mkdir(parents=True, exist_ok=True)
            log_file = log_dir / LOG_FILE_NAME
            file_handler = RotatingFileHandler(
                log_file,
                maxBytes=max_bytes,
                backupCount=backup_count,
                encoding="utf-8",
            )
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(
                logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
            )
            root_logger.addHandler(file_handler)
        except OSError as e:
            root_logger.warning("File logging disabled, cannot write to %s: %s", log_dir, e)
            log_file = None

    root_logger.debug("Logging initialized (level=%s, file=%s)", logging.getLevelName(resolved_level), log_file)
    return log_file
