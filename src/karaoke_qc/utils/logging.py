"""Logging configuration for karaoke_qc."""

import logging
import os
import sys
from pathlib import Path
from typing import Optional

LOGGER_NAME = "karaoke_qc"
VERBOSE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
BRIEF_FORMAT = "%(levelname)s: %(message)s"


def setup_logging(
    level: Optional[str] = None,
    log_file: Optional[Path] = None,
    verbose: bool = False,
) -> logging.Logger:
    """Configure the package logger.

    The level defaults to ``KARAOKE_QC_LOG_LEVEL`` (or INFO). Calling this
    again replaces the handlers installed by a previous call.
    """
    level = level or os.getenv("KARAOKE_QC_LOG_LEVEL", "INFO")

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, level.upper()))
    logger.handlers.clear()

    formatter = logging.Formatter(VERBOSE_FORMAT if verbose else BRIEF_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str = LOGGER_NAME) -> logging.Logger:
    """Get logger instance."""
    return logging.getLogger(name)
