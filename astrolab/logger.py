"""
Centralized logging configuration for AstroLab.

Player-facing text goes through ``emit_print``; this module covers operator
diagnostics (content errors, data feed fallbacks, audio cues at DEBUG).

Usage:
    from astrolab.logger import get_logger, setup_logging

    setup_logging(level="INFO")
    logger = get_logger(__name__)
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Literal, Optional

COLORS = {
    "DEBUG": "\033[36m",
    "INFO": "\033[32m",
    "WARNING": "\033[33m",
    "ERROR": "\033[31m",
    "CRITICAL": "\033[35m",
    "RESET": "\033[0m",
}

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ColoredFormatter(logging.Formatter):
    """Formatter that colors the level name."""

    def format(self, record):
        levelname = record.levelname
        if levelname in COLORS:
            record = logging.makeLogRecord(record.__dict__)
            record.levelname = f"{COLORS[levelname]}{levelname}{COLORS['RESET']}"
        return super().format(record)


def setup_logging(
    level: LogLevel = "WARNING",
    log_file: Optional[str] = None,
    enable_colors: bool = True,
) -> None:
    """
    Configure the root logger once at startup.

    Logs go to stderr so they never interleave with the story text on stdout.

    Args:
        level: Logging level name
        log_file: Optional path; when given, logs are also written there without colors
        enable_colors: Color level names when stderr is a terminal
    """
    numeric_level = getattr(logging, str(level).upper(), logging.WARNING)
    fmt = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(numeric_level)
    if enable_colors and sys.stderr.isatty():
        console_handler.setFormatter(ColoredFormatter(fmt, datefmt=datefmt))
    else:
        console_handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers = [console_handler]

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))
        root_logger.addHandler(file_handler)

    logging.getLogger("urllib3").setLevel(logging.WARNING)
    root_logger.debug("Logging initialized at %s level", level)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
