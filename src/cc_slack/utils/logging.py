"""Logging setup for the cc-slack daemon and CLI."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def setup_logging(
    verbose: bool = False,
    level: str = "info",
    log_file: str | None = None,
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 5,
) -> None:
    """
    Configure root logging.

    Args:
        verbose: If True, log at DEBUG regardless of level
        level: Configured level name
        log_file: Optional path for a rotating log file
        max_bytes: Rotate the log file at this size
        backup_count: Number of rotated files to keep
    """
    log_level = logging.DEBUG if verbose else LEVELS.get(level, logging.INFO)
    logging.basicConfig(
        level=log_level,
        format=CONSOLE_FORMAT,
        datefmt=DATE_FORMAT,
    )
    root = logging.getLogger()
    root.setLevel(log_level)

    if log_file:
        log_file_path = Path(log_file).expanduser()
        log_file_path.parent.mkdir(parents=True, exist_ok=True)
        already = any(
            isinstance(h, RotatingFileHandler) and Path(h.baseFilename) == log_file_path.resolve()
            for h in root.handlers
        )
        if not already:
            file_handler = RotatingFileHandler(
                log_file_path,
                maxBytes=max_bytes,
                backupCount=backup_count,
            )
            file_handler.setLevel(log_level)
            file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))
            root.addHandler(file_handler)

    # Silence noisy third-party loggers
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("slack_sdk").setLevel(logging.WARNING)
