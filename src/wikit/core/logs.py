"""Logging setup for the CLI and the TUI."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(
    level: str = "INFO",
    log_file: Path | None = None,
    console: bool = False,
) -> logging.Logger:
    """Configure the ``wikit`` logger.

    The TUI owns the terminal, so it only logs to ``log_file``. The CLI adds
    a stderr handler when ``console`` is set (``--verbose``).

    Args:
        level: Log level name.
        log_file: File to append to; parent directories are created.
        console: Also log to stderr.

    Returns:
        The configured ``wikit`` logger.
    """
    logger = logging.getLogger("wikit")
    logger.setLevel(level.upper())
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT)

    if log_file is not None:
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file, encoding="utf-8")
        except OSError as exc:
            print(f"warning: cannot open log file {log_file}: {exc}", file=sys.stderr)
        else:
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

    if console:
        stream_handler = logging.StreamHandler(sys.stderr)
        stream_handler.setFormatter(formatter)
        logger.addHandler(stream_handler)

    if not logger.handlers:
        logger.addHandler(logging.NullHandler())

    return logger
