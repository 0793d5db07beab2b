"""Logging setup for the standup tracker.

All application loggers live under the ``standups`` namespace, so one
call to ``setup_logging`` configures the API, the scripts and the UI.
"""

import logging
import sys
from pathlib import Path
from typing import Iterable, Optional

ROOT_LOGGER_NAME = "standups"

DEFAULT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Libraries that log every request or statement at INFO
NOISY_LOGGERS = ("httpx", "openai", "sqlalchemy.engine", "uvicorn.access")


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    format_string: Optional[str] = None,
    quiet: Iterable[str] = NOISY_LOGGERS,
) -> logging.Logger:
    """Configure the ``standups`` logger; safe to call more than once.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional file that receives the same records as stdout
        format_string: Optional custom format string
        quiet: Third-party loggers raised to WARNING

    Returns:
        The ``standups`` logger
    """
    formatter = logging.Formatter(format_string or DEFAULT_FORMAT, datefmt=DATE_FORMAT)

    app_logger = logging.getLogger(ROOT_LOGGER_NAME)
    app_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    app_logger.propagate = False
    for handler in list(app_logger.handlers):
        app_logger.removeHandler(handler)
        handler.close()

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    for handler in handlers:
        handler.setFormatter(formatter)
        app_logger.addHandler(handler)

    for name in quiet:
        logging.getLogger(name).setLevel(logging.WARNING)

    return app_logger


def get_logger(name: str) -> logging.Logger:
    """Logger for a module, e.g. ``get_logger("ai.search")`` → ``standups.ai.search``."""
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
