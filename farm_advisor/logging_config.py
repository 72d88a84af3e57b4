"""
Logging setup for farm-advisor.

Console output goes to stdout (plain or rich-formatted); an optional rotating
file keeps the full DEBUG trail of provider calls.
"""

import logging
import logging.handlers
import os
import sys
from pathlib import Path

from rich.logging import RichHandler

DEFAULT_LOG_FILE = "farm_advisor.log"

# Third-party loggers that are chatty at INFO
_NOISY_LOGGERS = ("urllib3", "requests_cache", "httpx", "google_genai")


def setup_logging(
    level: str = "INFO",
    log_file: str | None = None,
    enable_file_logging: bool = True,
    rich_console: bool = False,
) -> logging.Logger:
    """
    Configure the root logger for the CLI and library use.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Path to the log file (defaults to farm_advisor.log)
        enable_file_logging: Whether to add the rotating file handler
        rich_console: Render console records with rich instead of plain text

    Returns:
        The configured root logger
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger()
    logger.setLevel(numeric_level)
    logger.handlers.clear()

    console_handler: logging.Handler
    if rich_console:
        console_handler = RichHandler(show_path=False, rich_tracebacks=True)
        console_handler.setFormatter(logging.Formatter("%(message)s"))
    else:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
    console_handler.setLevel(numeric_level)
    logger.addHandler(console_handler)

    if enable_file_logging:
        log_path = Path(log_file or DEFAULT_LOG_FILE)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        # 10MB per file, 5 backups
        file_handler = logging.handlers.RotatingFileHandler(
            log_path, maxBytes=10 * 1024 * 1024, backupCount=5
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(pathname)s:%(lineno)d - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        logger.addHandler(file_handler)

    if numeric_level > logging.DEBUG:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Return the module logger for ``name`` (usually ``__name__``)."""
    return logging.getLogger(name)


def configure_from_env() -> logging.Logger:
    """
    Configure logging from environment variables.

    Environment variables:
        LOG_LEVEL: Logging level (default: INFO)
        LOG_FILE: Log file path (default: farm_advisor.log)
        DISABLE_FILE_LOGGING: Set to any value to disable file logging
    """
    return setup_logging(
        level=os.getenv("LOG_LEVEL", "INFO"),
        log_file=os.getenv("LOG_FILE", DEFAULT_LOG_FILE),
        enable_file_logging=not os.getenv("DISABLE_FILE_LOGGING"),
    )
