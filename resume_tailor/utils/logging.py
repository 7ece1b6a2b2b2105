"""Logging setup for Resume Tailor.

Application records go to stderr so stdout stays reserved for CLI output
(exported prompt JSON, generated file paths). LiteLLM and httpx log every
request at INFO; they are held at WARNING unless the app runs at DEBUG.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

APP_LOGGER = "resume_tailor"
CHATTY_LOGGERS = ("LiteLLM", "LiteLLM Router", "httpx", "httpcore")

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_installed: list[logging.Handler] = []


def _resolve_level(level: str | int | None) -> int:
    if level is None:
        return logging.INFO
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def configure_logging(
    level: str | int | None = None,
    *,
    log_file: Path | str | None = None,
) -> logging.Logger:
    """Configure the ``resume_tailor`` logger and return it.

    Handlers are installed on the first call only; later calls just move the
    level, so the CLI can apply ``--log-level`` after settings were loaded.

    Args:
        level: Level name or number. Unknown names fall back to INFO.
        log_file: Optional file that receives the same records as stderr.
            Only honoured on the first call.

    Returns:
        The application logger.
    """
    numeric_level = _resolve_level(level)
    logger = logging.getLogger(APP_LOGGER)
    logger.setLevel(numeric_level)

    if not _installed:
        formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
        handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
        if log_file is not None:
            log_path = Path(log_file)
            log_path.parent.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

        for handler in handlers:
            handler.setFormatter(formatter)
            logger.addHandler(handler)
            _installed.append(handler)
        logger.propagate = False

    for handler in _installed:
        handler.setLevel(numeric_level)

    library_level = logging.DEBUG if numeric_level <= logging.DEBUG else logging.WARNING
    for name in CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(library_level)

    return logger


def reset_logging() -> None:
    """Remove installed handlers and restore library log levels (for tests)."""
    logger = logging.getLogger(APP_LOGGER)
    for handler in _installed:
        logger.removeHandler(handler)
        handler.close()
    _installed.clear()

    logger.setLevel(logging.NOTSET)
    logger.propagate = True
    for name in CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(logging.NOTSET)
