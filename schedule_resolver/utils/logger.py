"""
Logging configuration
"""
import logging
import sys
from pathlib import Path
from typing import Optional

import structlog

DEFAULT_LEVEL = "INFO"

_configured = False


def configure_logging(level: str = DEFAULT_LEVEL, log_file: Optional[str] = None) -> None:
    """
    Install the stdlib handlers and the structlog processor chain.

    Safe to call again: ``load_config`` re-applies the level and file from
    the ``logging`` section after modules have already grabbed loggers.

    Args:
        level: Minimum level name (e.g. "DEBUG", "WARNING")
        log_file: Optional path; parent directories are created
    """
    global _configured

    log_level = getattr(logging, level.upper())

    handlers = [logging.StreamHandler(sys.stdout)]

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        format="%(message)s",
        level=log_level,
        handlers=handlers,
        force=True
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer()
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False
    )

    _configured = True


def setup_logger(
    name: Optional[str] = None,
    level: Optional[str] = None,
    log_file: Optional[str] = None
) -> structlog.BoundLogger:
    """
    Get a structured logger for ``name``.

    Module-level loggers are created at import time, before any config is
    read, so this only configures logging on first use or when a level or
    file is given explicitly.
    """
    if not _configured or level is not None or log_file is not None:
        configure_logging(level or DEFAULT_LEVEL, log_file)

    return structlog.get_logger(name)
