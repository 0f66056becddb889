"""
Logger access and on-demand logging setup for archmap.

Library modules hold lazy ``structlog.get_logger(__name__)`` proxies, so
importing archmap never touches structlog configuration. get_logger() hands
out LoggingService loggers once logging is set up, and ensure_logging() is
what a generation run calls before it logs: it keeps a structlog setup the
host application already made and only configures archmap's own chain when
there is none.

License: MIT
"""

from typing import Optional

import structlog

from archmap_core.config import settings
from archmap_core.logging_service import LoggingService


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Logger named after the calling component.

    Raises:
        RuntimeError: If logging is not set up yet (see configure_logging())
        ValueError: If name is empty or too long

    Example:
        configure_logging(level="DEBUG", format="console")
        logger = get_logger("archmap.cli")
        logger.info("source_files_collected", count=42)
    """
    return LoggingService.get_logger(name)


def configure_logging(level: Optional[str] = None, format: Optional[str] = None) -> None:
    """
    Set up LoggingService, defaulting to ARCHMAP_LOG_LEVEL / ARCHMAP_LOG_FORMAT.

    Raises:
        ValueError: If level or format is invalid
        RuntimeError: If logging was set up already
    """
    LoggingService.configure_logging(
        level=level if level is not None else settings.log_level,
        format=format if format is not None else settings.log_format,
    )


def ensure_logging() -> None:
    """
    Make LoggingService usable without replacing a host's structlog setup.

    Does nothing when LoggingService is already set up. Adopts an existing
    structlog configuration when the host made one, and otherwise configures
    logging from settings.
    """
    if LoggingService.is_configured():
        return
    if structlog.is_configured():
        LoggingService.use_existing_configuration()
    else:
        configure_logging()
