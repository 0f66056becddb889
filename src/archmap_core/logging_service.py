"""
LoggingService - structured logging for archmap.

Every module logs through structlog loggers handed out here. Output goes to
stderr by default (JSON for machines, console for humans) so a map printed on
stdout is never interleaved with log lines. Values that JSON cannot carry
directly (paths, enums, pydantic models, tuples) are normalized before
rendering, and a generation run can bind its correlation id once for every
line logged inside it.

License: MIT
"""

import logging
import sys
import traceback
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from pathlib import PurePath
from typing import Any, Dict, Iterator, Optional

import structlog
from pydantic import BaseModel
from structlog.types import EventDict, Processor, WrappedLogger

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMATS = ("json", "console")

# Longest logger name accepted by get_logger()
MAX_LOGGER_NAME_LENGTH = 200


@dataclass
class LoggingConfig:
    """
    Configuration for LoggingService.

    Attributes:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format: "json" or "console"
        output_stream: Output destination (default: sys.stderr)
    """

    level: str = "INFO"
    format: str = "json"
    output_stream: Any = sys.stderr

    def __post_init__(self) -> None:
        self.level = self.level.upper()
        self.format = self.format.lower()
        if self.level not in LOG_LEVELS:
            raise ValueError(
                f"Invalid log level: {self.level}. Must be one of: {', '.join(LOG_LEVELS)}"
            )
        if self.format not in LOG_FORMATS:
            raise ValueError(f"Invalid format: {self.format}. Must be 'json' or 'console'")


def to_loggable(value: Any) -> Any:
    """
    Convert a value into something the JSON renderer can write.

    Paths become strings, enums their values, pydantic models their JSON
    dump; tuples, sets and dicts are converted element-wise.
    """
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, PurePath):
        return str(value)
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, dict):
        return {str(key): to_loggable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_loggable(item) for item in value]
    if isinstance(value, (set, frozenset)):
        return sorted(to_loggable(item) for item in value)
    return value


def _normalize_event_values(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    return {key: to_loggable(value) for key, value in event_dict.items()}


class LoggingService:
    """
    Class-level facade over structlog configuration.

    Example:
        LoggingService.configure_logging(level="INFO", format="console")
        logger = LoggingService.get_logger("archmap_core.code")

        with LoggingService.run_context(correlation_id):
            logger.info("ast_map_generated", files=120, classes=431)
    """

    _configured: bool = False
    _log_level: str = "INFO"
    _config: Optional[LoggingConfig] = None
    _loggers: Dict[str, structlog.BoundLogger] = {}

    @classmethod
    def configure_logging(
        cls, level: str = "INFO", format: str = "json", config: Optional[LoggingConfig] = None
    ) -> None:
        """
        Configure structlog once for the process.

        Args:
            level: Log level (case-insensitive)
            format: "json" or "console" (case-insensitive)
            config: Full LoggingConfig; overrides level and format

        Raises:
            ValueError: If level or format is invalid
            RuntimeError: If logging is already configured
        """
        if cls._configured:
            raise RuntimeError("Logging already configured")

        cfg = config if config is not None else LoggingConfig(level=level, format=format)

        structlog.configure(
            processors=cls._setup_processors(cfg),
            wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, cfg.level)),
            context_class=dict,
            logger_factory=structlog.PrintLoggerFactory(file=cfg.output_stream),
            cache_logger_on_first_use=True,
        )

        cls._config = cfg
        cls._log_level = cfg.level
        cls._configured = True

    @classmethod
    def use_existing_configuration(cls) -> None:
        """
        Hand out loggers through the structlog configuration already active
        in the process (typically the host application's) instead of
        installing archmap's processors.

        Raises:
            RuntimeError: If logging is already configured
        """
        if cls._configured:
            raise RuntimeError("Logging already configured")

        cls._config = None
        cls._configured = True

    @classmethod
    def is_configured(cls) -> bool:
        return cls._configured

    @classmethod
    def get_logger(cls, name: str) -> structlog.BoundLogger:
        """
        Return the cached logger for a module.

        Raises:
            RuntimeError: If logging is not configured yet
            ValueError: If name is empty or too long
        """
        if not cls._configured:
            raise RuntimeError("Logging not configured. Call configure_logging() first.")
        if not name:
            raise ValueError("Logger name cannot be empty")
        if len(name) > MAX_LOGGER_NAME_LENGTH:
            raise ValueError(f"Logger name exceeds maximum length ({MAX_LOGGER_NAME_LENGTH})")

        if name not in cls._loggers:
            cls._loggers[name] = structlog.get_logger(name)
        return cls._loggers[name]

    @staticmethod
    @contextmanager
    def run_context(correlation_id: str, **values: Any) -> Iterator[None]:
        """
        Bind ``correlation_id`` (and any extra values) to every log line
        emitted inside the block, from any module.
        """
        with structlog.contextvars.bound_contextvars(correlation_id=correlation_id, **values):
            yield

    @classmethod
    def log_error(
        cls,
        error: Exception,
        correlation_id: str,
        context: Optional[Dict[str, Any]] = None,
        logger_name: str = "archmap",
        include_stack_trace: bool = True,
    ) -> None:
        """
        Log an exception with its archmap error details.

        ArchmapError instances contribute their ``to_dict()`` fields
        (error code, details, wrapped exception).

        Raises:
            ValueError: If correlation_id is empty
        """
        if not correlation_id:
            raise ValueError("correlation_id cannot be empty")

        to_dict = getattr(error, "to_dict", None)
        log_context: Dict[str, Any] = dict(to_dict()) if callable(to_dict) else {}
        log_context.pop("message", None)
        log_context.update(
            error_type=type(error).__name__,
            error_message=str(error),
            correlation_id=correlation_id,
        )
        if context:
            log_context.update(context)
        if include_stack_trace and error.__traceback__ is not None:
            log_context["stack_trace"] = "".join(
                traceback.format_exception(type(error), error, error.__traceback__)
            )

        cls.get_logger(logger_name).error("error_occurred", **log_context)

    @classmethod
    def log_performance(
        cls,
        operation: str,
        duration_ms: float,
        correlation_id: str,
        metadata: Optional[Dict[str, Any]] = None,
        logger_name: str = "archmap",
    ) -> None:
        """
        Log the duration of an operation.

        When ``metadata`` carries a positive ``files`` count, the file
        throughput is added as ``files_per_second``.

        Raises:
            ValueError: If operation/correlation_id is empty or duration_ms < 0
        """
        if not operation:
            raise ValueError("operation cannot be empty")
        if not correlation_id:
            raise ValueError("correlation_id cannot be empty")
        if duration_ms < 0:
            raise ValueError("duration_ms cannot be negative")

        context: Dict[str, Any] = dict(metadata or {})
        files = context.get("files")
        if isinstance(files, int) and files > 0 and duration_ms > 0:
            context["files_per_second"] = round(files / (duration_ms / 1000), 1)

        cls.get_logger(logger_name).info(
            "performance_metric",
            operation=operation,
            duration_ms=round(duration_ms, 3),
            correlation_id=correlation_id,
            **context,
        )

    @staticmethod
    def _setup_processors(config: LoggingConfig) -> list[Processor]:
        processors: list[Processor] = [
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
        ]

        if config.format == "console":
            processors.append(structlog.dev.ConsoleRenderer(colors=False))
        else:
            processors.append(_normalize_event_values)
            processors.append(structlog.processors.JSONRenderer(sort_keys=True))

        return processors


__all__ = ["LOG_FORMATS", "LOG_LEVELS", "LoggingConfig", "LoggingService", "to_loggable"]
