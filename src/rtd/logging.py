"""
Structured logging configuration for the RTD provider.

Provides consistent JSON logging with per-auction correlation IDs,
structured fields, and configurable log levels.
"""

import logging
import os
import sys
import time
import uuid
from contextvars import ContextVar
from typing import Any, TextIO

import structlog

# Context variable for the auction request ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def get_request_id() -> str:
    """Get the current request ID from context."""
    return request_id_var.get()


def generate_request_id() -> str:
    """Generate a new unique request ID."""
    return f"{int(time.time())}-{uuid.uuid4().hex[:8]}"


def add_request_id(
    logger: structlog.typing.WrappedLogger,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Processor to add request ID to log entries."""
    request_id = get_request_id()
    if request_id:
        event_dict["request_id"] = request_id
    return event_dict


def add_service_info(
    logger: structlog.typing.WrappedLogger,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Processor to add service info to log entries."""
    event_dict["service"] = "rtd"
    return event_dict


def configure_logging(
    level: str = "INFO",
    format: str = "json",
    show_timestamps: bool = True,
    stream: TextIO | None = None,
) -> None:
    """
    Configure structured logging for the provider.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        format: Output format ('json' or 'console')
        show_timestamps: Whether to include timestamps
        stream: Output stream (stdout by default). When given, replaces
            any handler installed by an earlier call.
    """
    level = os.getenv("LOG_LEVEL", level).upper()
    format = os.getenv("LOG_FORMAT", format).lower()

    force = stream is not None
    stream = stream or sys.stdout
    logging.basicConfig(
        format="%(message)s",
        stream=stream,
        level=getattr(logging, level, logging.INFO),
        force=force,
    )

    processors: list[structlog.typing.Processor] = [
        structlog.contextvars.merge_contextvars,
        add_request_id,
        add_service_info,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if show_timestamps:
        processors.insert(0, structlog.processors.TimeStamper(fmt="iso"))

    if format == "console":
        processors.append(
            structlog.dev.ConsoleRenderer(colors=stream.isatty())
        )
    else:
        processors.append(structlog.processors.JSONRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str = __name__) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structured logger
    """
    return structlog.get_logger(name)


# Pre-configured loggers for different components
def collector_logger() -> structlog.stdlib.BoundLogger:
    """Get logger for cohort collection."""
    return get_logger("rtd.collector")


def config_logger() -> structlog.stdlib.BoundLogger:
    """Get logger for module config resolution."""
    return get_logger("rtd.config")


def storage_logger() -> structlog.stdlib.BoundLogger:
    """Get logger for signal store reads."""
    return get_logger("rtd.storage")


def provider_logger() -> structlog.stdlib.BoundLogger:
    """Get logger for auction lifecycle events."""
    return get_logger("rtd.provider")


def bidder_logger(bidder_code: str) -> structlog.stdlib.BoundLogger:
    """Get logger for bidder-specific events."""
    return get_logger("rtd.bidder").bind(bidder=bidder_code)


class LogContext:
    """
    Context manager for auction-scoped logging.

    Sets the request ID (the auction id when the host supplies one) and
    binds extra fields such as the enrichment pass. Contexts nest: on
    exit the enclosing request ID and bindings are restored.
    """

    def __init__(self, request_id: str | None = None, **initial_context: Any):
        """
        Initialize log context.

        Args:
            request_id: Optional request ID (generated if not provided)
            **initial_context: Additional context to bind
        """
        self.request_id = request_id or generate_request_id()
        self.initial_context = initial_context
        self.token = None
        self.bound_tokens: dict[str, Any] = {}

    def __enter__(self) -> "LogContext":
        """Enter context and set request ID."""
        self.token = request_id_var.set(self.request_id)
        if self.initial_context:
            self.bound_tokens = structlog.contextvars.bind_contextvars(**self.initial_context)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit context and restore the enclosing request ID."""
        request_id_var.reset(self.token)
        if self.bound_tokens:
            structlog.contextvars.reset_contextvars(**self.bound_tokens)
            self.bound_tokens = {}


# Initialize with defaults on module load
configure_logging()
