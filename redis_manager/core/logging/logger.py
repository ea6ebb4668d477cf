"""
Structured Logging Module using structlog

This module provides structured logging with:
- Operation ID correlation across lock, retry and backend events
- Stage identifiers for each manager operation
- JSON formatting for log aggregation
- Context processors for automatic field injection

Architectural Decision: structlog for production logging
- Context-aware logging with automatic field injection
- JSON output for log aggregation
- Async-safe correlation through context variables
"""

import logging
import sys
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone

import structlog
from structlog.types import EventDict, WrappedLogger

from redis_manager.core.config.settings import get_settings

# Context variable for the operation ID (task-local storage)
operation_id_ctx: ContextVar[str | None] = ContextVar("operation_id", default=None)


def add_operation_id(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """
    Add operation ID to log event from context variable.

    Every log line emitted while a manager operation is running carries the
    same ``operation_id``, including lock and retry events.
    """
    operation_id = get_operation_id()
    if operation_id:
        event_dict["operation_id"] = operation_id
    return event_dict


def add_timestamp(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Add ISO timestamp to log event."""
    event_dict["timestamp"] = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
    return event_dict


def add_log_level_name(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Uppercase the log level injected by structlog."""
    if "level" in event_dict:
        event_dict["level"] = event_dict["level"].upper()
    return event_dict


def setup_logging(log_level: str | None = None, log_format: str | None = None) -> None:
    """
    Setup structured logging with structlog.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Log format ('json' or 'console')
    """
    settings = get_settings()

    # Use settings if not provided
    log_level = log_level or settings.logging.LOG_LEVEL
    log_format = log_format or settings.logging.LOG_FORMAT

    # Configure standard library logging
    logging.basicConfig(
        format="%(message)s", stream=sys.stdout, level=getattr(logging, log_level.upper())
    )

    # Choose renderer based on format
    if log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            add_operation_id,
            add_timestamp,
            structlog.stdlib.add_log_level,
            add_log_level_name,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger instance.

    Usage:
        logger = get_logger(__name__)
        logger.info("message", key="value", stage=Stage.ADD)
    """
    return structlog.get_logger(name)


def get_operation_id() -> str | None:
    """Get current operation ID from context."""
    return operation_id_ctx.get()


@contextmanager
def operation_scope(operation_id: str | None = None) -> Iterator[str]:
    """
    Bind an operation ID for the duration of a block.

    Nested scopes keep the outer ID so one caller-level operation shares a
    single correlation ID across its lock, retry and backend events.

    Usage:
        with operation_scope() as operation_id:
            logger.info("Key added")  # carries operation_id
    """
    current = get_operation_id()
    if current is not None and operation_id is None:
        yield current
        return

    operation_id = operation_id or uuid.uuid4().hex
    token = operation_id_ctx.set(operation_id)
    try:
        yield operation_id
    finally:
        operation_id_ctx.reset(token)
