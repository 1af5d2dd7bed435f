"""Structured logging with correlation context."""

import logging
import uuid
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Optional

from .logging_config import setup_logger


class LogLevel(Enum):
    """Log levels for structured logging."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


@dataclass
class LogContext:
    """
    Fields attached to every line logged while handling one notification.

    The correlation id is the notification's event id when the trigger
    provides one, so all lines of one upload can be found together.
    """

    correlation_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    operation: str = ""
    component: str = ""
    metadata: Dict[str, Any] = field(default_factory=dict)

    def with_operation(self, operation: str) -> "LogContext":
        """Copy of this context for a nested operation of the same event."""
        return replace(self, operation=operation, metadata=dict(self.metadata))

    def with_metadata(self, **kwargs) -> "LogContext":
        """Copy of this context carrying extra fields such as the variant name."""
        return replace(self, metadata={**self.metadata, **kwargs})


def format_message(message: str, context: Optional[LogContext] = None, **kwargs) -> str:
    """Render a message as ``[operation] [correlation_id] message (k=v, ...)``."""
    if context is None:
        if not kwargs:
            return message
        return f"{message} ({', '.join(f'{k}={v}' for k, v in kwargs.items())})"

    formatted_message = f"[{context.correlation_id}] {message}"
    if context.operation:
        formatted_message = f"[{context.operation}] {formatted_message}"

    fields = {**context.metadata, **kwargs}
    if fields:
        metadata_str = ", ".join(f"{k}={v}" for k, v in fields.items())
        formatted_message = f"{formatted_message} ({metadata_str})"
    return formatted_message


class StructuredLogger:
    """Structured logger with context support."""

    def __init__(self, name: str, level: Optional[LogLevel] = None):
        self._logger = setup_logger(name, level.value if level else None)

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def _log(
        self,
        level: LogLevel,
        message: str,
        context: Optional[LogContext] = None,
        **kwargs,
    ):
        getattr(self._logger, level.value.lower())(format_message(message, context, **kwargs))

    def debug(self, message: str, context: Optional[LogContext] = None, **kwargs):
        """Log debug message."""
        self._log(LogLevel.DEBUG, message, context, **kwargs)

    def info(self, message: str, context: Optional[LogContext] = None, **kwargs):
        """Log info message."""
        self._log(LogLevel.INFO, message, context, **kwargs)

    def warning(self, message: str, context: Optional[LogContext] = None, **kwargs):
        """Log warning message."""
        self._log(LogLevel.WARNING, message, context, **kwargs)

    def error(self, message: str, context: Optional[LogContext] = None, **kwargs):
        """Log error message."""
        self._log(LogLevel.ERROR, message, context, **kwargs)


def create_logger(name: str = "image-variants", level: Optional[LogLevel] = None) -> StructuredLogger:
    """Create a structured logger; the level defaults to LOG_LEVEL or INFO."""
    return StructuredLogger(name, level)
