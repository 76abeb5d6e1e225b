"""Logging configuration for the phone directory."""

import json
import logging
import logging.config
import sys
import uuid
from contextvars import ContextVar
from typing import Any, Dict, Optional

from .settings import settings

# Context variable for the directory session ID
session_id: ContextVar[Optional[str]] = ContextVar('session_id', default=None)

_RESERVED_ATTRS = frozenset([
    'name', 'msg', 'args', 'levelname', 'levelno', 'pathname', 'filename',
    'module', 'lineno', 'funcName', 'created', 'msecs', 'relativeCreated',
    'thread', 'threadName', 'processName', 'process', 'taskName', 'message',
    'exc_info', 'exc_text', 'stack_info', 'session_id', 'subscriber_id',
    'operation', 'error',
])


class SessionIdFormatter(logging.Formatter):
    """Formatter that includes the session ID in log records."""

    def format(self, record: logging.LogRecord) -> str:
        record.session_id = session_id.get() or "N/A"
        return super().format(record)


class StructuredFormatter(SessionIdFormatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as a single JSON line."""
        log_entry = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "session_id": session_id.get() or "N/A",
            "message": record.getMessage(),
        }

        if hasattr(record, 'subscriber_id'):
            log_entry['subscriber_id'] = record.subscriber_id
        if hasattr(record, 'operation'):
            log_entry['operation'] = record.operation
        if hasattr(record, 'error'):
            log_entry['error'] = record.error

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and not key.startswith('_'):
                log_entry[key] = value

        if record.exc_info:
            log_entry['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_entry, ensure_ascii=False, default=str)


def get_logging_config() -> Dict[str, Any]:
    """Get logging configuration based on settings."""

    if settings.log_format == "json":
        formatter_config = {
            "()": "phone_directory.config.logging.StructuredFormatter",
            "datefmt": "%Y-%m-%dT%H:%M:%S",
        }
    else:
        formatter_config = {
            "()": "phone_directory.config.logging.SessionIdFormatter",
            "format": "%(asctime)s - %(session_id)s - %(name)s - %(levelname)s - %(message)s",
            "datefmt": "%Y-%m-%d %H:%M:%S",
        }

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": formatter_config,
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "stream": sys.stderr,
                "formatter": "default",
                "level": settings.log_level,
            },
        },
        "root": {
            "level": settings.log_level,
            "handlers": ["console"],
        },
        "loggers": {
            "phone_directory": {
                "level": settings.log_level,
                "handlers": ["console"],
                "propagate": False,
            },
        },
    }


def setup_logging() -> None:
    """Setup logging configuration."""
    logging.config.dictConfig(get_logging_config())


def generate_session_id() -> str:
    """Generate a new session ID."""
    return str(uuid.uuid4())


def set_session_id(value: str) -> None:
    """Set session ID in context."""
    session_id.set(value)


def get_session_id() -> Optional[str]:
    """Get current session ID from context."""
    return session_id.get()


class LoggingService:
    """Consistent operation logging across the directory."""

    def __init__(self, logger_name: str):
        self.logger = logging.getLogger(logger_name)

    def log_operation(self, level: str, message: str, subscriber_id: Optional[str] = None,
                      operation: Optional[str] = None, error: Optional[str] = None, **kwargs) -> None:
        """Log an operation with the standard extra fields.

        Args:
            level: Log level (info, warning, error, debug)
            message: Log message
            subscriber_id: ID of the subscriber involved, if any
            operation: Operation name
            error: Error message if applicable
            **kwargs: Additional fields to log
        """
        extra = {}
        if subscriber_id:
            extra['subscriber_id'] = subscriber_id
        if operation:
            extra['operation'] = operation
        if error:
            extra['error'] = error

        extra.update(kwargs)

        log_method = getattr(self.logger, level.lower())
        log_method(message, extra=extra)

    def log_crud_operation(self, operation: str, success: bool, subscriber_id: Optional[str] = None,
                           error: Optional[str] = None, **kwargs) -> None:
        """Log the outcome of a mutating directory operation.

        A failure carrying an error message is logged as a warning, since
        rejected input is expected and recoverable.
        """
        if success:
            self.log_operation(
                "info",
                f"{operation.replace('_', ' ').capitalize()} completed successfully",
                subscriber_id=subscriber_id,
                operation=operation,
                **kwargs
            )
        else:
            self.log_operation(
                "warning" if error else "info",
                f"{operation.replace('_', ' ').capitalize()} failed",
                subscriber_id=subscriber_id,
                operation=operation,
                error=error,
                **kwargs
            )

    def log_error(self, message: str, error: Exception, subscriber_id: Optional[str] = None,
                  operation: Optional[str] = None, **kwargs) -> None:
        """Log an exception with its type."""
        self.log_operation(
            "error",
            message,
            subscriber_id=subscriber_id,
            operation=operation,
            error=str(error),
            error_type=type(error).__name__,
            **kwargs
        )
