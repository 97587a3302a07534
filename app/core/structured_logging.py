# ABOUTME: Request-scoped logging with a per-request ID and optional JSON output
# ABOUTME: Log records keep the caller's location so JSON lines point at the real call site

from contextvars import ContextVar, Token
import json
import logging
from typing import Any
import uuid

from app.core.config import config

# Identifies the request a log record belongs to; never sent to clients
request_id: ContextVar[str | None] = ContextVar('request_id', default=None)

# Attributes every LogRecord carries; anything else arrived through ``extra``
_STANDARD_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {
    'message', 'asctime', 'context', 'request_id'
}


def bind_request_id(rid: str | None = None) -> Token:
    """Attach a request ID to the current context and return the reset token."""
    return request_id.set(rid or uuid.uuid4().hex)


def reset_request_id(token: Token) -> None:
    request_id.reset(token)


class RequestIdFilter(logging.Filter):
    """Stamp each record with the ID of the request being handled."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id.get()
        return True


class JsonLogFormatter(logging.Formatter):
    """One JSON object per record: location, request ID, context and exception."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        rid = getattr(record, 'request_id', None) or request_id.get()
        if rid:
            entry["request_id"] = rid

        context = getattr(record, 'context', None)
        if context:
            entry["context"] = context

        extras = {k: v for k, v in vars(record).items() if k not in _STANDARD_RECORD_ATTRS}
        if extras:
            entry["extra"] = extras

        if record.exc_info and record.exc_info[0] is not None:
            entry["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": self.formatException(record.exc_info),
            }

        return json.dumps(entry, default=str, ensure_ascii=False)


def setup_structured_logging() -> None:
    """Install a single console handler on the root logger per LOG_* settings."""
    logging_config = config.get_logging_config()
    level = getattr(logging, logging_config.level, logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.addFilter(RequestIdFilter())
    if logging_config.enable_structured:
        console_handler.setFormatter(JsonLogFormatter())
    else:
        console_handler.setFormatter(logging.Formatter(logging_config.format))

    root_logger.addHandler(console_handler)


def log_service_operation(
    logger: logging.Logger,
    service_name: str,
    operation: str,
    level: int = logging.INFO,
    **context: Any
) -> None:
    """Log ``<service>.<operation>`` with structured context.

    The record is attributed to the function that called this helper.
    """
    logger.log(
        level,
        f"{service_name}.{operation}",
        extra={"context": {"service": service_name, "operation": operation, **context}},
        stacklevel=2,
    )


def log_error_with_context(
    logger: logging.Logger,
    error: BaseException,
    service_name: str,
    operation: str,
    **context: Any
) -> None:
    """Log a failure once at ERROR, with its traceback and the caller's location.

    Args:
        logger: Logger instance to use
        error: Exception that occurred; its own traceback is logged
        service_name: Name of the component where the error occurred
        operation: Operation that failed
        **context: Additional context to include
    """
    logger.error(
        f"Error in {service_name}.{operation}: {error}",
        extra={"context": {
            "service": service_name,
            "operation": operation,
            "error_type": type(error).__name__,
            **context,
        }},
        exc_info=error,
        stacklevel=2,
    )
