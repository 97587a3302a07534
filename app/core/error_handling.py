# ABOUTME: Error handling utilities for consistent exception management and error responses
# ABOUTME: Converts redirector errors into structured JSON responses and guards request handlers

from collections.abc import Callable
import functools
import logging
from typing import Any, TypeVar

from fastapi.responses import JSONResponse

from app.core.exceptions import (
    InternalFaultError,
    SteamConnectError,
    wrap_external_error,
)

logger = logging.getLogger(__name__)

F = TypeVar('F', bound=Callable[..., Any])

JSON_CONTENT_TYPE = "application/json; charset=utf-8"


def error_payload(error: SteamConnectError) -> dict[str, str]:
    """Build the response body for an error; never includes debugging context."""
    return {"error": error.message, "kind": error.error_kind}


def build_error_response(error: SteamConnectError) -> JSONResponse:
    """Render a redirector error as a JSON response with its status code."""
    return JSONResponse(
        status_code=error.status_code,
        content=error_payload(error),
        media_type=JSON_CONTENT_TYPE,
    )


def internal_fault_response() -> JSONResponse:
    """Generic 500 response that exposes no internal details."""
    return build_error_response(InternalFaultError())


def handle_exceptions(
    *,
    log_errors: bool = True,
    error_context: dict[str, Any] | None = None
) -> Callable[[F], F]:
    """Decorator that converts unexpected exceptions into InternalFaultError.

    Redirector errors pass through untouched; anything else is logged and
    re-raised wrapped so callers only ever see SteamConnectError.

    Args:
        log_errors: Whether to log unexpected exceptions
        error_context: Additional context to include in error logs

    Returns:
        Decorated function with exception handling
    """
    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return func(*args, **kwargs)
            except SteamConnectError:
                raise
            except Exception as e:
                context = dict(error_context or {})
                context.update({
                    "function": func.__name__,
                    "exception_type": type(e).__name__
                })
                if log_errors:
                    logger.error(
                        f"Unexpected error in {func.__name__}: {e}",
                        extra={"context": context},
                        exc_info=True
                    )
                raise wrap_external_error(
                    e, InternalFaultError,
                    error_code="INTERNAL_FAULT",
                    context=context
                ) from e

        return wrapper  # type: ignore
    return decorator
