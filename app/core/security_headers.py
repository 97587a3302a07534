# ABOUTME: Middleware attaching the fixed security header set to every response
# ABOUTME: Also converts any exception escaping a route into a generic 500 response

from collections.abc import Callable
import logging
from types import MappingProxyType
from typing import Any

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from app.core.error_handling import internal_fault_response
from app.core.structured_logging import (
    bind_request_id,
    log_error_with_context,
    reset_request_id,
)

logger = logging.getLogger(__name__)

SECURITY_HEADERS: MappingProxyType[str, str] = MappingProxyType({
    "X-Content-Type-Options": "nosniff",
    "Content-Security-Policy": "default-src 'none';",
    "Referrer-Policy": "no-referrer",
    "X-Frame-Options": "DENY",
    "Strict-Transport-Security": "max-age=31536000; includeSubDomains; preload",
})


def apply_security_headers(response: Any) -> Any:
    """Set every security header on a response, overriding existing values."""
    for name, value in SECURITY_HEADERS.items():
        response.headers[name] = value
    return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware adding security headers and a last-resort fault barrier."""

    async def dispatch(self, request: Request, call_next: Callable) -> Any:
        """Process request with a log request ID and security headers."""
        token = bind_request_id()
        try:
            response = await call_next(request)
        except Exception as e:
            log_error_with_context(
                logger, e, "security_headers_middleware", "dispatch",
                method=request.method,
                path=request.url.path
            )
            response = internal_fault_response()
        finally:
            reset_request_id(token)

        return apply_security_headers(response)
