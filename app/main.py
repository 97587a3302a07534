import logging

from fastapi import FastAPI, Request
from fastapi.responses import RedirectResponse, Response

from app.core.error_handling import build_error_response, internal_fault_response
from app.core.security_headers import SecurityHeadersMiddleware
from app.core.structured_logging import log_error_with_context, setup_structured_logging
from app.services.redirect_service import evaluate_request

setup_structured_logging()

logger = logging.getLogger(__name__)

SUPPORTED_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

app = FastAPI(
    title="Steam Connect Redirector",
    description="Validates a public IPv4 server address and redirects to steam://connect",
    version="1.0.0",
    docs_url=None,
    redoc_url=None,
    openapi_url=None,
)

app.add_middleware(SecurityHeadersMiddleware)


def first_query_value(request: Request, name: str) -> str | None:
    """Return the first value of a query parameter, or None when absent."""
    values = request.query_params.getlist(name)
    return values[0] if values else None


@app.api_route("/{path:path}", methods=SUPPORTED_METHODS)
async def connect_redirect(request: Request) -> Response:
    """
    Redirect to steam://connect/<ip>:<port> for a public IPv4 server.

    Every method and path is handled the same way; only the 'ip' and
    'port' query parameters are read.

    Returns:
        A 301 redirect on success, or a JSON error response
    """
    try:
        outcome = evaluate_request(
            first_query_value(request, "ip"),
            first_query_value(request, "port"),
        )

        if outcome.error is not None:
            return build_error_response(outcome.error)

        return RedirectResponse(url=outcome.target, status_code=outcome.status_code)  # type: ignore[arg-type]

    except Exception as e:
        # Don't expose internal error details
        log_error_with_context(
            logger, e, "main", "connect_redirect",
            method=request.method,
            path=request.url.path
        )
        return internal_fault_response()
