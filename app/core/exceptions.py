# ABOUTME: Exception hierarchy for request validation failures and internal faults
# ABOUTME: Each validation error carries its error kind, HTTP status and debugging context

from typing import Any, ClassVar


class SteamConnectError(Exception):
    """Base exception for all Steam Connect redirector errors."""

    error_kind: ClassVar[str] = "InternalFault"
    status_code: ClassVar[int] = 500
    default_message: ClassVar[str] = "Internal server error."

    def __init__(
        self,
        message: str | None = None,
        error_code: str | None = None,
        context: dict[str, Any] | None = None,
        original_error: Exception | None = None
    ) -> None:
        """Initialize base exception with context.

        Args:
            message: Human-readable error message, defaults to the class message
            error_code: Machine-readable error code for programmatic handling
            context: Additional context information for debugging
            original_error: Original exception that caused this error
        """
        message = message or self.default_message
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.context = context or {}
        self.original_error = original_error

    def __str__(self) -> str:
        """Return string representation of error."""
        parts = [self.message]
        if self.error_code:
            parts.append(f"(Code: {self.error_code})")
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            parts.append(f"[{context_str}]")
        return " ".join(parts)


# Request Validation Errors
class RedirectValidationError(SteamConnectError):
    """Base exception for rejected redirect requests (client input errors)."""

    error_kind = "ValidationError"
    status_code = 400
    default_message = "Invalid request."


class MissingParameterError(RedirectValidationError):
    """Raised when the 'ip' or 'port' query parameter is absent or empty."""

    error_kind = "MissingParameter"
    default_message = "Missing 'ip' and 'port' parameters."


class InvalidAddressSyntaxError(RedirectValidationError):
    """Raised when 'ip' is not a dotted-quad IPv4 address."""

    error_kind = "InvalidAddressSyntax"
    default_message = "'ip' parameter must be a valid IP address."


class ForbiddenRangeError(RedirectValidationError):
    """Raised when 'ip' falls inside a private or reserved block."""

    error_kind = "ForbiddenRange"
    default_message = "Redirecting to private or reserved IP addresses is not allowed."


class InvalidPortSyntaxError(RedirectValidationError):
    """Raised when 'port' is not made of decimal digits only."""

    error_kind = "InvalidPortSyntax"
    default_message = "'port' parameter must be a valid port number."


class PortOutOfRangeError(RedirectValidationError):
    """Raised when 'port' is outside 1-65535."""

    error_kind = "PortOutOfRange"
    default_message = "'port' parameter must be between 1 and 65535."


# Internal Errors
class InternalFaultError(SteamConnectError):
    """Raised for any unanticipated failure while handling a request."""

    error_kind = "InternalFault"
    status_code = 500
    default_message = "Internal server error."


class ConfigurationError(InternalFaultError):
    """Raised when a setting is invalid; reported to clients as a generic internal fault."""


# Error handling utilities
def wrap_external_error(
    original_error: Exception,
    service_error_class: type[SteamConnectError],
    message: str | None = None,
    error_code: str | None = None,
    context: dict[str, Any] | None = None
) -> SteamConnectError:
    """Wrap unexpected exceptions in a redirector error type.

    Args:
        original_error: The original exception to wrap
        service_error_class: The error class to use
        message: Human-readable error message
        error_code: Machine-readable error code
        context: Additional context for debugging

    Returns:
        Redirector error with original error context
    """
    enhanced_context = context or {}
    enhanced_context.update({
        "original_error_type": type(original_error).__name__,
        "original_error_message": str(original_error)
    })

    return service_error_class(
        message=message,
        error_code=error_code,
        context=enhanced_context,
        original_error=original_error
    )


def create_error_context(**kwargs: Any) -> dict[str, Any]:
    """Create error context dictionary with non-None values.

    Args:
        **kwargs: Context key-value pairs

    Returns:
        Dictionary with non-None values only
    """
    return {k: v for k, v in kwargs.items() if v is not None}
