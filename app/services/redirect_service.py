# ABOUTME: Redirect decision service validating ip/port pairs and building steam:// targets
# ABOUTME: Runs the fixed validation chain and returns a redirect-or-rejection outcome

from dataclasses import dataclass
import logging

from app.core.config import RedirectConfig, config
from app.core.error_handling import handle_exceptions
from app.core.exceptions import (
    MissingParameterError,
    SteamConnectError,
)
from app.core.structured_logging import log_error_with_context, log_service_operation
from app.utils.ip_validator import validate_ipv4_strict
from app.utils.port_validator import validate_port_strict

logger = logging.getLogger(__name__)

SERVICE_NAME = "redirect_service"


@dataclass(frozen=True)
class RedirectOutcome:
    """Outcome of a single redirect request: either a redirect or a rejection."""
    is_redirect: bool
    status_code: int
    target: str | None = None
    error: SteamConnectError | None = None

    def __post_init__(self) -> None:
        if self.is_redirect and (self.target is None or self.error is not None):
            raise ValueError("A redirect outcome needs a target and no error")
        if not self.is_redirect and (self.error is None or self.target is not None):
            raise ValueError("A rejected outcome needs an error and no target")

    @property
    def error_kind(self) -> str | None:
        return self.error.error_kind if self.error else None

    @property
    def message(self) -> str | None:
        return self.error.message if self.error else None

    @classmethod
    def redirect(cls, target: str, status_code: int) -> "RedirectOutcome":
        return cls(is_redirect=True, status_code=status_code, target=target)

    @classmethod
    def rejected(cls, error: SteamConnectError) -> "RedirectOutcome":
        return cls(is_redirect=False, status_code=error.status_code, error=error)


def build_connect_target(ip: str, port: int) -> str:
    """Build the steam://connect URI from a validated address and canonical port."""
    return f"{config.STEAM_CONNECT_PREFIX}{ip}:{port}"


@handle_exceptions(log_errors=False, error_context={"service": SERVICE_NAME})
def load_redirect_config() -> RedirectConfig:
    """Read the redirect settings; a misconfiguration surfaces as an internal fault."""
    return config.get_redirect_config()


@handle_exceptions(log_errors=False, error_context={"service": SERVICE_NAME})
def resolve_connect_target(ip: str | None, port: str | None) -> str:
    """
    Validate the request parameters and return the redirect target.

    Checks run in a fixed order and the first failure wins: presence,
    address syntax, reserved ranges, port syntax, port range.

    Args:
        ip: Raw 'ip' query parameter
        port: Raw 'port' query parameter

    Returns:
        The steam://connect/<ip>:<port> target URI

    Raises:
        RedirectValidationError: Subclass naming the failed check
        InternalFaultError: For any unexpected failure
    """
    if not ip or not port:
        raise MissingParameterError(
            error_code="PARAMETER_MISSING",
            context={"ip_present": bool(ip), "port_present": bool(port)}
        )

    address = validate_ipv4_strict(ip)
    port_number = validate_port_strict(port)
    return build_connect_target(address, port_number)


def evaluate_request(ip: str | None, port: str | None) -> RedirectOutcome:
    """
    Decide how to answer a redirect request.

    Never raises: every failure, expected or not, becomes a rejected outcome.

    Args:
        ip: Raw 'ip' query parameter
        port: Raw 'port' query parameter

    Returns:
        RedirectOutcome describing the response to send
    """
    try:
        target = resolve_connect_target(ip, port)
        redirect_config = load_redirect_config()
    except SteamConnectError as e:
        if e.status_code >= 500:
            log_error_with_context(
                logger, e.original_error or e, SERVICE_NAME, "evaluate_request",
                error_kind=e.error_kind,
                error_code=e.error_code,
                **e.context
            )
        else:
            log_service_operation(
                logger, SERVICE_NAME, "rejected",
                error_kind=e.error_kind,
                error_code=e.error_code,
                **e.context
            )
        return RedirectOutcome.rejected(e)

    log_service_operation(
        logger, SERVICE_NAME, "redirect",
        level=logging.DEBUG,
        target=target,
        status_code=redirect_config.status_code
    )
    return RedirectOutcome.redirect(target, redirect_config.status_code)
