# ABOUTME: Port validation utility for redirect targets
# ABOUTME: Accepts digit-only port strings within 1-65535 and returns the canonical integer

import re

from app.core.exceptions import (
    InvalidPortSyntaxError,
    PortOutOfRangeError,
    RedirectValidationError,
)

MIN_PORT = 1
MAX_PORT = 65535

_PORT_PATTERN = re.compile(r"[0-9]+")
_MAX_PORT_DIGITS = len(str(MAX_PORT))


def is_port_syntax_valid(port: str | None) -> bool:
    """Check that a port string is one or more ASCII digits and nothing else."""
    return isinstance(port, str) and _PORT_PATTERN.fullmatch(port) is not None


def validate_port_strict(port: str | None) -> int:
    """
    Validate a port string and return its canonical integer value.

    Leading zeros are accepted and dropped, so "027015" yields 27015.

    Args:
        port: The raw port string

    Returns:
        The port as an integer in 1-65535

    Raises:
        InvalidPortSyntaxError: If the string is not all digits
        PortOutOfRangeError: If the value is outside 1-65535
    """
    if port is None or not is_port_syntax_valid(port):
        raise InvalidPortSyntaxError(
            error_code="PORT_SYNTAX_INVALID",
            context={"port": port}
        )

    significant = port.lstrip("0")
    # Anything longer than five significant digits cannot be a port
    if len(significant) > _MAX_PORT_DIGITS:
        raise PortOutOfRangeError(
            error_code="PORT_OUT_OF_RANGE",
            context={"port_digits": len(significant)}
        )

    value = int(significant) if significant else 0
    if not MIN_PORT <= value <= MAX_PORT:
        raise PortOutOfRangeError(
            error_code="PORT_OUT_OF_RANGE",
            context={"port": value}
        )

    return value


def is_port_valid(port: str | None) -> bool:
    """Check if a port string is valid (boolean return)."""
    try:
        validate_port_strict(port)
        return True
    except RedirectValidationError:
        return False
