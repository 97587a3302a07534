# ABOUTME: IPv4 address validation and private/reserved range classification
# ABOUTME: Validates dotted-quad syntax and blocks redirects to non-routable networks

from dataclasses import dataclass
import re

from app.core.exceptions import (
    ForbiddenRangeError,
    InvalidAddressSyntaxError,
    RedirectValidationError,
)

IPV4_OCTET_COUNT = 4
IPV4_MAX_OCTET = 255
IPV4_ALL_ONES = 0xFFFFFFFF

_OCTET_PATTERN = re.compile(r"[0-9]+")


@dataclass(frozen=True)
class CIDRBlock:
    """An IPv4 network given as a 32-bit base address and a prefix length."""
    base: int
    prefix_length: int
    label: str

    def __post_init__(self) -> None:
        if not 0 <= self.prefix_length <= 32:
            raise ValueError(f"Prefix length must be between 0 and 32, got {self.prefix_length}")
        if not 0 <= self.base <= IPV4_ALL_ONES:
            raise ValueError(f"Base address must fit in 32 bits, got {self.base}")

    @classmethod
    def from_notation(cls, notation: str, label: str) -> "CIDRBlock":
        """Build a block from 'a.b.c.d/len' notation."""
        address, _, prefix = notation.partition("/")
        octets = parse_ipv4(address)
        if octets is None or not prefix.isdigit():
            raise ValueError(f"Invalid CIDR notation: {notation!r}")
        return cls(base=octets_to_int(octets), prefix_length=int(prefix), label=label)

    @property
    def mask(self) -> int:
        return prefix_mask(self.prefix_length)

    @property
    def notation(self) -> str:
        return f"{int_to_ipv4(self.base)}/{self.prefix_length}"

    def contains(self, address: int) -> bool:
        """Check whether a 32-bit address shares this block's network bits."""
        return (address & self.mask) == (self.base & self.mask)


def prefix_mask(prefix_length: int) -> int:
    """Return the 32-bit netmask with the top ``prefix_length`` bits set.

    /0 yields 0 and /32 yields 0xFFFFFFFF.
    """
    if not 0 <= prefix_length <= 32:
        raise ValueError(f"Prefix length must be between 0 and 32, got {prefix_length}")
    return (IPV4_ALL_ONES << (32 - prefix_length)) & IPV4_ALL_ONES


def parse_ipv4(ip: str | None) -> tuple[int, int, int, int] | None:
    """
    Parse a dotted-quad IPv4 string into its four octets.

    Each segment must be non-empty, ASCII digits only, at most 255 and
    without a leading zero (except the single digit "0").

    Args:
        ip: The address string to parse

    Returns:
        Tuple of four octets, or None if the string is not a valid dotted quad
    """
    if not ip or not isinstance(ip, str):
        return None

    parts = ip.split(".")
    if len(parts) != IPV4_OCTET_COUNT:
        return None

    octets: list[int] = []
    for part in parts:
        if not _OCTET_PATTERN.fullmatch(part):
            return None
        if len(part) > 1 and part.startswith("0"):
            return None
        # Three digits without a leading zero is the longest possible octet
        if len(part) > 3:
            return None
        value = int(part)
        if value > IPV4_MAX_OCTET:
            return None
        octets.append(value)

    return (octets[0], octets[1], octets[2], octets[3])


def is_valid_ipv4(ip: str | None) -> bool:
    """
    Check if a string is a valid dotted-quad IPv4 address (boolean return).

    Args:
        ip: The address string to validate

    Returns:
        True if the address is syntactically valid, False otherwise
    """
    return parse_ipv4(ip) is not None


def octets_to_int(octets: tuple[int, int, int, int]) -> int:
    """Pack four octets into a 32-bit unsigned integer, first octet most significant."""
    value = 0
    for octet in octets:
        value = (value << 8) | octet
    return value & IPV4_ALL_ONES


def ipv4_to_int(ip: str) -> int:
    """
    Convert a dotted-quad IPv4 address to a 32-bit unsigned integer.

    Raises:
        InvalidAddressSyntaxError: If the address is not a valid dotted quad
    """
    octets = parse_ipv4(ip)
    if octets is None:
        raise InvalidAddressSyntaxError(
            error_code="IP_SYNTAX_INVALID",
            context={"ip": ip}
        )
    return octets_to_int(octets)


def int_to_ipv4(value: int) -> str:
    return ".".join(str((value >> shift) & 0xFF) for shift in (24, 16, 8, 0))


# Private and reserved ranges a redirect must never point at
RESERVED_BLOCKS: tuple[CIDRBlock, ...] = (
    CIDRBlock.from_notation("0.0.0.0/8", "this-network"),  # noqa: S104
    CIDRBlock.from_notation("10.0.0.0/8", "private-network"),
    CIDRBlock.from_notation("127.0.0.0/8", "loopback"),
    CIDRBlock.from_notation("169.254.0.0/16", "link-local"),
    CIDRBlock.from_notation("172.16.0.0/12", "private-network"),
    CIDRBlock.from_notation("192.0.0.0/24", "ietf-protocol-assignments"),
    CIDRBlock.from_notation("192.168.0.0/16", "private-network"),
    CIDRBlock.from_notation("255.255.255.255/32", "limited-broadcast"),
)


def find_reserved_block_for_int(address: int) -> CIDRBlock | None:
    """Return the first block of RESERVED_BLOCKS containing a 32-bit address, or None."""
    for block in RESERVED_BLOCKS:
        if block.contains(address):
            return block
    return None


def find_reserved_block(ip: str) -> CIDRBlock | None:
    """
    Find the first private or reserved block containing the address.

    Args:
        ip: A syntactically valid IPv4 address

    Returns:
        The matching CIDRBlock, or None for a publicly routable address
    """
    return find_reserved_block_for_int(ipv4_to_int(ip))


def is_private_or_reserved(ip: str) -> bool:
    """Check if a valid IPv4 address lies within any private or reserved block."""
    return find_reserved_block(ip) is not None


def validate_ipv4_strict(ip: str | None) -> str:
    """
    Validate an address for use as a redirect target (raises exceptions).

    Args:
        ip: The address string to validate

    Returns:
        The original address string, unchanged

    Raises:
        InvalidAddressSyntaxError: If the address is not a valid dotted quad
        ForbiddenRangeError: If the address is private or reserved
    """
    octets = parse_ipv4(ip)
    if octets is None:
        raise InvalidAddressSyntaxError(
            error_code="IP_SYNTAX_INVALID",
            context={"ip": ip}
        )

    block = find_reserved_block_for_int(octets_to_int(octets))
    if block is not None:
        raise ForbiddenRangeError(
            error_code="IP_RANGE_FORBIDDEN",
            context={"ip": ip, "reserved_range": block.notation, "range_label": block.label}
        )

    return ip


def validate_ipv4(ip: str | None) -> bool:
    """Validate an address for redirecting (boolean return)."""
    try:
        validate_ipv4_strict(ip)
        return True
    except RedirectValidationError:
        return False
