"""
Integer codec for IP addresses.

Maps typed addresses to unsigned integers at the family's native width
(32 bits for IPv4, 128 bits for IPv6) and back, and builds prefix masks.
Both families share a single Python int representation; the width only
matters at the conversion boundary.
"""

from enum import IntEnum
from typing import Iterator

from netaddr import IPAddress


IPV4_BITS = 32
IPV6_BITS = 128

# Largest 128-bit value. Doubles as the length of the full IPv6 space,
# which cannot be expressed as a 128-bit count.
U128_MAX = (1 << IPV6_BITS) - 1


class AddressFamily(IntEnum):
    """IP address family. Values are the IP versions, so v4 sorts first."""

    V4 = 4
    V6 = 6

    @property
    def bits(self) -> int:
        return IPV4_BITS if self is AddressFamily.V4 else IPV6_BITS


def family_of(address: IPAddress) -> AddressFamily:
    """Return the family of a typed address."""
    return AddressFamily(address.version)


def max_value(family: AddressFamily) -> int:
    """Largest integer value of an address in the given family."""
    return (1 << family.bits) - 1


def mask_of(width: int, prefix: int) -> int:
    """Return a `width`-bit integer with the top `prefix` bits set.

    prefix 0 gives 0 and any prefix >= width gives all ones, so callers
    never shift by the full width.
    """
    if prefix <= 0:
        return 0
    all_ones = (1 << width) - 1
    if prefix >= width:
        return all_ones
    return all_ones & ~((1 << (width - prefix)) - 1)


def to_integer(address: IPAddress) -> int:
    """Big-endian integer value of an address."""
    return int(address)


def from_integer(family: AddressFamily, value: int) -> IPAddress:
    """Build a typed address from its integer value.

    The value must fit the family; netaddr raises AddrFormatError otherwise.
    """
    return IPAddress(value, int(family))


def trailing_zeros(value: int, width: int) -> int:
    """Count trailing zero bits, capped at `width` (0 has `width` of them)."""
    if value == 0:
        return width
    return min((value & -value).bit_length() - 1, width)


def floor_log2(value: int) -> int:
    """floor(log2(value)) for value >= 1."""
    if value < 1:
        raise ValueError(f"floor_log2 undefined for {value}")
    return value.bit_length() - 1


def iter_addresses(family: AddressFamily, beg: int, end: int) -> Iterator[IPAddress]:
    """Yield every address in the inclusive interval [beg, end], ascending."""
    current = beg
    while current <= end:
        yield from_integer(family, current)
        current += 1
