"""
Address value types.

Range is the integer working representation shared by both families.
Cidr and IpRange are the typed forms exposed to callers.
"""

from dataclasses import dataclass
from typing import Iterator

from netaddr import AddrFormatError, IPAddress

from cidrfold.ip.codec import (
    U128_MAX,
    AddressFamily,
    family_of,
    from_integer,
    iter_addresses,
    mask_of,
    to_integer,
)
from cidrfold.ip.errors import (
    FamilyMismatchError,
    InvalidAddressError,
    RangeOrderError,
)

SLASH = "/"


@dataclass(frozen=True)
class Range:
    """Inclusive integer interval [beg, end] tagged with its family."""

    family: AddressFamily
    beg: int
    end: int

    def __post_init__(self):
        if self.beg > self.end:
            raise RangeOrderError(
                from_integer(self.family, self.beg),
                from_integer(self.family, self.end),
            )

    def sort_key(self) -> tuple[int, int, int]:
        return (int(self.family), self.beg, self.end)

    def length(self) -> int:
        """Number of addresses, saturating at the largest 128-bit value."""
        return min(self.end - self.beg + 1, U128_MAX)


@dataclass(frozen=True)
class Cidr:
    """An address paired with a prefix length.

    The address is kept exactly as given; it is not forced to be the
    network address. Use network() for the canonical form.
    """

    address: IPAddress
    prefix: int

    def __post_init__(self):
        if not 0 <= self.prefix <= self.family.bits:
            raise InvalidAddressError(
                f"{self.address}/{self.prefix}", "prefix out of range in CIDR"
            )

    @classmethod
    def parse(cls, text: str) -> "Cidr":
        """Parse `address/prefix`, or a bare address as a full-width block."""
        if SLASH not in text:
            try:
                address = IPAddress(text.strip())
            except (AddrFormatError, ValueError):
                raise InvalidAddressError(text, "invalid IP address") from None
            return cls(address, family_of(address).bits)

        parts = text.split(SLASH)
        if len(parts) != 2:
            raise InvalidAddressError(text, "invalid CIDR format (too many slashes)")

        addr_str = parts[0].strip()
        prefix_str = parts[1].strip()

        try:
            address = IPAddress(addr_str)
        except (AddrFormatError, ValueError):
            raise InvalidAddressError(addr_str, "invalid IP address in CIDR") from None

        if not (prefix_str.isascii() and prefix_str.isdigit()):
            raise InvalidAddressError(prefix_str, "invalid prefix in CIDR")
        prefix = int(prefix_str)

        family = family_of(address)
        if prefix > family.bits:
            raise InvalidAddressError(
                prefix_str, f"invalid IPv{int(family)} prefix in CIDR"
            )

        return cls(address, prefix)

    def __str__(self) -> str:
        return f"{self.address}{SLASH}{self.prefix}"

    def __iter__(self) -> Iterator[IPAddress]:
        return self.iter()

    @property
    def family(self) -> AddressFamily:
        return family_of(self.address)

    def is_ipv4(self) -> bool:
        return self.family is AddressFamily.V4

    def is_ipv6(self) -> bool:
        return self.family is AddressFamily.V6

    def is_host(self) -> bool:
        """True if the block holds a single address (/32 or /128)."""
        return self.prefix == self.family.bits

    def length(self) -> int:
        """Number of addresses in the block.

        2**128 does not fit a 128-bit count, so ::/0 reports the
        largest 128-bit value instead.
        """
        return min(1 << (self.family.bits - self.prefix), U128_MAX)

    def length_v4(self) -> int | None:
        """Number of addresses for an IPv4 block, None for IPv6."""
        if not self.is_ipv4():
            return None
        return 1 << (self.family.bits - self.prefix)

    def to_range(self) -> Range:
        """Covering [network, broadcast] interval."""
        bits = self.family.bits
        mask = mask_of(bits, self.prefix)
        net = to_integer(self.address) & mask
        last = net | (~mask & ((1 << bits) - 1))
        return Range(self.family, net, last)

    def network(self) -> "Cidr":
        """Copy with the host bits cleared."""
        return Cidr(from_integer(self.family, self.to_range().beg), self.prefix)

    def to_ip_range(self) -> "IpRange":
        r = self.to_range()
        return IpRange(from_integer(r.family, r.beg), from_integer(r.family, r.end))

    def iter(self) -> Iterator[IPAddress]:
        """Lazily yield every address of the block in ascending order.

        No size limit is applied. A /0 will happily run until the caller
        stops consuming it.
        """
        r = self.to_range()
        return iter_addresses(r.family, r.beg, r.end)


@dataclass(frozen=True)
class IpRange:
    """Inclusive range of addresses of one family."""

    beg: IPAddress
    end: IPAddress

    def __post_init__(self):
        if self.beg.version != self.end.version:
            raise FamilyMismatchError(self.beg, self.end)
        if to_integer(self.beg) > to_integer(self.end):
            raise RangeOrderError(self.beg, self.end)

    def __str__(self) -> str:
        return f"{self.beg}-{self.end}"

    def __iter__(self) -> Iterator[IPAddress]:
        return self.iter()

    @property
    def family(self) -> AddressFamily:
        return family_of(self.beg)

    def length(self) -> int:
        return self.to_range().length()

    def to_range(self) -> Range:
        return Range(self.family, to_integer(self.beg), to_integer(self.end))

    def iter(self) -> Iterator[IPAddress]:
        """Lazily yield every address from beg to end inclusive."""
        return iter_addresses(self.family, to_integer(self.beg), to_integer(self.end))
