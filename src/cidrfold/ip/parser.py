"""
Parsing of address, CIDR and range tokens.

Supported formats:
    10.10.10.1                  single address
    10.10.10.0/28               CIDR block (usable hosts)
    10.10.10.1-10               short range (last octet or hextet)
    10.10.10.1-10.10.10.10      full range

Anything that would materialize more than MAX_RANGE_SIZE addresses is
refused. Use Cidr.iter(), IpRange.iter() or the collapse functions for
larger spans.
"""

import logging

from netaddr import AddrFormatError, IPAddress

from cidrfold.ip.codec import AddressFamily, family_of, from_integer, iter_addresses, to_integer
from cidrfold.ip.errors import (
    FamilyMismatchError,
    InvalidAddressError,
    InvalidRangeEndError,
    InvalidRangeEndValueError,
    InvalidRangeFormatError,
    InvalidRangeStartError,
    InvalidV4OctetError,
    InvalidV6HextetError,
    RangeOrderError,
    RangeTooLargeError,
)
from cidrfold.ip.models import SLASH, Cidr, IpRange

logger = logging.getLogger(__name__)

# Max number of addresses a single token may expand to
MAX_RANGE_SIZE = 65536

DASH = "-"
IP_DELIMS = (".", ":")

MAX_V4_OCTET = 0xFF
MAX_V6_HEXTET = 0xFFFF


def _parse_address(text: str) -> IPAddress | None:
    try:
        return IPAddress(text)
    except (AddrFormatError, ValueError):
        return None


def parse_ip_or_range(text: str) -> list[IPAddress]:
    """Parse an address, CIDR or range token into its individual addresses.

    Forms are tried in order: single address, CIDR, range. The first one
    that applies wins.

    Raises:
        RangeTooLargeError: the token covers more than MAX_RANGE_SIZE addresses
        InvalidAddressError: the token matches none of the forms
        AddressError: any range parsing failure from parse_ip_range()
    """
    address = _parse_address(text)
    if address is not None:
        return [address]

    if SLASH in text:
        try:
            cidr = Cidr.parse(text)
        except InvalidAddressError:
            cidr = None
        if cidr is not None:
            return _cidr_hosts(cidr)

    if DASH in text:
        ip_range = parse_ip_range(text)
        return generate_ip_range(ip_range.beg, ip_range.end)

    raise InvalidAddressError(text)


def _cidr_hosts(cidr: Cidr) -> list[IPAddress]:
    """Usable host addresses of a block.

    IPv4 blocks wider than /31 drop their network and broadcast addresses.
    /31, /32 and all IPv6 blocks keep every address.
    """
    count = 1 << (cidr.family.bits - cidr.prefix)
    if count > MAX_RANGE_SIZE:
        raise RangeTooLargeError(count, MAX_RANGE_SIZE)

    r = cidr.to_range()
    beg, end = r.beg, r.end
    if cidr.is_ipv4() and cidr.prefix < 31:
        beg, end = beg + 1, end - 1

    logger.debug("Expanding %s into %d addresses", cidr, end - beg + 1)
    return list(iter_addresses(r.family, beg, end))


def parse_ip_range(text: str) -> IpRange:
    """Parse a range in short form (10.0.0.1-10) or full form (10.0.0.1-10.0.0.10).

    The short form end replaces only the last octet (IPv4) or hextet (IPv6)
    of the start address. The resulting bounds go through IpRange, so the
    family and order checks apply to both forms.
    """
    parts = text.split(DASH)
    if len(parts) != 2:
        raise InvalidRangeFormatError(text)

    beg_str = parts[0].strip()
    end_str = parts[1].strip()

    try:
        beg = IPAddress(beg_str)
    except (AddrFormatError, ValueError) as e:
        raise InvalidRangeStartError(beg_str, str(e)) from e

    if any(delim in end_str for delim in IP_DELIMS):
        try:
            end = IPAddress(end_str)
        except (AddrFormatError, ValueError) as e:
            raise InvalidRangeEndError(end_str, str(e)) from e
    else:
        end = _parse_short_range_end(beg, end_str)

    return IpRange(beg, end)


def _parse_short_range_end(beg: IPAddress, end_str: str) -> IPAddress:
    """Resolve the "10" in "192.168.1.1-10" against the start address."""
    if not (end_str.isascii() and end_str.isdigit()):
        raise InvalidRangeEndValueError(end_str)
    value = int(end_str)

    family = family_of(beg)
    if family is AddressFamily.V4:
        if value > MAX_V4_OCTET:
            raise InvalidV4OctetError(value)
        return from_integer(family, (to_integer(beg) & ~MAX_V4_OCTET) | value)

    if value > MAX_V6_HEXTET:
        raise InvalidV6HextetError(value)
    return from_integer(family, (to_integer(beg) & ~MAX_V6_HEXTET) | value)


def generate_ip_range(start: IPAddress, end: IPAddress) -> list[IPAddress]:
    """Materialize every address between start and end, inclusive.

    Refuses ranges larger than MAX_RANGE_SIZE. IpRange.iter() has no such
    limit if a larger range is really wanted.
    """
    if start.version != end.version:
        raise FamilyMismatchError(start, end)

    beg_num = to_integer(start)
    end_num = to_integer(end)
    if beg_num > end_num:
        raise RangeOrderError(start, end)

    count = end_num - beg_num + 1
    if count > MAX_RANGE_SIZE:
        raise RangeTooLargeError(count, MAX_RANGE_SIZE)

    return list(iter_addresses(family_of(start), beg_num, end_num))
