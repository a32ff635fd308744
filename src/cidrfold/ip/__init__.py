"""
IP/CIDR Tools Module

Provides address/CIDR/range parsing, the value types they produce, and
collapsing of address collections into minimal CIDR sets.
"""

from cidrfold.ip.codec import (
    IPV4_BITS,
    IPV6_BITS,
    AddressFamily,
    family_of,
    from_integer,
    mask_of,
    to_integer,
)
from cidrfold.ip.errors import (
    AddressError,
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
from cidrfold.ip.models import Cidr, IpRange, Range
from cidrfold.ip.parser import (
    MAX_RANGE_SIZE,
    generate_ip_range,
    parse_ip_or_range,
    parse_ip_range,
)
from cidrfold.ip.collapse import (
    collapse_cidrs,
    collapse_ips,
    collapse_range_tuples,
    collapse_ranges,
    collapse_strings,
    ip_to_host_cidr,
)

__all__ = [
    "IPV4_BITS",
    "IPV6_BITS",
    "MAX_RANGE_SIZE",
    "AddressFamily",
    "family_of",
    "from_integer",
    "mask_of",
    "to_integer",
    "AddressError",
    "FamilyMismatchError",
    "InvalidAddressError",
    "InvalidRangeEndError",
    "InvalidRangeEndValueError",
    "InvalidRangeFormatError",
    "InvalidRangeStartError",
    "InvalidV4OctetError",
    "InvalidV6HextetError",
    "RangeOrderError",
    "RangeTooLargeError",
    "Cidr",
    "IpRange",
    "Range",
    "generate_ip_range",
    "parse_ip_or_range",
    "parse_ip_range",
    "collapse_cidrs",
    "collapse_ips",
    "collapse_range_tuples",
    "collapse_ranges",
    "collapse_strings",
    "ip_to_host_cidr",
]
