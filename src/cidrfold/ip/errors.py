"""
Address parsing and validation errors.

Every failure raised by the parser, the value types and the collapser is an
AddressError. The subclasses form a closed set, one per failure kind.
"""

from netaddr import IPAddress


class AddressError(ValueError):
    """Base exception for address, CIDR and range errors."""
    pass


class InvalidAddressError(AddressError):
    """Token is not an IP address, CIDR or range."""

    def __init__(self, token: str, reason: str = "invalid IP address, CIDR, or range"):
        self.token = token
        self.reason = reason
        super().__init__(f"{reason}: '{token}'")


class InvalidRangeFormatError(AddressError):
    """Range does not split into exactly two dash separated parts."""

    def __init__(self, token: str):
        self.token = token
        super().__init__(f"invalid range format: '{token}'")


class InvalidRangeStartError(AddressError):
    """Start of a range is not an address literal."""

    def __init__(self, start: str, detail: str = ""):
        self.start = start
        message = f"invalid start IP in range: '{start}'"
        super().__init__(f"{message}: {detail}" if detail else message)


class InvalidRangeEndError(AddressError):
    """End of a full-form range is not an address literal."""

    def __init__(self, end: str, detail: str = ""):
        self.end = end
        message = f"invalid end IP in range: '{end}'"
        super().__init__(f"{message}: {detail}" if detail else message)


class InvalidRangeEndValueError(AddressError):
    """End of a short-form range is not a decimal integer."""

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"invalid range end value: '{value}'")


class InvalidV4OctetError(AddressError):
    """Short-form IPv4 end value does not fit an octet."""

    def __init__(self, value: int):
        self.value = value
        super().__init__(f"IPv4 octet must be <= 255, got {value}")


class InvalidV6HextetError(AddressError):
    """Short-form IPv6 end value does not fit a hextet."""

    def __init__(self, value: int):
        self.value = value
        super().__init__(f"IPv6 hextet must be <= 65535, got {value}")


class RangeOrderError(AddressError):
    """Range start is greater than its end."""

    def __init__(self, beg: IPAddress, end: IPAddress):
        self.beg = beg
        self.end = end
        super().__init__(f"start IP is greater than end IP ({beg} > {end})")


class RangeTooLargeError(AddressError):
    """Materializing the range would exceed the address limit."""

    def __init__(self, count: int, maximum: int):
        self.count = count
        self.maximum = maximum
        super().__init__(f"range too large - addresses: {count} (max {maximum})")


class FamilyMismatchError(AddressError):
    """IPv4 and IPv6 addresses paired into one range."""

    def __init__(self, first: IPAddress, second: IPAddress):
        self.first = first
        self.second = second
        super().__init__(f"cannot mix IPv4 and IPv6 in range: {first} - {second}")
