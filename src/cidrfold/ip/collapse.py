"""
Collapsing of addresses, CIDRs and ranges into a minimal set of CIDRs.

Every input is turned into an integer Range, the ranges are sorted and
merged, and each merged range is decomposed into the fewest CIDR blocks
that cover it exactly. None of this enumerates individual addresses, so
arbitrarily large ranges are fine.

With max_gap > 0 nearby ranges separated by at most max_gap addresses are
merged as well. That is an over-approximation: the gap addresses end up in
the output even though they were never in the input.
"""

import logging
from typing import Iterable

from netaddr import AddrFormatError, IPAddress

from cidrfold.ip.codec import (
    family_of,
    floor_log2,
    from_integer,
    max_value,
    trailing_zeros,
)
from cidrfold.ip.models import SLASH, Cidr, IpRange, Range

logger = logging.getLogger(__name__)


def collapse_cidrs(cidrs: Iterable[Cidr], max_gap: int = 0) -> list[Cidr]:
    """Collapse CIDRs into an equivalent minimal set of CIDRs.

    Redundant sub-prefixes are dropped and adjacent or overlapping blocks
    merged. Blocks with host bits set are treated as their network.
    """
    return _collapse([c.to_range() for c in cidrs], max_gap)


def collapse_ips(addresses: Iterable[IPAddress], max_gap: int = 0) -> list[Cidr]:
    """Collapse individual addresses into a minimal set of CIDRs."""
    return collapse_cidrs([ip_to_host_cidr(ip) for ip in addresses], max_gap)


def collapse_strings(tokens: Iterable[str], max_gap: int = 0) -> list[Cidr]:
    """Collapse CIDR and address strings into a minimal set of CIDRs.

    Tokens containing a slash are read as CIDRs, everything else as a bare
    address. Tokens that fail to parse are skipped.
    """
    cidrs = []
    for token in tokens:
        try:
            if SLASH in token:
                cidrs.append(Cidr.parse(token))
            else:
                cidrs.append(ip_to_host_cidr(IPAddress(token)))
        except (AddrFormatError, ValueError):
            logger.debug("Skipping unparseable token %r", token)
    return collapse_cidrs(cidrs, max_gap)


def collapse_ranges(ranges: Iterable[IpRange], max_gap: int = 0) -> list[Cidr]:
    """Collapse inclusive address ranges into a minimal set of CIDRs.

    Scales to ranges of any size since no addresses are enumerated.
    """
    return _collapse([r.to_range() for r in ranges], max_gap)


def collapse_range_tuples(
    pairs: Iterable[tuple[IPAddress, IPAddress]],
    max_gap: int = 0,
) -> list[Cidr]:
    """collapse_ranges() for callers holding (beg, end) tuples.

    Each pair is validated as an IpRange, so reversed or mixed family
    pairs raise instead of being reordered.
    """
    return collapse_ranges([IpRange(beg, end) for beg, end in pairs], max_gap)


def ip_to_host_cidr(address: IPAddress) -> Cidr:
    """Single address as a /32 or /128 block."""
    return Cidr(address, family_of(address).bits)


def _collapse(ranges: list[Range], max_gap: int) -> list[Cidr]:
    if max_gap < 0:
        raise ValueError(f"max_gap must be non-negative, got {max_gap}")

    ranges.sort(key=Range.sort_key)
    merged = merge_ranges(ranges)
    if max_gap > 0:
        merged = merge_ranges_fuzzy(merged, max_gap)

    out: list[Cidr] = []
    for r in merged:
        out.extend(range_to_cidrs(r))

    logger.debug(
        "Collapsed %d ranges into %d merged ranges, %d CIDRs (max_gap=%d)",
        len(ranges), len(merged), len(out), max_gap,
    )
    return out


def merge_ranges(sorted_ranges: Iterable[Range]) -> list[Range]:
    """Merge overlapping or adjacent ranges within each family.

    Input must be sorted by Range.sort_key.
    """
    out: list[Range] = []
    for r in sorted_ranges:
        if out:
            last = out[-1]
            if last.family == r.family and r.beg <= last.end + 1:
                if r.end > last.end:
                    out[-1] = Range(last.family, last.beg, r.end)
                continue
        out.append(r)
    return out


def merge_ranges_fuzzy(merged: Iterable[Range], max_gap: int) -> list[Range]:
    """Merge ranges separated by at most max_gap addresses.

    Input must be sorted and already exactly merged.
    """
    out: list[Range] = []
    for r in merged:
        if out:
            last = out[-1]
            if last.family == r.family:
                gap = max(r.beg - (last.end + 1), 0)
                if gap <= max_gap:
                    # swallow the gap
                    out[-1] = Range(last.family, last.beg, max(r.end, last.end))
                    continue
        out.append(r)
    return out


def range_to_cidrs(r: Range) -> list[Cidr]:
    """Decompose an inclusive range into the minimal list of CIDRs.

    At each position the emitted block is the largest one that is both
    aligned at the current start and fits in what is left of the range.
    """
    bits = r.family.bits

    if r.beg == 0 and r.end == max_value(r.family):
        return [Cidr(from_integer(r.family, 0), 0)]

    out: list[Cidr] = []
    start = r.beg
    while start <= r.end:
        align_prefix = bits - trailing_zeros(start, bits)
        fit_prefix = bits - floor_log2(r.end - start + 1)
        prefix = max(align_prefix, fit_prefix)

        out.append(Cidr(from_integer(r.family, start), prefix))
        start += 1 << (bits - prefix)

    return out
