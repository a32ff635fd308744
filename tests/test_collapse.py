import random

import pytest
from netaddr import IPAddress, IPNetwork, cidr_merge, iprange_to_cidrs

from cidrfold.ip.codec import U128_MAX, AddressFamily, from_integer, max_value, to_integer
from cidrfold.ip.collapse import (
    collapse_cidrs,
    collapse_ips,
    collapse_range_tuples,
    collapse_ranges,
    collapse_strings,
    ip_to_host_cidr,
    merge_ranges,
    merge_ranges_fuzzy,
    range_to_cidrs,
)
from cidrfold.ip.errors import FamilyMismatchError, RangeOrderError
from cidrfold.ip.models import Cidr, IpRange, Range


def cidrs(*texts):
    return [Cidr.parse(t) for t in texts]


def as_strings(blocks):
    return [str(b) for b in blocks]


def covered(blocks):
    """Set of (family, integer) pairs covered by small test blocks."""
    out = set()
    for block in blocks:
        r = block.to_range()
        out.update((r.family, n) for n in range(r.beg, r.end + 1))
    return out


def test_merges_adjacent_v4():
    out = collapse_cidrs(cidrs("192.168.0.0/24", "192.168.1.0/24"))
    assert as_strings(out) == ["192.168.0.0/23"]


def test_removes_redundant():
    out = collapse_cidrs(cidrs("10.0.0.0/8", "10.1.2.0/24"))
    assert as_strings(out) == ["10.0.0.0/8"]


def test_handles_ipv6_merge():
    out = collapse_cidrs(cidrs("2001:db8::/65", "2001:db8:0:0:8000::/65"))
    assert as_strings(out) == ["2001:db8::/64"]


def test_normalizes_host_bits():
    out = collapse_cidrs(cidrs("10.0.0.77/24"))
    assert as_strings(out) == ["10.0.0.0/24"]


def test_range_to_cidr():
    r = Range(AddressFamily.V4, to_integer(IPAddress("172.16.0.4")), to_integer(IPAddress("172.16.0.7")))
    assert as_strings(range_to_cidrs(r)) == ["172.16.0.4/30"]


def test_range_to_cidrs_unaligned():
    r = Range(AddressFamily.V4, to_integer(IPAddress("10.0.0.1")), to_integer(IPAddress("10.0.0.10")))
    assert as_strings(range_to_cidrs(r)) == [
        "10.0.0.1/32", "10.0.0.2/31", "10.0.0.4/30", "10.0.0.8/31", "10.0.0.10/32",
    ]


def test_range_to_cidrs_full_space():
    assert as_strings(range_to_cidrs(Range(AddressFamily.V4, 0, max_value(AddressFamily.V4)))) == ["0.0.0.0/0"]
    assert as_strings(range_to_cidrs(Range(AddressFamily.V6, 0, U128_MAX))) == ["::/0"]


def test_range_to_cidrs_top_of_space():
    r = Range(AddressFamily.V6, U128_MAX - 1, U128_MAX)
    assert as_strings(range_to_cidrs(r)) == ["ffff:ffff:ffff:ffff:ffff:ffff:ffff:fffe/127"]

    r = Range(AddressFamily.V6, 1, U128_MAX)
    out = range_to_cidrs(r)
    assert len(out) == 128
    assert str(out[-1]) == "8000::/1"

    r = Range(AddressFamily.V4, 0xFFFFFFFF, 0xFFFFFFFF)
    assert as_strings(range_to_cidrs(r)) == ["255.255.255.255/32"]


def test_ip_to_host_cidr():
    assert ip_to_host_cidr(IPAddress("10.0.0.1")) == Cidr(IPAddress("10.0.0.1"), 32)
    assert ip_to_host_cidr(IPAddress("::1")) == Cidr(IPAddress("::1"), 128)


def test_collapse_ips_v4():
    ips = [IPAddress(a) for a in ["172.16.0.4", "172.16.0.5", "172.16.0.6", "172.16.0.7"]]
    assert as_strings(collapse_ips(ips)) == ["172.16.0.4/30"]


def test_collapse_ips_v6():
    ips = [IPAddress(a) for a in ["2001:db8::4", "2001:db8::5", "2001:db8::6", "2001:db8::7"]]
    assert as_strings(collapse_ips(ips)) == ["2001:db8::4/126"]


def test_collapse_ips_duplicates_and_order():
    ips = [IPAddress(a) for a in ["10.0.0.3", "10.0.0.1", "10.0.0.2", "10.0.0.1", "10.0.0.0"]]
    assert as_strings(collapse_ips(ips)) == ["10.0.0.0/30"]


def test_collapse_strings_then_iterate():
    tokens = ["172.16.0.4", "172.16.0.5", "172.16.0.6", "172.16.0.7"]
    block = collapse_strings(tokens)[0]
    assert [str(a) for a in block.iter()] == tokens


def test_collapse_strings_skips_bad_tokens():
    out = collapse_strings(["10.0.0.0/25", "bogus", "10.0.0.128/25", "10.0.0.0/99", "1.2.3.4/8/8"])
    assert as_strings(out) == ["10.0.0.0/24"]


def test_collapse_strings_empty():
    assert collapse_strings([]) == []
    assert collapse_strings(["nothing", "useful"]) == []


def test_fuzz_v4():
    ips = [IPAddress(a) for a in ["172.16.0.8", "172.16.0.11", "172.16.0.13", "172.16.0.15"]]
    assert as_strings(collapse_ips(ips, max_gap=2)) == ["172.16.0.8/29"]


def test_fuzz_v6():
    ips = [IPAddress(a) for a in ["2001:db8::0", "2001:db8::3", "2001:db8::5", "2001:db8::7"]]
    assert as_strings(collapse_ips(ips, max_gap=2)) == ["2001:db8::/125"]


def test_fuzz_gap_too_small():
    ips = [IPAddress(a) for a in ["172.16.0.8", "172.16.0.11"]]
    assert as_strings(collapse_ips(ips, max_gap=1)) == ["172.16.0.8/32", "172.16.0.11/32"]


def test_fuzz_never_crosses_families():
    blocks = cidrs("255.255.255.255/32", "::/128")
    assert as_strings(collapse_cidrs(blocks, max_gap=U128_MAX)) == ["255.255.255.255/32", "::/128"]


def test_negative_gap_rejected():
    with pytest.raises(ValueError):
        collapse_cidrs(cidrs("10.0.0.0/8"), max_gap=-1)


def test_families_grouped_v4_first():
    out = collapse_strings(["2001:db8::/32", "10.0.0.0/8", "::1", "192.168.0.0/16"])
    assert as_strings(out) == ["10.0.0.0/8", "192.168.0.0/16", "::1/128", "2001:db8::/32"]


def test_collapse_ranges():
    ranges = [
        IpRange(IPAddress("10.0.0.0"), IPAddress("10.0.0.127")),
        IpRange(IPAddress("10.0.0.128"), IPAddress("10.0.0.255")),
        IpRange(IPAddress("2001:db8::"), IPAddress("2001:db8::ffff")),
    ]
    assert as_strings(collapse_ranges(ranges)) == ["10.0.0.0/24", "2001:db8::/112"]


def test_collapse_ranges_large_span_without_enumeration():
    out = collapse_range_tuples([(IPAddress("10.0.0.0"), IPAddress("10.1.255.255"))])
    assert as_strings(out) == ["10.0.0.0/15"]

    out = collapse_range_tuples([(IPAddress("::"), IPAddress("ffff:ffff:ffff:ffff:ffff:ffff:ffff:ffff"))])
    assert as_strings(out) == ["::/0"]

    out = collapse_range_tuples([(IPAddress("0.0.0.0"), IPAddress("255.255.255.255"))])
    assert as_strings(out) == ["0.0.0.0/0"]


def test_collapse_ranges_fuzzy():
    ranges = [
        IpRange(IPAddress("10.0.0.0"), IPAddress("10.0.0.5")),
        IpRange(IPAddress("10.0.0.9"), IPAddress("10.0.0.15")),
    ]
    assert as_strings(collapse_ranges(ranges)) == [
        "10.0.0.0/30", "10.0.0.4/31", "10.0.0.9/32", "10.0.0.10/31", "10.0.0.12/30",
    ]
    assert as_strings(collapse_ranges(ranges, max_gap=3)) == ["10.0.0.0/28"]


def test_collapse_range_tuples_strict_order():
    with pytest.raises(RangeOrderError):
        collapse_range_tuples([(IPAddress("10.0.0.5"), IPAddress("10.0.0.1"))])


def test_collapse_range_tuples_family_mismatch():
    with pytest.raises(FamilyMismatchError):
        collapse_range_tuples([(IPAddress("10.0.0.1"), IPAddress("::1"))])


def test_merge_ranges():
    v4 = AddressFamily.V4
    merged = merge_ranges([Range(v4, 0, 5), Range(v4, 3, 4), Range(v4, 6, 8), Range(v4, 10, 12)])
    assert merged == [Range(v4, 0, 8), Range(v4, 10, 12)]


def test_merge_ranges_keeps_families_apart():
    merged = merge_ranges([Range(AddressFamily.V4, 0, 5), Range(AddressFamily.V6, 0, 5)])
    assert len(merged) == 2


def test_merge_ranges_fuzzy():
    v4 = AddressFamily.V4
    merged = [Range(v4, 0, 5), Range(v4, 8, 9), Range(v4, 20, 30)]
    assert merge_ranges_fuzzy(merged, 2) == [Range(v4, 0, 9), Range(v4, 20, 30)]
    assert merge_ranges_fuzzy(merged, 10) == [Range(v4, 0, 30)]


def test_merge_idempotent():
    minimal = cidrs("10.0.0.0/24", "10.0.2.0/23", "192.168.0.0/16", "2001:db8::/48", "2001:db9::/32")
    assert collapse_cidrs(minimal) == minimal
    assert collapse_cidrs(collapse_cidrs(minimal)) == minimal


def _random_v4_range(rng):
    beg = rng.randrange(0, 1 << 32)
    end = min(beg + rng.randrange(0, 1 << rng.randrange(1, 24)), (1 << 32) - 1)
    return beg, end


def test_decomposition_matches_netaddr():
    rng = random.Random(1234)
    for _ in range(300):
        beg, end = _random_v4_range(rng)
        r = Range(AddressFamily.V4, beg, end)
        expected = [str(n) for n in iprange_to_cidrs(IPAddress(beg, 4), IPAddress(end, 4))]
        assert as_strings(range_to_cidrs(r)) == expected


def test_decomposition_matches_netaddr_v6():
    rng = random.Random(99)
    for _ in range(100):
        beg = rng.randrange(0, 1 << 128)
        end = min(beg + rng.randrange(0, 1 << rng.randrange(1, 100)), U128_MAX)
        r = Range(AddressFamily.V6, beg, end)
        expected = [str(n) for n in iprange_to_cidrs(IPAddress(beg, 6), IPAddress(end, 6))]
        assert as_strings(range_to_cidrs(r)) == expected


def test_decomposition_covers_exactly():
    rng = random.Random(7)
    for _ in range(200):
        beg = rng.randrange(0, 5000)
        end = beg + rng.randrange(0, 600)
        blocks = range_to_cidrs(Range(AddressFamily.V4, beg, end))

        assert sum(b.length() for b in blocks) == end - beg + 1
        assert covered(blocks) == {(AddressFamily.V4, n) for n in range(beg, end + 1)}
        for block in blocks:
            assert block == block.network()
        for a, b in zip(blocks, blocks[1:]):
            assert a.to_range().end + 1 == b.to_range().beg


def test_collapse_matches_netaddr_cidr_merge():
    rng = random.Random(42)
    for _ in range(100):
        blocks = []
        for _ in range(rng.randrange(1, 12)):
            prefix = rng.randrange(20, 33)
            address = from_integer(AddressFamily.V4, (10 << 24) + rng.randrange(0, 1 << 14))
            blocks.append(Cidr(address, prefix))
        expected = [str(n) for n in cidr_merge([IPNetwork(str(b)).cidr for b in blocks])]
        assert as_strings(collapse_cidrs(blocks)) == expected


def test_fuzzy_is_superset_and_monotonic():
    rng = random.Random(5)
    for _ in range(50):
        ips = [from_integer(AddressFamily.V4, rng.randrange(0, 400)) for _ in range(rng.randrange(1, 15))]
        exact = collapse_ips(ips)
        exact_cover = covered(exact)
        assert exact_cover == {(AddressFamily.V4, int(ip)) for ip in ips}

        previous = exact_cover
        for gap in (1, 2, 5, 20, 100):
            fuzzy = collapse_ips(ips, max_gap=gap)
            cover = covered(fuzzy)
            assert cover >= previous
            previous = cover
