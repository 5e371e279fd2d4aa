"""
Unit tests for range expansion.

Tests cover:
    - CIDR expansion with and without network/broadcast exclusion
    - Dashed-octet expansion order and Cartesian product
    - Dispatch between the two notations
    - Rejection of malformed ranges
"""

import ipaddress

import pytest

from host_discovery.core.range_expander import (
    CIDRRangeExpander,
    OctetRangeExpander,
    expand_range,
    get_expander,
)
from host_discovery.utils.error_handler import InvalidRangeFormat, RangeFormatError


# ─── CIDR Tests ──────────────────────────────────────────────────────────────


class TestCIDRExpansion:
    """Tests for address/prefix blocks."""

    def test_slash_30_drops_network_and_broadcast(self):
        assert expand_range("192.168.1.0/30") == ["192.168.1.1", "192.168.1.2"]

    @pytest.mark.parametrize("prefix", [24, 25, 28, 29, 30])
    def test_host_count_and_order(self, prefix):
        addresses = expand_range(f"10.1.2.0/{prefix}")
        assert len(addresses) == 2 ** (32 - prefix) - 2
        as_ints = [int(ipaddress.IPv4Address(a)) for a in addresses]
        assert as_ints == sorted(as_ints)
        assert "10.1.2.0" not in addresses

    def test_slash_24_bounds(self):
        addresses = expand_range("192.168.10.0/24")
        assert addresses[0] == "192.168.10.1"
        assert addresses[-1] == "192.168.10.254"

    def test_slash_31_keeps_both_addresses(self):
        assert expand_range("10.0.0.0/31") == ["10.0.0.0", "10.0.0.1"]

    def test_slash_32_keeps_single_address(self):
        assert expand_range("10.0.0.7/32") == ["10.0.0.7"]

    def test_host_bits_are_masked(self):
        # 192.168.1.77/30 is the 192.168.1.76/30 block
        assert expand_range("192.168.1.77/30") == ["192.168.1.77", "192.168.1.78"]

    def test_block_crossing_octet_boundary(self):
        addresses = expand_range("10.0.0.0/23")
        assert "10.0.0.255" in addresses
        assert "10.0.1.0" in addresses
        assert len(addresses) == 510

    @pytest.mark.parametrize("spec", [
        "10.0.0.0/33",
        "10.0.0/24",
        "300.0.0.0/24",
        "abc/24",
        "10.0.0.0/",
        "fe80::/64",
        "10.0.0.0/255.255.255.252",
        "10.0.0.0/0.0.0.3",
        "10.0.0.0/+24",
    ])
    def test_invalid_cidr(self, spec):
        with pytest.raises(InvalidRangeFormat):
            expand_range(spec)


# ─── Dashed-octet Tests ──────────────────────────────────────────────────────


class TestOctetExpansion:
    """Tests for a.b.c.d notation with optional lo-hi octets."""

    def test_single_address(self):
        assert expand_range("172.16.5.10") == ["172.16.5.10"]

    def test_range_in_third_octet(self):
        assert expand_range("10.0.0-2.5") == ["10.0.0.5", "10.0.1.5", "10.0.2.5"]

    def test_cartesian_product_order(self):
        assert expand_range("10.0-1.0.1-2") == [
            "10.0.0.1",
            "10.0.0.2",
            "10.1.0.1",
            "10.1.0.2",
        ]

    def test_no_network_or_broadcast_exclusion(self):
        addresses = expand_range("192.168.1.0-255")
        assert len(addresses) == 256
        assert addresses[0] == "192.168.1.0"
        assert addresses[-1] == "192.168.1.255"

    def test_degenerate_range(self):
        assert expand_range("10.0.0.4-4") == ["10.0.0.4"]

    def test_surrounding_whitespace_is_ignored(self):
        assert expand_range("  10.0.0.1 \n") == ["10.0.0.1"]

    @pytest.mark.parametrize("spec", [
        "10.0.0",
        "10.0.0.1.5",
        "10.0.x.1",
        "10.0.0.-1",
        "10.0.0.1-",
        "10.0.0.+1",
        "",
        "   ",
    ])
    def test_malformed(self, spec):
        with pytest.raises(InvalidRangeFormat):
            expand_range(spec)

    def test_out_of_range_octet_is_rejected(self):
        with pytest.raises(InvalidRangeFormat, match="out of range"):
            expand_range("10.0.0.256")

    def test_inverted_bounds_are_rejected(self):
        with pytest.raises(InvalidRangeFormat, match="inverted"):
            expand_range("10.0.5-2.1")

    def test_error_carries_range(self):
        with pytest.raises(RangeFormatError) as exc_info:
            expand_range("10.0.0")
        assert exc_info.value.range_spec == "10.0.0"


# ─── Dispatch Tests ──────────────────────────────────────────────────────────


class TestDispatch:
    """Both notations are reachable through one entry point."""

    def test_slash_selects_cidr(self):
        assert isinstance(get_expander("10.0.0.0/24"), CIDRRangeExpander)

    def test_no_slash_selects_octets(self):
        assert isinstance(get_expander("10.0.0.1-5"), OctetRangeExpander)

    def test_non_string_is_rejected(self):
        with pytest.raises(InvalidRangeFormat):
            expand_range(None)

    @pytest.mark.parametrize("cidr,octets", [
        ("10.9.8.0/30", "10.9.8.1-2"),
        ("10.9.8.4/32", "10.9.8.4"),
        ("10.9.8.0/31", "10.9.8.0-1"),
    ])
    def test_equivalent_notations_agree(self, cidr, octets):
        assert expand_range(cidr) == expand_range(octets)
