"""
Range expansion for the Host Discovery Module.

Turns a range specification into the ordered list of IPv4 addresses it
designates. Two notations are supported and told apart by the presence of
a ``/``:

* CIDR, e.g. ``192.168.1.0/24``. Network and broadcast addresses are dropped
  when the block holds more than two addresses.
* Dashed octets, e.g. ``10.0.0-2.1-254``. Each of the four octets is a single
  value or an inclusive ``lo-hi`` range; the result is the full Cartesian
  product, first octet outermost.
"""

import ipaddress
import itertools
import re
from abc import ABC, abstractmethod
from typing import List, Sequence

from ..utils.error_handler import InvalidRangeFormat


_OCTET_RE = re.compile(r"\d{1,3}", re.ASCII)
_PREFIX_RE = re.compile(r"\d{1,2}", re.ASCII)


class RangeExpander(ABC):
    """Interface shared by every range notation."""

    @abstractmethod
    def expand(self, range_spec: str) -> List[str]:
        """
        Expand a range specification into addresses.

        Args:
            range_spec: Range in the notation handled by this expander

        Returns:
            Ordered list of dotted-quad addresses

        Raises:
            InvalidRangeFormat: If the range cannot be parsed
        """
        pass


class CIDRRangeExpander(RangeExpander):
    """Expands ``address/prefix`` blocks."""

    def expand(self, range_spec: str) -> List[str]:
        prefix = range_spec.rsplit("/", 1)[1]
        if not _PREFIX_RE.fullmatch(prefix):
            # ipaddress would also take a netmask or hostmask here
            raise InvalidRangeFormat(range_spec, f"invalid prefix length '{prefix}'")

        try:
            # strict=False applies the mask to an address with host bits set
            network = ipaddress.IPv4Network(range_spec, strict=False)
        except ValueError as e:
            raise InvalidRangeFormat(range_spec, str(e)) from e

        addresses = [str(address) for address in network]

        # /31 and /32 have no network or broadcast address to drop
        if len(addresses) > 2:
            return addresses[1:-1]
        return addresses


class OctetRangeExpander(RangeExpander):
    """Expands ``a.b.c.d`` where any octet may be an inclusive ``lo-hi`` range."""

    def expand(self, range_spec: str) -> List[str]:
        fields = range_spec.split(".")
        if len(fields) != 4:
            raise InvalidRangeFormat(
                range_spec, f"expected 4 octets, got {len(fields)}"
            )

        octet_values = [self._parse_field(range_spec, field) for field in fields]

        return [
            ".".join(str(octet) for octet in combination)
            for combination in itertools.product(*octet_values)
        ]

    def _parse_field(self, range_spec: str, field: str) -> Sequence[int]:
        """
        Parse one octet field into the values it stands for.

        Args:
            range_spec: Complete range, for error messages
            field: Single octet or ``lo-hi`` range

        Returns:
            Ascending range of octet values
        """
        if "-" in field:
            low_text, high_text = field.split("-", 1)
            low = self._parse_octet(range_spec, low_text)
            high = self._parse_octet(range_spec, high_text)
            if low > high:
                raise InvalidRangeFormat(
                    range_spec, f"inverted octet range {low}-{high}"
                )
            return range(low, high + 1)

        value = self._parse_octet(range_spec, field)
        return range(value, value + 1)

    def _parse_octet(self, range_spec: str, text: str) -> int:
        if not _OCTET_RE.fullmatch(text):
            raise InvalidRangeFormat(range_spec, f"invalid octet '{text}'")
        value = int(text)
        if value > 255:
            raise InvalidRangeFormat(range_spec, f"octet {value} out of range 0-255")
        return value


_cidr_expander = CIDRRangeExpander()
_octet_expander = OctetRangeExpander()


def get_expander(range_spec: str) -> RangeExpander:
    """Pick the expander matching the notation of ``range_spec``."""
    if "/" in range_spec:
        return _cidr_expander
    return _octet_expander


def expand_range(range_spec: str) -> List[str]:
    """
    Expand a CIDR or dashed-octet range specification into addresses.

    Args:
        range_spec: Range specification; surrounding whitespace is ignored

    Returns:
        Ordered list of dotted-quad addresses

    Raises:
        InvalidRangeFormat: If the range is malformed in its notation
    """
    if not isinstance(range_spec, str):
        raise InvalidRangeFormat(repr(range_spec), "range must be a string")

    range_spec = range_spec.strip()
    if not range_spec:
        raise InvalidRangeFormat(range_spec, "empty range")

    return get_expander(range_spec).expand(range_spec)
