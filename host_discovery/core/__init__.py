"""
Core components for host discovery functionality.
"""

from .data_models import (
    AddressState,
    HostRecord,
    DiscoveryStatistics,
    TERMINAL_STATES
)
from .range_expander import (
    RangeExpander,
    CIDRRangeExpander,
    OctetRangeExpander,
    expand_range
)

__all__ = [
    'AddressState',
    'HostRecord',
    'DiscoveryStatistics',
    'TERMINAL_STATES',
    'RangeExpander',
    'CIDRRangeExpander',
    'OctetRangeExpander',
    'expand_range'
]
