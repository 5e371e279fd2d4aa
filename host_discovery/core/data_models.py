"""
Core data models and enums for the Host Discovery Module.

This module defines the data structures that flow through a discovery run:
the per-address state machine, the host record handed to registration, and
the statistics summarizing a finished run.
"""

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict


class AddressState(Enum):
    """
    States of a single address moving through the discovery pipeline.

    QUEUED -> PROBING -> UNREACHABLE | REACHABLE -> QUERYING ->
    IDENTITY_FAILED | IDENTIFIED -> REGISTERING -> REGISTERED | REGISTRATION_FAILED
    """
    QUEUED = "queued"
    PROBING = "probing"
    UNREACHABLE = "unreachable"
    REACHABLE = "reachable"
    QUERYING = "querying"
    IDENTITY_FAILED = "identity_failed"
    IDENTIFIED = "identified"
    REGISTERING = "registering"
    REGISTERED = "registered"
    REGISTRATION_FAILED = "registration_failed"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATES


TERMINAL_STATES = frozenset({
    AddressState.UNREACHABLE,
    AddressState.IDENTITY_FAILED,
    AddressState.REGISTERED,
    AddressState.REGISTRATION_FAILED,
})


@dataclass(frozen=True)
class HostRecord:
    """
    A host that answered both the reachability probe and the identity query.

    Attributes:
        identifier: Name reported by the host (SNMP sysName)
        address: IPv4 address the host was discovered at
    """
    identifier: str
    address: str


@dataclass
class DiscoveryStatistics:
    """
    Statistics about a completed discovery run.

    Attributes:
        addresses_enqueued: Number of addresses pushed to the work queue
        ranges_processed: Number of ranges that expanded successfully
        ranges_skipped: Number of ranges rejected as malformed
        outcomes: Count of addresses per terminal state
        duration: Wall-clock duration of the run in seconds
    """
    addresses_enqueued: int = 0
    ranges_processed: int = 0
    ranges_skipped: int = 0
    outcomes: Counter = field(default_factory=Counter)
    duration: float = 0.0

    @property
    def addresses_processed(self) -> int:
        return sum(self.outcomes.values())

    def count(self, state: AddressState) -> int:
        return self.outcomes.get(state, 0)

    def as_dict(self) -> Dict[str, int]:
        """Flatten the outcome counters for log output."""
        summary = {state.value: self.count(state) for state in AddressState if state.is_terminal}
        summary["enqueued"] = self.addresses_enqueued
        summary["ranges_skipped"] = self.ranges_skipped
        return summary
