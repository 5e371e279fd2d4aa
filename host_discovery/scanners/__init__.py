"""
Per-address probes used by the discovery pipeline.

This package contains the reachability prober interface with its ping
implementation and the SNMP identity query client.
"""

from .ping_prober import ReachabilityProber, PingProber
from .snmp_identity import SNMPIdentityClient, SYS_NAME_OID

__all__ = [
    'ReachabilityProber',
    'PingProber',
    'SNMPIdentityClient',
    'SYS_NAME_OID'
]
