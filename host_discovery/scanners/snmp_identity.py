"""
SNMP identity queries for the Host Discovery Module.

This module retrieves the name a device reports for itself (sysName) using
the pysnmp asyncio API with SNMP v2c read-only community access.
"""

import asyncio
from typing import Optional

from pysnmp.error import PySnmpError
from pysnmp.hlapi.v3arch.asyncio import (
    SnmpEngine,
    CommunityData,
    UdpTransportTarget,
    ContextData,
    ObjectType,
    ObjectIdentity,
    get_cmd,
)
from pysnmp.proto.rfc1902 import IpAddress, OctetString, Opaque

from ..utils.error_handler import ConnectError, QueryError, UnexpectedTypeError
from ..utils.logger import Logger


SYS_NAME_OID = "1.3.6.1.2.1.1.5.0"


class SNMPIdentityClient:
    """
    Queries a reachable host for its identifying name over SNMP v2c.

    Every query opens its own engine, so one client can be shared by
    concurrent workers.
    """

    def __init__(
        self,
        community: str,
        timeout: float,
        retries: int = 1,
        port: int = 161,
        oid: str = SYS_NAME_OID,
        logger: Optional[Logger] = None,
    ):
        """
        Initialize the identity client.

        Args:
            community: Read-only community string
            timeout: Request timeout in seconds
            retries: Retries after the first request
            port: UDP port of the SNMP agent
            oid: OID holding the identifier
            logger: Logger instance for query progress
        """
        self.community = community
        self.timeout = timeout
        self.retries = retries
        self.port = port
        self.oid = oid
        self.logger = logger

    def get_identity(self, address: str) -> str:
        """
        Retrieve the identifier of a host.

        Args:
            address: IPv4 address of a reachable host

        Returns:
            The first string value returned for the identity OID

        Raises:
            ConnectError: If the SNMP session cannot be set up
            QueryError: If the request fails after its retry
            UnexpectedTypeError: If no returned value is string-typed
        """
        return asyncio.run(self._async_get_identity(address))

    async def _async_get_identity(self, address: str) -> str:
        self._log_debug(f"[SNMP] Connecting to {address}", port=self.port)

        snmp_engine = SnmpEngine()
        try:
            try:
                transport_target = await UdpTransportTarget.create(
                    (address, self.port), timeout=self.timeout, retries=self.retries
                )
            except (PySnmpError, OSError) as e:
                raise ConnectError(address, f"SNMP connection to {address} failed: {e}") from e

            try:
                errorIndication, errorStatus, errorIndex, varBinds = await get_cmd(
                    snmp_engine,
                    CommunityData(self.community, mpModel=1),  # SNMPv2c
                    transport_target,
                    ContextData(),
                    ObjectType(ObjectIdentity(self.oid)),
                    lookupMib=False,
                )
            except (PySnmpError, OSError) as e:
                raise QueryError(address, f"SNMP query to {address} failed: {e}") from e

            if errorIndication:
                raise QueryError(address, f"SNMP query to {address} failed: {errorIndication}")

            if errorStatus:
                problematic = varBinds[int(errorIndex) - 1][0] if errorIndex else "?"
                raise QueryError(
                    address,
                    f"SNMP error status from {address}: {errorStatus.prettyPrint()} at {problematic}",
                )

            for _, value in varBinds:
                if self._is_string_value(value):
                    identifier = value.asOctets().decode("utf-8", errors="replace")
                    self._log_debug(f"[SNMP] {address} answered sysName: {identifier}")
                    return identifier

            raise UnexpectedTypeError(address, f"OID {self.oid} did not return a string on {address}")

        finally:
            snmp_engine.close_dispatcher()

    @staticmethod
    def _is_string_value(value) -> bool:
        # IpAddress and Opaque are encoded as octet strings but are not text
        return isinstance(value, OctetString) and not isinstance(value, (IpAddress, Opaque))

    def _log_debug(self, message: str, **kwargs) -> None:
        """Log a debug message if logger is available."""
        if self.logger:
            self.logger.debug(message, **kwargs)
