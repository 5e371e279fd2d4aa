"""
Registration of discovered hosts with the monitoring system.
"""

from .base_registrar import HostRegistrar, LoggingRegistrar
from .zabbix_client import (
    ZabbixAPIClient, ZabbixRegistrar, ZabbixAPIError,
    ZabbixAuthenticationError, ZabbixConnectionError
)

__all__ = [
    'HostRegistrar',
    'LoggingRegistrar',
    'ZabbixAPIClient',
    'ZabbixRegistrar',
    'ZabbixAPIError',
    'ZabbixAuthenticationError',
    'ZabbixConnectionError'
]
