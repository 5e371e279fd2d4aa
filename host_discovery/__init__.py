"""
Host Discovery Module

Discovers hosts over configured IP ranges: ping sweep, SNMP sysName lookup
and registration of the identified hosts in Zabbix.
"""

__version__ = "1.0.0"
__author__ = "Host Discovery Team"
