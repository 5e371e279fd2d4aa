"""
Zabbix API client for registering discovered hosts.

This module talks to the Zabbix JSON-RPC API: it logs in with the configured
credentials, checks whether a host with the discovered name already exists
and creates it with an SNMPv2 interface otherwise.
"""

import itertools
import json
import threading
from typing import Any, Dict, List, Optional

import requests

from .base_registrar import HostRegistrar
from ..core.data_models import HostRecord
from ..utils.error_handler import RegistrationError
from ..utils.logger import Logger, get_logger


# Zabbix interface type for SNMP agents
INTERFACE_TYPE_SNMP = 2
# host.monitored_by value for proxies (Zabbix 7.0+)
MONITORED_BY_PROXY = 1


class ZabbixAPIError(RegistrationError):
    """Custom exception for Zabbix API related errors."""

    pass


class ZabbixAuthenticationError(ZabbixAPIError):
    """Exception raised for authentication failures."""

    pass


class ZabbixConnectionError(ZabbixAPIError):
    """Exception raised for connection failures."""

    pass


class ZabbixAPIClient:
    """
    Minimal Zabbix JSON-RPC client with lazy, thread-safe login.
    """

    def __init__(
        self,
        url: str,
        user: str,
        password: str,
        ssl_verify: bool = True,
        timeout: int = 30,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize Zabbix API client.

        Args:
            url: Zabbix frontend URL or full ``api_jsonrpc.php`` endpoint
            user: API user name
            password: API user password
            ssl_verify: Whether to verify SSL certificates
            timeout: Request timeout in seconds
            session: Optional pre-built requests session
        """
        if not url.endswith("api_jsonrpc.php"):
            url = url.rstrip("/") + "/api_jsonrpc.php"
        self.url = url
        self.user = user
        self.password = password
        self.timeout = timeout

        # Session for connection reuse
        self.session = session or requests.Session()
        self.session.headers.update({"Content-Type": "application/json-rpc"})
        self.session.verify = ssl_verify

        self._auth_token: Optional[str] = None
        self._auth_lock = threading.Lock()
        self._request_ids = itertools.count(1)

    def call(self, method: str, params: Any, authenticated: bool = True) -> Any:
        """
        Invoke a Zabbix API method.

        Args:
            method: API method name (e.g. ``host.get``)
            params: Method parameters
            authenticated: Whether to send the session token

        Returns:
            The ``result`` member of the response

        Raises:
            ZabbixConnectionError: For connection issues
            ZabbixAuthenticationError: For authentication failures
            ZabbixAPIError: For other API errors
        """
        headers = {}
        if authenticated:
            headers["Authorization"] = f"Bearer {self._get_token()}"

        payload = {
            "jsonrpc": "2.0",
            "method": method,
            "params": params,
            "id": next(self._request_ids),
        }

        try:
            response = self.session.post(
                self.url, json=payload, headers=headers, timeout=self.timeout
            )
        except requests.exceptions.Timeout:
            raise ZabbixConnectionError(f"Request timeout to {self.url}")
        except requests.exceptions.ConnectionError as e:
            raise ZabbixConnectionError(f"Connection failed to {self.url}: {str(e)}")
        except requests.exceptions.RequestException as e:
            raise ZabbixConnectionError(f"Request failed: {str(e)}")

        if response.status_code in (401, 403):
            raise ZabbixAuthenticationError(f"Access denied by {self.url}")
        elif response.status_code >= 400:
            raise ZabbixAPIError(f"HTTP {response.status_code}: {response.text}")

        try:
            result = response.json()
        except json.JSONDecodeError:
            raise ZabbixAPIError(f"Invalid JSON response: {response.text}")

        if "error" in result:
            error = result["error"]
            message = f"{error.get('message', 'Unknown error')} {error.get('data', '')}".strip()
            if method == "user.login":
                raise ZabbixAuthenticationError(f"Login failed: {message}")
            raise ZabbixAPIError(f"Zabbix API error in {method}: {message}")

        return result.get("result")

    def _get_token(self) -> str:
        with self._auth_lock:
            if self._auth_token is None:
                self._auth_token = self.call(
                    "user.login",
                    {"username": self.user, "password": self.password},
                    authenticated=False,
                )
            return self._auth_token

    def find_hosts(self, host_name: str) -> List[Dict[str, Any]]:
        """Return hosts whose technical name equals ``host_name``."""
        return self.call(
            "host.get",
            {"output": ["hostid", "host"], "filter": {"host": [host_name]}},
        ) or []

    def create_host(self, params: Dict[str, Any]) -> str:
        """Create a host and return its id."""
        result = self.call("host.create", params)
        try:
            return result["hostids"][0]
        except (KeyError, IndexError, TypeError):
            raise ZabbixAPIError(f"Unexpected host.create result: {result!r}")


class ZabbixRegistrar(HostRegistrar):
    """
    Registers identified hosts in Zabbix, leaving existing hosts untouched.
    """

    def __init__(
        self,
        client: ZabbixAPIClient,
        snmp_port: int = 161,
        logger: Optional[Logger] = None,
    ):
        self.client = client
        self.snmp_port = snmp_port
        self.logger = logger or get_logger(__name__)

    def register(self, record: HostRecord, group_id: str, proxy_id: str) -> None:
        self.logger.info(
            f"[ZABBIX] Creating/checking host {record.identifier} ({record.address})",
            group=group_id or "-",
            proxy=proxy_id or "-",
        )

        existing = self.client.find_hosts(record.identifier)
        if existing:
            self.logger.info(
                f"[ZABBIX] Host {record.identifier} already registered",
                hostid=existing[0].get("hostid"),
            )
            return

        host_id = self.client.create_host(self.build_host_params(record, group_id, proxy_id))
        self.logger.success(f"[ZABBIX] Host {record.identifier} created", hostid=host_id)

    def build_host_params(self, record: HostRecord, group_id: str, proxy_id: str) -> Dict[str, Any]:
        """
        Build the ``host.create`` parameters for a discovered host.

        Args:
            record: Identified host
            group_id: Host group id
            proxy_id: Proxy id, empty for hosts monitored by the server

        Returns:
            Parameters for ``host.create``
        """
        params = {
            "host": record.identifier,
            "interfaces": [
                {
                    "type": INTERFACE_TYPE_SNMP,
                    "main": 1,
                    "useip": 1,
                    "ip": record.address,
                    "dns": "",
                    "port": str(self.snmp_port),
                    "details": {
                        "version": 2,
                        "bulk": 1,
                        "community": "{$SNMP_COMMUNITY}",
                    },
                }
            ],
            "groups": [{"groupid": group_id}] if group_id else [],
        }

        if proxy_id:
            params["monitored_by"] = MONITORED_BY_PROXY
            params["proxyid"] = proxy_id

        return params
