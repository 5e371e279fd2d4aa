"""
Configuration loader for the Host Discovery Module.

Reads the discovery configuration from a YAML document (plain JSON files are
accepted too), validates it against a JSON schema and returns an immutable
DiscoveryConfig. Loading is all-or-nothing: any problem raises
ConfigurationError and no discovery is attempted.
"""

import yaml
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

import jsonschema

from ..utils.error_handler import ConfigurationError
from ..utils.logger import Logger, get_logger


CONFIG_SCHEMA = {
    "type": "object",
    "properties": {
        "zabbix_url": {"type": "string"},
        "zabbix_user": {"type": "string"},
        "zabbix_pass": {"type": "string"},
        "zabbix_group_id": {"type": ["string", "integer"]},
        "zabbix_proxy_id": {"type": ["string", "integer"]},
        "snmp_community": {"type": "string", "minLength": 1},
        "snmp_port": {"type": "integer", "minimum": 1, "maximum": 65535},
        "ping_timeout": {"type": "number", "exclusiveMinimum": 0},
        "snmp_timeout": {"type": "number", "exclusiveMinimum": 0},
        "workers": {"type": "integer", "minimum": 1},
        "ranges": {"type": "array", "items": {"type": "string"}},
    },
    "required": ["snmp_community", "ping_timeout", "snmp_timeout", "workers", "ranges"],
}

_INTEGER_KEYS = ("workers", "snmp_port")


@dataclass(frozen=True)
class DiscoveryConfig:
    """
    Process-wide discovery settings, read-only once loaded.

    Attributes:
        snmp_community: Read-only SNMP v2c community string
        ping_timeout: Reachability probe timeout in seconds
        snmp_timeout: SNMP request timeout in seconds
        workers: Number of concurrent discovery workers
        ranges: Range specifications in the order they are enumerated
        zabbix_url: Zabbix JSON-RPC endpoint, empty to skip real registration
        zabbix_user: Zabbix API user
        zabbix_pass: Zabbix API password
        zabbix_group_id: Host group new hosts are placed in
        zabbix_proxy_id: Proxy monitoring new hosts, empty for the server
        snmp_port: UDP port of the SNMP agents
    """
    snmp_community: str
    ping_timeout: float
    snmp_timeout: float
    workers: int
    ranges: Tuple[str, ...] = field(default_factory=tuple)
    zabbix_url: str = ""
    zabbix_user: str = ""
    zabbix_pass: str = field(default="", repr=False)
    zabbix_group_id: str = ""
    zabbix_proxy_id: str = ""
    snmp_port: int = 161

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DiscoveryConfig":
        """
        Build a configuration from an already parsed document.

        Args:
            data: Parsed configuration mapping

        Returns:
            Validated DiscoveryConfig

        Raises:
            ConfigurationError: If the mapping does not match the schema
        """
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Configuration must be a mapping, got {type(data).__name__}"
            )

        try:
            jsonschema.validate(instance=data, schema=CONFIG_SCHEMA)
        except jsonschema.ValidationError as e:
            location = ".".join(str(part) for part in e.absolute_path) or "<root>"
            raise ConfigurationError(f"Invalid configuration at {location}: {e.message}") from e

        # jsonschema accepts 2.0 as an "integer"; counts and ports must be int
        for key in _INTEGER_KEYS:
            value = data.get(key)
            if value is not None and (isinstance(value, bool) or not isinstance(value, int)):
                raise ConfigurationError(
                    f"Invalid configuration at {key}: {value!r} is not an integer"
                )

        return cls(
            snmp_community=data["snmp_community"],
            ping_timeout=data["ping_timeout"],
            snmp_timeout=data["snmp_timeout"],
            workers=data["workers"],
            ranges=tuple(data["ranges"]),
            zabbix_url=data.get("zabbix_url", ""),
            zabbix_user=data.get("zabbix_user", ""),
            zabbix_pass=data.get("zabbix_pass", ""),
            zabbix_group_id=str(data.get("zabbix_group_id", "")),
            zabbix_proxy_id=str(data.get("zabbix_proxy_id", "")),
            snmp_port=data.get("snmp_port", 161),
        )


class ConfigLoader:
    """
    Loads and validates the discovery configuration file.
    """

    def __init__(self, logger: Optional[Logger] = None):
        self.logger = logger or get_logger(__name__)

    def load(self, config_path: Union[str, Path]) -> DiscoveryConfig:
        """
        Load the discovery configuration.

        Args:
            config_path: Path of the YAML or JSON configuration file

        Returns:
            DiscoveryConfig with the loaded settings

        Raises:
            ConfigurationError: If the file cannot be read, parsed or validated
        """
        config_path = Path(config_path)
        self.logger.info(f"Loading configuration file: {config_path}")

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                config_data = yaml.safe_load(f)
        except OSError as e:
            raise ConfigurationError(f"Cannot read {config_path}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Cannot parse {config_path}: {e}") from e

        config = DiscoveryConfig.from_dict(config_data)

        self.logger.info(
            "Configuration loaded",
            workers=config.workers,
            ranges=len(config.ranges),
            ping_timeout=config.ping_timeout,
            snmp_timeout=config.snmp_timeout,
            zabbix_url=config.zabbix_url or "-",
        )
        return config


def load_discovery_config(config_path: Union[str, Path], logger: Optional[Logger] = None) -> DiscoveryConfig:
    """Shortcut for ``ConfigLoader(logger).load(config_path)``."""
    return ConfigLoader(logger).load(config_path)
