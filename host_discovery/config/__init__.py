"""
Configuration module for Host Discovery.
Provides loading and validation of the discovery configuration.
"""

from .config_loader import ConfigLoader, DiscoveryConfig, load_discovery_config

__all__ = ['ConfigLoader', 'DiscoveryConfig', 'load_discovery_config']
