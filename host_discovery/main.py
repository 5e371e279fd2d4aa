"""
Main entry point for the Host Discovery Module.

This module provides the command-line interface for the discovery tool,
including argument parsing, configuration loading, pre-flight checks and
wiring of the discovery pipeline.
"""

import argparse
import shutil
import sys
from typing import Optional

from . import __version__
from .config.config_loader import ConfigLoader, DiscoveryConfig
from .core.discovery_pipeline import DiscoveryPipeline
from .registration.base_registrar import HostRegistrar, LoggingRegistrar
from .registration.zabbix_client import ZabbixAPIClient, ZabbixRegistrar
from .scanners.ping_prober import PingProber
from .scanners.snmp_identity import SNMPIdentityClient
from .utils.error_handler import (
    ConfigurationError, ErrorContext, ErrorHandler, ErrorSeverity, ErrorType
)
from .utils.logger import LogLevel, get_logger, set_log_level


class HostDiscoveryApp:
    """
    Main application class for Host Discovery Module.

    Handles configuration loading, pre-flight checks and the discovery run.
    """

    def __init__(self):
        """Initialize the application."""
        self.logger = get_logger(__name__)
        self.error_handler = ErrorHandler(self.logger)

    def _check_tool_availability(self, tool_name: str) -> bool:
        """
        Check if a required external tool is available.

        Args:
            tool_name: Name of the tool to check

        Returns:
            bool: True if tool is available, False otherwise
        """
        tool_path = shutil.which(tool_name)
        if tool_path:
            self.logger.debug(f"Found {tool_name} at: {tool_path}")
            return True
        self.logger.error(f"Required tool '{tool_name}' not found in PATH")
        return False

    def _perform_preflight_checks(self) -> bool:
        """
        Perform pre-flight checks for required external tools.

        Returns:
            bool: True if all checks pass, False otherwise
        """
        self.logger.section("PRE-FLIGHT CHECKS")

        if not self._check_tool_availability("ping"):
            self.logger.info("Installation suggestions for ping:")
            self.logger.info("  - Ubuntu/Debian: sudo apt-get install iputils-ping")
            self.logger.info("  - CentOS/RHEL: sudo yum install iputils")
            self.logger.error("Some pre-flight checks failed - see messages above")
            return False

        self.logger.success("All pre-flight checks passed")
        return True

    def build_registrar(self, config: DiscoveryConfig, dry_run: bool) -> HostRegistrar:
        """
        Pick the registration collaborator for this run.

        Args:
            config: Discovery configuration
            dry_run: Only log hosts instead of registering them

        Returns:
            HostRegistrar to hand identified hosts to
        """
        if dry_run:
            self.logger.info("Dry run: hosts will be logged, not registered")
            return LoggingRegistrar(self.logger)
        if not config.zabbix_url:
            self.logger.warning("No zabbix_url configured: hosts will be logged, not registered")
            return LoggingRegistrar(self.logger)
        if not config.zabbix_group_id:
            self.logger.warning(
                "No zabbix_group_id configured: Zabbix rejects hosts without a group",
                zabbix_url=config.zabbix_url,
            )

        client =ZabbixAPIClient(config.zabbix_url, config.zabbix_user, config.zabbix_pass)
        return ZabbixRegistrar(client, snmp_port=config.snmp_port, logger=self.logger)

    def build_pipeline(self, config: DiscoveryConfig, dry_run: bool = False) -> DiscoveryPipeline:
        """Wire the discovery pipeline from the configuration."""
        return DiscoveryPipeline(
            config=config,
            prober=PingProber(self.logger),
            identity_client=SNMPIdentityClient(
                community=config.snmp_community,
                timeout=config.snmp_timeout,
                retries=1,
                port=config.snmp_port,
                logger=self.logger,
            ),
            registrar=self.build_registrar(config, dry_run),
            logger=self.logger,
        )

    def run(self, args: argparse.Namespace) -> int:
        """
        Run the host discovery application.

        Args:
            args: Parsed command line arguments

        Returns:
            int: Exit code (0 for success, non-zero for failure)
        """
        self.logger.info("Starting host discovery...")

        try:
            config = ConfigLoader(self.logger).load(args.config)
        except ConfigurationError as e:
            self.error_handler.handle_error(e, ErrorContext(
                error_type=ErrorType.CONFIGURATION_ERROR,
                severity=ErrorSeverity.CRITICAL,
                operation="load_config",
                component="HostDiscoveryApp",
                additional_info={"config_file": args.config},
            ))
            return 1

        if not self._perform_preflight_checks():
            if not args.skip_checks:
                self.logger.error("Pre-flight checks failed. Use --skip-checks to bypass.")
                return 1
            self.logger.warning("Skipping pre-flight checks as requested")

        try:
            pipeline = self.build_pipeline(config, dry_run=args.dry_run)
            pipeline.run()
        except KeyboardInterrupt:
            self.logger.warning("Discovery interrupted by user")
            return 130  # Standard exit code for SIGINT

        return 0


def create_argument_parser() -> argparse.ArgumentParser:
    """
    Create and configure the command line argument parser.

    Returns:
        argparse.ArgumentParser: Configured argument parser
    """
    parser = argparse.ArgumentParser(
        prog="host_discovery",
        description="Host Discovery - ping sweep, SNMP sysName lookup and Zabbix registration",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m host_discovery                              # Use ./discovery.conf
  python -m host_discovery --config /etc/discovery.yml  # Use a custom configuration
  python -m host_discovery --dry-run                    # Log hosts without registering them
  python -m host_discovery --verbose                    # Enable verbose logging
        """
    )

    parser.add_argument(
        "--config", "-c",
        type=str,
        default="discovery.conf",
        help="Configuration file (YAML or JSON). Defaults to ./discovery.conf"
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Log identified hosts instead of registering them in Zabbix"
    )

    parser.add_argument(
        "--skip-checks",
        action="store_true",
        help="Skip pre-flight checks for external tools (ping)"
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging output"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"Host Discovery {__version__}"
    )

    return parser


def main(argv: Optional[list] = None) -> int:
    """
    Main entry point for the Host Discovery Module.

    Returns:
        int: Exit code (0 for success, non-zero for failure)
    """
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        set_log_level(LogLevel.DEBUG)

    app = HostDiscoveryApp()
    return app.run(args)


if __name__ == "__main__":
    sys.exit(main())
