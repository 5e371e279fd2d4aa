"""
Registration interface for discovered hosts.
"""

from abc import ABC, abstractmethod
from typing import Optional

from ..core.data_models import HostRecord
from ..utils.logger import Logger


class HostRegistrar(ABC):
    """
    Hands identified hosts to the monitoring system.

    Implementations are called synchronously from discovery workers, once per
    identified host, and must be safe to call from several threads.
    """

    @abstractmethod
    def register(self, record: HostRecord, group_id: str, proxy_id: str) -> None:
        """
        Register a host.

        Args:
            record: Identified host
            group_id: Monitoring group the host belongs to
            proxy_id: Proxy that monitors the host, empty for none

        Raises:
            RegistrationError: If the monitoring system rejects the host
        """
        pass


class LoggingRegistrar(HostRegistrar):
    """Only logs the hosts it would register. Always succeeds."""

    def __init__(self, logger: Optional[Logger] = None):
        self.logger = logger

    def register(self, record: HostRecord, group_id: str, proxy_id: str) -> None:
        if self.logger:
            self.logger.info(
                f"[DRY-RUN] Would register host {record.identifier} ({record.address})",
                group=group_id or "-",
                proxy=proxy_id or "-",
            )
