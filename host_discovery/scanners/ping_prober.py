"""
Reachability probing for the Host Discovery Module.

A prober answers a single question per address: does it respond within the
timeout? Failures of any kind are a negative answer, never an exception.
"""

import platform
import subprocess
from abc import ABC, abstractmethod
from typing import List, Optional

from ..utils.logger import Logger


class ReachabilityProber(ABC):
    """Interface for liveness checks used by the discovery pipeline."""

    @abstractmethod
    def probe(self, address: str, timeout: float) -> bool:
        """
        Check whether an address is alive.

        Args:
            address: IPv4 address to probe
            timeout: Probe timeout in seconds

        Returns:
            True if the host answered, False otherwise
        """
        pass


class PingProber(ReachabilityProber):
    """
    Sends one ICMP echo request through the system ``ping`` command.
    """

    def __init__(self, logger: Optional[Logger] = None):
        self.logger = logger
        self.system = platform.system().lower()

    def build_command(self, address: str, timeout: float) -> List[str]:
        """
        Build the ping command line for the current OS.

        Args:
            address: IPv4 address to ping
            timeout: Timeout in seconds

        Returns:
            Command as a list of arguments
        """
        if self.system == "windows":
            # Windows ping: ping -n 1 -w <milliseconds> IP
            return ["ping", "-n", "1", "-w", str(int(timeout * 1000)), address]
        # Unix ping: ping -c 1 -W <seconds> IP
        return ["ping", "-c", "1", "-W", str(max(1, int(round(timeout)))), address]

    def probe(self, address: str, timeout: float) -> bool:
        self._log_debug(f"[PING] Probing {address}")
        try:
            result = subprocess.run(
                self.build_command(address, timeout),
                capture_output=True,
                text=True,
                timeout=timeout + 2
            )
        except subprocess.TimeoutExpired:
            self._log_debug(f"[PING] {address} timed out")
            return False
        except OSError as e:
            self._log_debug(f"[PING] Could not run ping for {address}: {e}")
            return False

        if result.returncode == 0:
            self._log_debug(f"[PING] {address} responded")
            return True

        self._log_debug(f"[PING] {address} did not respond", returncode=result.returncode)
        return False

    def _log_debug(self, message: str, **kwargs) -> None:
        """Log a debug message if logger is available."""
        if self.logger:
            self.logger.debug(message, **kwargs)
