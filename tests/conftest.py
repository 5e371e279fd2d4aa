"""
Shared fixtures and fake collaborators for the host discovery tests.
"""

import threading
import time
from collections import Counter

import pytest

from host_discovery.config.config_loader import DiscoveryConfig
from host_discovery.registration.base_registrar import HostRegistrar
from host_discovery.scanners.ping_prober import ReachabilityProber
from host_discovery.utils.error_handler import QueryError, RegistrationError
from host_discovery.utils.logger import Logger, LogLevel


class FakeProber(ReachabilityProber):
    """Counts probes; addresses in ``alive`` answer, the rest do not."""

    def __init__(self, alive=(), delay=0.0, raise_for=()):
        self.alive = set(alive)
        self.delay = delay
        self.raise_for = set(raise_for)
        self.calls = Counter()
        self.timeouts = []
        self.order = []
        self._lock = threading.Lock()

    def probe(self, address, timeout):
        with self._lock:
            self.calls[address] += 1
            self.timeouts.append(timeout)
            self.order.append(address)
        if self.delay:
            time.sleep(self.delay)
        if address in self.raise_for:
            raise RuntimeError(f"probe exploded on {address}")
        return address in self.alive


class FakeIdentityClient:
    """Returns ``host-<last octet>`` unless the address is listed in ``failing``."""

    def __init__(self, failing=()):
        self.failing = set(failing)
        self.calls = Counter()
        self._lock = threading.Lock()

    def get_identity(self, address):
        with self._lock:
            self.calls[address] += 1
        if address in self.failing:
            raise QueryError(address, f"no answer from {address}")
        return f"host-{address.rsplit('.', 1)[-1]}"


class RecordingRegistrar(HostRegistrar):
    """Records every registration; addresses in ``failing`` are rejected."""

    def __init__(self, failing=()):
        self.failing = set(failing)
        self.registered = []
        self._lock = threading.Lock()

    def register(self, record, group_id, proxy_id):
        with self._lock:
            self.registered.append((record, group_id, proxy_id))
        if record.address in self.failing:
            raise RegistrationError(f"rejected {record.address}")


@pytest.fixture
def quiet_logger():
    return Logger("test", min_level=LogLevel.ERROR)


@pytest.fixture
def make_config():
    def _make(**overrides):
        values = dict(
            snmp_community="public",
            ping_timeout=1,
            snmp_timeout=2,
            workers=4,
            ranges=(),
            zabbix_group_id="22",
            zabbix_proxy_id="10452",
        )
        values.update(overrides)
        return DiscoveryConfig(**values)

    return _make
