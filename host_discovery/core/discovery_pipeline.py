"""
Discovery pipeline for the Host Discovery Module.

This module provides the DiscoveryPipeline class that expands the configured
ranges into a bounded work queue and drains it with a fixed pool of workers.
Each address goes through reachability probe -> identity query ->
registration; a failure at any stage ends the processing of that address
only.
"""

import queue
import time
from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, Optional

from .data_models import AddressState, DiscoveryStatistics, HostRecord
from .range_expander import expand_range
from ..config.config_loader import DiscoveryConfig
from ..registration.base_registrar import HostRegistrar
from ..scanners.ping_prober import ReachabilityProber
from ..scanners.snmp_identity import SNMPIdentityClient
from ..utils.error_handler import (
    ConfigurationError, ErrorContext, ErrorHandler, ErrorSeverity, ErrorType,
    IdentityQueryError, RangeFormatError, RegistrationError
)
from ..utils.logger import Logger, get_logger


# Pushed once per worker to close the queue
_QUEUE_CLOSED = object()


class DiscoveryPipeline:
    """
    Runs discovery over a list of ranges with a bounded worker pool.

    One producer (the caller of ``run``) enumerates the ranges into a queue
    holding at most ``workers`` addresses; ``workers`` consumers pull from it
    until it is closed and drained. ``run`` returns only once every worker has
    exited. Workers share nothing mutable: each returns its own tally, and the
    tallies are merged after the join.
    """

    def __init__(
        self,
        config: DiscoveryConfig,
        prober: ReachabilityProber,
        identity_client: SNMPIdentityClient,
        registrar: HostRegistrar,
        logger: Optional[Logger] = None,
    ):
        """
        Initialize the pipeline.

        Args:
            config: Discovery configuration (read-only)
            prober: Reachability check used in the probing stage
            identity_client: Client used in the querying stage
            registrar: Collaborator used in the registering stage
            logger: Logger instance for pipeline progress

        Raises:
            ConfigurationError: If the configured worker count is below 1
        """
        if config.workers < 1:
            raise ConfigurationError(f"Worker count must be at least 1, got {config.workers}")

        self.config = config
        self.prober = prober
        self.identity_client = identity_client
        self.registrar = registrar
        self.logger = logger or get_logger(__name__)
        self.error_handler = ErrorHandler(self.logger)

    def run(self, ranges: Optional[Iterable[str]] = None) -> DiscoveryStatistics:
        """
        Discover every address of the given ranges.

        Args:
            ranges: Range specifications, defaults to the configured ranges

        Returns:
            DiscoveryStatistics summarizing the run
        """
        if ranges is None:
            ranges = self.config.ranges

        workers = self.config.workers
        statistics = DiscoveryStatistics()
        start_time = time.monotonic()

        self.logger.section("HOST DISCOVERY")
        self.logger.info("Starting discovery", workers=workers)

        work_queue: "queue.Queue" = queue.Queue(maxsize=workers)

        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="discovery") as executor:
            futures = [
                executor.submit(self._worker, work_queue) for _ in range(workers)
            ]

            try:
                self._produce(ranges, work_queue, statistics)
            finally:
                for _ in range(workers):
                    work_queue.put(_QUEUE_CLOSED)

            for future in futures:
                statistics.outcomes.update(future.result())

        statistics.duration = time.monotonic() - start_time

        self.logger.success(
            f"Discovery finished in {statistics.duration:.2f}s",
            **statistics.as_dict(),
        )
        return statistics

    def _produce(
        self,
        ranges: Iterable[str],
        work_queue: "queue.Queue",
        statistics: DiscoveryStatistics,
    ) -> None:
        """Expand each range in order and push its addresses, blocking when the queue is full."""
        for range_spec in ranges:
            self.logger.info(f"Expanding range {range_spec}")
            try:
                addresses = expand_range(range_spec)
            except RangeFormatError as e:
                statistics.ranges_skipped += 1
                self.error_handler.handle_error(
                    e,
                    ErrorContext(
                        error_type=ErrorType.RANGE_FORMAT_ERROR,
                        severity=ErrorSeverity.HIGH,
                        operation="expand_range",
                        component="DiscoveryPipeline",
                        additional_info={"range": range_spec},
                    ),
                )
                continue

            statistics.ranges_processed += 1
            self.logger.debug(f"Range {range_spec} expanded", addresses=len(addresses))

            for address in addresses:
                work_queue.put(address)
                statistics.addresses_enqueued += 1

    def _worker(self, work_queue: "queue.Queue") -> Counter:
        """
        Consume addresses until the queue is closed.

        Returns:
            Count of processed addresses per terminal state
        """
        tally: Counter = Counter()
        while True:
            address = work_queue.get()
            if address is _QUEUE_CLOSED:
                return tally
            tally[self.process_address(address)] += 1

    def process_address(self, address: str) -> AddressState:
        """
        Run one address through probe, identity query and registration.

        Args:
            address: IPv4 address to process

        Returns:
            The terminal state the address ended in
        """
        state = AddressState.PROBING
        try:
            if not self.prober.probe(address, self.config.ping_timeout):
                self.logger.debug(f"{address} is unreachable")
                return AddressState.UNREACHABLE

            self.logger.info(f"{address} is reachable")
            state = AddressState.QUERYING
            try:
                identifier = self.identity_client.get_identity(address)
            except IdentityQueryError as e:
                self.error_handler.handle_error(e, self._address_context(
                    ErrorType.IDENTITY_QUERY_ERROR, ErrorSeverity.MEDIUM, "get_identity", address
                ))
                return AddressState.IDENTITY_FAILED

            self.logger.info(f"{address} identified as {identifier}")
            state = AddressState.REGISTERING
            record = HostRecord(identifier=identifier, address=address)
            try:
                self.registrar.register(
                    record, self.config.zabbix_group_id, self.config.zabbix_proxy_id
                )
            except RegistrationError as e:
                self.error_handler.handle_error(e, self._address_context(
                    ErrorType.REGISTRATION_ERROR, ErrorSeverity.HIGH, "register", address
                ))
                return AddressState.REGISTRATION_FAILED

            return AddressState.REGISTERED

        except Exception as e:
            # A broken collaborator must not take the worker down with it
            self.error_handler.handle_error(e, self._address_context(
                ErrorType.UNEXPECTED_ERROR, ErrorSeverity.CRITICAL, state.value, address
            ))
            return _FAILED_AT[state]

    @staticmethod
    def _address_context(
        error_type: ErrorType, severity: ErrorSeverity, operation: str, address: str
    ) -> ErrorContext:
        return ErrorContext(
            error_type=error_type,
            severity=severity,
            operation=operation,
            component="DiscoveryPipeline",
            additional_info={"address": address},
        )


# Terminal state recorded when an unexpected exception escapes a stage
_FAILED_AT = {
    AddressState.PROBING: AddressState.UNREACHABLE,
    AddressState.QUERYING: AddressState.IDENTITY_FAILED,
    AddressState.REGISTERING: AddressState.REGISTRATION_FAILED,
}
