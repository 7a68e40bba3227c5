"""
Status aggregation for OctoDash
Runs one fetch pipeline per printer in parallel and assembles an ordered snapshot
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Generic, Iterable, Mapping, Optional, Tuple, TypeVar

from octodash import config as config_module
from octodash.config import PrinterConfig
from octodash.integrations.errors import ConfigurationError, OctoDashError
from octodash.integrations.octoprint.api import OctoPrintAPI
from octodash.integrations.octoprint.types import RawJobInfo, RawPrinterState
from octodash.integrations.protocol import InventoryClient, PrinterClient
from octodash.integrations.spoolman.api import SpoolmanAPI
from octodash.integrations.spoolman.types import RawSpoolInfo
from octodash.logger import get_logger
from octodash.models import PrinterStatus, Snapshot, StatusKind
from octodash.normalizer import classify, normalize, offline_status

logger = get_logger(__name__)

T = TypeVar("T")

SPOOL_TOOL_INDEX = 0


class BlockOutcome(str, Enum):
    FETCHED = "fetched"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class BlockResult(Generic[T]):
    """Outcome of one optional sub-fetch, keeping "not attempted" apart from "failed"."""

    outcome: BlockOutcome
    value: Optional[T] = None
    error: Optional[OctoDashError] = None

    @classmethod
    def fetched(cls, value: T) -> "BlockResult[T]":
        return cls(BlockOutcome.FETCHED, value=value)

    @classmethod
    def skipped(cls) -> "BlockResult[T]":
        return cls(BlockOutcome.SKIPPED)

    @classmethod
    def failed(cls, error: OctoDashError) -> "BlockResult[T]":
        return cls(BlockOutcome.FAILED, error=error)


class StatusAggregator:
    """Polls every configured printer and its loaded spool."""

    def __init__(
        self,
        printers: Iterable[PrinterConfig],
        printer_clients: Mapping[str, PrinterClient],
        inventory_client: Optional[InventoryClient] = None,
    ) -> None:
        self.printers: Tuple[PrinterConfig, ...] = tuple(printers)
        self.printer_clients: Dict[str, PrinterClient] = dict(printer_clients)
        self.inventory_client = inventory_client

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "StatusAggregator":
        """Build the printer and inventory clients once for the process lifetime."""
        printers = config_module.parse_printers(config)
        timeout = config_module.request_timeout(config)
        clients = {
            printer.id: OctoPrintAPI(printer.octoprint_url, printer.api_key, timeout=timeout)
            for printer in printers
        }

        spoolman_url = config_module.spoolman_url(config)
        inventory = SpoolmanAPI(spoolman_url, timeout=timeout) if spoolman_url else None
        if inventory is None:
            logger.info("No spoolman_url configured, spool data will not be shown")

        logger.info(f"Aggregating {len(printers)} printer(s)")
        return cls(printers, clients, inventory)

    def poll(self, printers: Optional[Iterable[PrinterConfig]] = None) -> Snapshot:
        """
        Fetch the status of every printer concurrently

        Args:
            printers: Printers to poll, defaults to the configured list

        Returns:
            Snapshot with one record per printer, in the given order

        Raises:
            ConfigurationError: a printer has no client
        """
        printers = self.printers if printers is None else tuple(printers)
        missing = [printer.id for printer in printers if printer.id not in self.printer_clients]
        if missing:
            raise ConfigurationError(f"No client configured for printer(s): {', '.join(missing)}")

        if not printers:
            return Snapshot()

        with ThreadPoolExecutor(
            max_workers=len(printers), thread_name_prefix="octodash-poll"
        ) as pool:
            futures = [pool.submit(self.fetch_printer_status, printer) for printer in printers]
            # Collect by position so the snapshot follows configuration order
            statuses = tuple(future.result() for future in futures)

        return Snapshot(statuses)

    def fetch_printer_status(self, printer: PrinterConfig) -> PrinterStatus:
        """Run the state, job and spool pipeline for one printer."""
        client = self.printer_clients[printer.id]

        try:
            state = client.get_printer_state()
        except OctoDashError as e:
            logger.warning(f"Error fetching printer state for {printer.name}: {e}")
            return offline_status(printer, e)

        job = self._fetch_job(printer, client, state)
        spool = self._fetch_spool(printer, client)

        thumbnail = ""
        if job.value is not None and job.value.file_path:
            thumbnail = client.get_thumbnail_url(job.value.file_path)

        logger.debug(
            f"{printer.name}: state={state.text!r} job={job.outcome.value} spool={spool.outcome.value}"
        )
        return normalize(printer, state, job.value, spool.value, thumbnail)

    def _fetch_job(
        self, printer: PrinterConfig, client: PrinterClient, state: RawPrinterState
    ) -> BlockResult[RawJobInfo]:
        if classify(state) is not StatusKind.PRINTING:
            return BlockResult.skipped()

        try:
            return BlockResult.fetched(client.get_job())
        except OctoDashError as e:
            logger.info(f"Job info unavailable for {printer.name}: {e}")
            return BlockResult.failed(e)

    def _fetch_spool(
        self, printer: PrinterConfig, client: PrinterClient
    ) -> BlockResult[RawSpoolInfo]:
        # Without an inventory the spool id has no use, so the plugin call is skipped too
        if self.inventory_client is None:
            return BlockResult.skipped()

        try:
            spool_id = client.get_current_spool(SPOOL_TOOL_INDEX)
        except OctoDashError as e:
            logger.info(f"Current spool unavailable for {printer.name}: {e}")
            return BlockResult.failed(e)

        if not spool_id:
            return BlockResult.skipped()

        try:
            return BlockResult.fetched(self.inventory_client.get_spool(spool_id))
        except OctoDashError as e:
            logger.info(f"Spool {spool_id} lookup failed for {printer.name}: {e}")
            return BlockResult.failed(e)
