"""Protocols for the upstream clients the aggregator depends on."""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from octodash.integrations.octoprint.types import RawJobInfo, RawPrinterState
from octodash.integrations.spoolman.types import RawSpoolInfo


@runtime_checkable
class PrinterClient(Protocol):
    """Client capabilities needed from a printer controller."""

    def get_printer_state(self) -> RawPrinterState:
        """Return state flags and temperatures."""

    def get_job(self) -> RawJobInfo:
        """Return the active job and its progress."""

    def get_current_spool(self, tool: int = 0) -> Optional[str]:
        """Return the id of the spool loaded on a tool, None when nothing is loaded."""

    def get_thumbnail_url(self, path: str) -> str:
        """Return the thumbnail URL for a job file path."""


@runtime_checkable
class InventoryClient(Protocol):
    """Client capabilities needed from the filament inventory."""

    def get_spool(self, spool_id: str) -> RawSpoolInfo:
        """Return the spool record for an id."""
