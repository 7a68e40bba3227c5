"""Map raw upstream snapshots onto the canonical PrinterStatus record."""

from typing import Any, Dict, Optional

from octodash.config import PrinterConfig
from octodash.integrations.octoprint.types import RawJobInfo, RawPrinterState
from octodash.integrations.spoolman.types import RawSpoolInfo
from octodash.models import PrinterStatus, ProgressInfo, StatusKind, TemperatureInfo


def classify(state: RawPrinterState) -> StatusKind:
    """First match wins, so a printer flagged both printing and error reads as printing."""
    if state.printing:
        return StatusKind.PRINTING
    if state.ready:
        return StatusKind.IDLE
    if state.error:
        return StatusKind.ERROR
    return StatusKind.OFFLINE


def temperatures_from_state(state: RawPrinterState) -> TemperatureInfo:
    return TemperatureInfo(
        bed_actual=state.bed_actual,
        bed_target=state.bed_target,
        hotend_actual=state.tool_actual,
        hotend_target=state.tool_target,
    )


def progress_from_job(job: RawJobInfo) -> ProgressInfo:
    return ProgressInfo(
        completion=job.completion,
        print_time=job.print_time,
        print_time_left=job.print_time_left,
        estimated_total=round(job.estimated_print_time),
        file_name=job.file_name,
        filament_length=job.filament_length,
    )


def spool_to_mapping(spool: RawSpoolInfo) -> Dict[str, Any]:
    """Flatten a spool into the loosely typed block the dashboard reads."""
    return {
        "id": spool.id,
        "name": spool.name,
        "material": spool.material,
        "vendor": spool.vendor,
        "color": f"#{spool.color_hex}" if spool.color_hex else "",
        "weight": spool.total_weight,
        "used": spool.used_weight,
        "remaining": spool.remaining_weight,
    }


def normalize(
    printer: PrinterConfig,
    state: RawPrinterState,
    job: Optional[RawJobInfo] = None,
    spool: Optional[RawSpoolInfo] = None,
    thumbnail_url: str = "",
) -> PrinterStatus:
    """
    Build the status record for a printer whose state fetch succeeded

    Args:
        printer: Configured identity of the printer
        state: Parsed /api/printer snapshot
        job: Parsed job snapshot, None when not fetched or the fetch failed
        spool: Resolved spool, None when not fetched or the lookup failed
        thumbnail_url: Thumbnail for the active job file

    Returns:
        PrinterStatus with temperatures always present
    """
    return PrinterStatus(
        id=printer.id,
        name=printer.name,
        octoprint_url=printer.octoprint_url,
        status=classify(state),
        state=state.text,
        progress=progress_from_job(job) if job is not None else None,
        temperatures=temperatures_from_state(state),
        current_spool=spool_to_mapping(spool) if spool is not None else None,
        thumbnail_url=thumbnail_url if job is not None else "",
    )


def offline_status(printer: PrinterConfig, exc: Exception) -> PrinterStatus:
    """Status record for a printer whose state could not be fetched."""
    return PrinterStatus(
        id=printer.id,
        name=printer.name,
        octoprint_url=printer.octoprint_url,
        status=StatusKind.OFFLINE,
        error=str(exc) or exc.__class__.__name__,
        error_kind=getattr(exc, "kind", "internal"),
    )
