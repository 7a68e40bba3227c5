"""Canonical status records served to the dashboard."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple


class StatusKind(str, Enum):
    IDLE = "idle"
    PRINTING = "printing"
    ERROR = "error"
    OFFLINE = "offline"


@dataclass(frozen=True)
class ProgressInfo:
    completion: float = 0.0  # 0-100
    print_time: int = 0  # seconds
    print_time_left: int = 0  # seconds
    estimated_total: int = 0  # seconds
    file_name: str = ""
    filament_length: float = 0.0  # mm

    def to_dict(self) -> Dict[str, Any]:
        return {
            "completion": self.completion,
            "print_time": self.print_time,
            "print_time_left": self.print_time_left,
            "estimated_total": self.estimated_total,
            "file_name": self.file_name,
            "filament_length": self.filament_length,
        }


@dataclass(frozen=True)
class TemperatureInfo:
    bed_actual: float = 0.0
    bed_target: float = 0.0
    hotend_actual: float = 0.0
    hotend_target: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "bed_actual": self.bed_actual,
            "bed_target": self.bed_target,
            "hotend_actual": self.hotend_actual,
            "hotend_target": self.hotend_target,
        }


@dataclass(frozen=True)
class PrinterStatus:
    """One printer's state for one poll cycle. Absent blocks are None."""

    id: str
    name: str
    octoprint_url: str
    status: StatusKind = StatusKind.OFFLINE
    state: str = ""
    progress: Optional[ProgressInfo] = None
    temperatures: Optional[TemperatureInfo] = None
    current_spool: Optional[Mapping[str, Any]] = None
    thumbnail_url: str = ""
    error: str = ""
    error_kind: str = ""

    def __post_init__(self) -> None:
        # Accept plain strings but always store the enum
        object.__setattr__(self, "status", StatusKind(self.status))
        if self.current_spool is not None:
            object.__setattr__(self, "current_spool", MappingProxyType(dict(self.current_spool)))

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready dict; optional fields are left out when empty."""
        data: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "octoprint_url": self.octoprint_url,
            "status": self.status.value,
            "state": self.state,
        }
        if self.progress is not None:
            data["progress"] = self.progress.to_dict()
        if self.temperatures is not None:
            data["temperatures"] = self.temperatures.to_dict()
        if self.current_spool is not None:
            data["current_spool"] = dict(self.current_spool)
        if self.thumbnail_url:
            data["thumbnail_url"] = self.thumbnail_url
        if self.error:
            data["error"] = self.error
        if self.error_kind:
            data["error_kind"] = self.error_kind
        return data


@dataclass(frozen=True)
class Snapshot:
    """Statuses of every configured printer, in configuration order."""

    printers: Tuple[PrinterStatus, ...] = field(default_factory=tuple)

    def __len__(self) -> int:
        return len(self.printers)

    def __iter__(self):
        return iter(self.printers)

    def __getitem__(self, index: int) -> PrinterStatus:
        return self.printers[index]

    def to_dict(self) -> Dict[str, Any]:
        return {"status": "ok", "printers": [printer.to_dict() for printer in self.printers]}

