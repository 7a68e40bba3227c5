"""OctoPrint payload typing and parsed snapshots."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Mapping, TypedDict


class CurrentSpoolPayload(TypedDict, total=False):
    success: bool
    spool_id: str
    error: str


def _section(payload: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = payload.get(key)
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise TypeError(f"'{key}' should be an object, got {type(value).__name__}")
    return value


def _number(value: Any) -> float:
    # OctoPrint reports null for unknown temperatures and times
    if value is None:
        return 0.0
    if isinstance(value, bool):
        raise TypeError("expected a number, got a boolean")
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"expected a finite number, got {value!r}")
    return number


@dataclass(frozen=True)
class RawPrinterState:
    text: str = ""
    operational: bool = False
    paused: bool = False
    printing: bool = False
    error: bool = False
    ready: bool = False
    bed_actual: float = 0.0
    bed_target: float = 0.0
    tool_actual: float = 0.0
    tool_target: float = 0.0

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "RawPrinterState":
        """Parse a /api/printer body. Raises TypeError/ValueError on a malformed body."""
        state = _section(payload, "state")
        flags = _section(state, "flags")
        temperature = _section(payload, "temperature")
        bed = _section(temperature, "bed")
        tool = _section(temperature, "tool0")
        return cls(
            text=str(state.get("text") or ""),
            operational=bool(flags.get("operational", False)),
            paused=bool(flags.get("paused", False)),
            printing=bool(flags.get("printing", False)),
            error=bool(flags.get("error", False)),
            ready=bool(flags.get("ready", False)),
            bed_actual=_number(bed.get("actual")),
            bed_target=_number(bed.get("target")),
            tool_actual=_number(tool.get("actual")),
            tool_target=_number(tool.get("target")),
        )


@dataclass(frozen=True)
class RawJobInfo:
    file_path: str = ""
    file_name: str = ""
    completion: float = 0.0
    print_time: int = 0
    print_time_left: int = 0
    estimated_print_time: float = 0.0
    filament_length: float = 0.0
    state: str = ""

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "RawJobInfo":
        """Parse a /api/job body. Raises TypeError/ValueError on a malformed body."""
        job = _section(payload, "job")
        file_info = _section(job, "file")
        filament = _section(job, "filament")
        tool = _section(filament, "tool0")
        progress = _section(payload, "progress")
        return cls(
            file_path=str(file_info.get("path") or ""),
            file_name=str(file_info.get("display") or file_info.get("name") or ""),
            completion=_number(progress.get("completion")),
            print_time=int(_number(progress.get("printTime"))),
            print_time_left=int(_number(progress.get("printTimeLeft"))),
            estimated_print_time=_number(job.get("estimatedPrintTime")),
            filament_length=_number(tool.get("length")),
            state=str(payload.get("state") or ""),
        )
