"""Spoolman spool record parsed into a typed snapshot."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Mapping, Optional


def _optional_float(value: Any) -> Optional[float]:
    if value is None:
        return None
    if isinstance(value, bool):
        raise TypeError("expected a number, got a boolean")
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"expected a finite number, got {value!r}")
    return number


@dataclass(frozen=True)
class RawSpoolInfo:
    id: str
    name: str = ""
    material: str = ""
    vendor: str = ""
    color_hex: str = ""
    total_weight: Optional[float] = None
    used_weight: Optional[float] = None
    remaining_weight: Optional[float] = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "RawSpoolInfo":
        """Parse a /api/v1/spool/<id> body. Raises TypeError/ValueError on a malformed body."""
        if "id" not in payload:
            raise ValueError("spool record has no id")

        filament = payload.get("filament") or {}
        if not isinstance(filament, Mapping):
            raise TypeError("'filament' should be an object")
        vendor = filament.get("vendor") or {}
        if not isinstance(vendor, Mapping):
            raise TypeError("'filament.vendor' should be an object")

        total = payload.get("initial_weight")
        if total is None:
            total = filament.get("weight")

        return cls(
            id=str(payload["id"]),
            name=str(filament.get("name") or ""),
            material=str(filament.get("material") or ""),
            vendor=str(vendor.get("name") or ""),
            color_hex=str(filament.get("color_hex") or "").lstrip("#"),
            total_weight=_optional_float(total),
            used_weight=_optional_float(payload.get("used_weight")),
            remaining_weight=_optional_float(payload.get("remaining_weight")),
        )
