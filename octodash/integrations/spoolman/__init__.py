"""Spoolman integration package."""

from octodash.integrations.spoolman.api import SpoolmanAPI
from octodash.integrations.spoolman.types import RawSpoolInfo

__all__ = [
    "RawSpoolInfo",
    "SpoolmanAPI",
]
