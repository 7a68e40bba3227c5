"""OctoPrint integration package."""

from octodash.integrations.octoprint.api import OctoPrintAPI, thumbnail_url
from octodash.integrations.octoprint.types import RawJobInfo, RawPrinterState

__all__ = [
    "OctoPrintAPI",
    "RawJobInfo",
    "RawPrinterState",
    "thumbnail_url",
]
