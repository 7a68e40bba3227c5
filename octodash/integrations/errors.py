"""Error taxonomy shared by the upstream clients and the aggregator."""

from __future__ import annotations

from typing import Optional


class OctoDashError(Exception):
    """Base class for every error raised by OctoDash."""

    kind = "internal"


class TransportError(OctoDashError):
    """Connection failure or timeout talking to an upstream service."""

    kind = "transport"


class UpstreamError(OctoDashError):
    """Upstream answered with a non-success status."""

    kind = "upstream"

    def __init__(self, status: Optional[int], body: str = "") -> None:
        self.status = status
        self.body = body
        if status is None:
            super().__init__(body or "upstream reported a failure")
        else:
            super().__init__(f"HTTP {status}: {body}")


class DecodeError(OctoDashError):
    """Upstream body could not be decoded into the expected shape."""

    kind = "decode"


class ConfigurationError(OctoDashError):
    """Invalid configuration or missing client wiring. Aborts a whole poll."""

    kind = "configuration"
