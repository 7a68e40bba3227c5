import json
import os
import threading
import time

import pytest

from octodash.config import PrinterConfig
from octodash.integrations.octoprint.api import thumbnail_url
from octodash.integrations.octoprint.types import RawJobInfo, RawPrinterState
from octodash.integrations.spoolman.types import RawSpoolInfo

MOCK_RESPONSES_DIR = os.path.join(os.path.dirname(__file__), "mock_responses")


def load_mock_response(name):
    """Load a canned upstream JSON body from tests/mock_responses"""
    with open(os.path.join(MOCK_RESPONSES_DIR, name)) as f:
        return json.load(f)


def _answer(value):
    if isinstance(value, Exception):
        raise value
    return value


class StubPrinterClient:
    """In-memory printer client; any configured value that is an exception gets raised."""

    def __init__(self, base_url="http://octopi.local", state=None, job=None, spool_id=None, delay=0.0):
        self.base_url = base_url
        self.state = state
        self.job = job
        self.spool_id = spool_id
        self.delay = delay
        self.calls = []
        self._lock = threading.Lock()

    def _record(self, name):
        with self._lock:
            self.calls.append(name)
        if self.delay:
            time.sleep(self.delay)

    def get_printer_state(self):
        self._record("state")
        return _answer(self.state)

    def get_job(self):
        self._record("job")
        return _answer(self.job)

    def get_current_spool(self, tool=0):
        self._record(f"spool:{tool}")
        return _answer(self.spool_id)

    def get_thumbnail_url(self, path):
        return thumbnail_url(self.base_url, path)


class StubInventoryClient:
    def __init__(self, spools=None, error=None):
        self.spools = spools or {}
        self.error = error
        self.lookups = []
        self._lock = threading.Lock()

    def get_spool(self, spool_id):
        with self._lock:
            self.lookups.append(spool_id)
        if self.error is not None:
            raise self.error
        return self.spools[spool_id]


@pytest.fixture
def printing_state():
    return RawPrinterState.from_payload(load_mock_response("printer_state_printing.json"))


@pytest.fixture
def idle_state():
    return RawPrinterState.from_payload(load_mock_response("printer_state_idle.json"))


@pytest.fixture
def job_info():
    return RawJobInfo.from_payload(load_mock_response("job_printing.json"))


@pytest.fixture
def spool_info():
    return RawSpoolInfo.from_payload(load_mock_response("spool.json"))


@pytest.fixture
def printer_configs():
    return (
        PrinterConfig("mk4-left", "MK4 Left", "http://left.local", "key-left"),
        PrinterConfig("mk4-right", "MK4 Right", "http://right.local", "key-right"),
        PrinterConfig("mini", "Mini", "http://mini.local", "key-mini"),
    )
