"""
Configuration loading for OctoDash
Reads the YAML config file and validates the printer list
"""

import os
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import yaml

from octodash.integrations.errors import ConfigurationError
from octodash.integrations.http import DEFAULT_TIMEOUT
from octodash.logger import get_logger

logger = get_logger(__name__)

DEFAULT_CONFIG_FILE = "config.yaml"


@dataclass(frozen=True)
class PrinterConfig:
    id: str
    name: str
    octoprint_url: str
    api_key: str = ""

    def to_public_dict(self) -> Dict[str, str]:
        """Identity fields that are safe to hand to the browser (no API key)."""
        return {"id": self.id, "name": self.name, "octoprint_url": self.octoprint_url}


def load_config(yaml_file: Optional[str] = None) -> Dict[str, Any]:
    """Loads configuration from a YAML file. A missing or unreadable file gives {}."""
    if not yaml_file:
        yaml_file = os.getenv("CONFIG_FILE", DEFAULT_CONFIG_FILE)

    try:
        with open(yaml_file) as file:
            config = yaml.safe_load(file)
    except (OSError, yaml.YAMLError) as e:
        logger.error(f"Error loading configuration file {yaml_file}: {e}")
        return {}

    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ConfigurationError(f"{yaml_file} must contain a mapping at the top level")
    return config


def _printer_from_entry(index: int, entry: Any) -> PrinterConfig:
    if not isinstance(entry, dict):
        raise ConfigurationError(f"printers[{index}] must be a mapping")

    printer_id = str(entry.get("id") or "").strip()
    if not printer_id:
        raise ConfigurationError(f"printers[{index}] has no id")

    octoprint_url = str(entry.get("octoprint_url") or "").strip().rstrip("/")
    if not octoprint_url:
        raise ConfigurationError(f"printer '{printer_id}' has no octoprint_url")

    return PrinterConfig(
        id=printer_id,
        name=str(entry.get("name") or printer_id).strip(),
        octoprint_url=octoprint_url,
        api_key=str(entry.get("api_key") or "").strip(),
    )


def parse_printers(config: Dict[str, Any]) -> Tuple[PrinterConfig, ...]:
    """
    Build the ordered printer list from the config mapping

    Args:
        config: Loaded configuration

    Returns:
        Printers in the order they are configured

    Raises:
        ConfigurationError: printers is not a list, an entry is incomplete or ids repeat
    """
    entries = config.get("printers") or []
    if not isinstance(entries, list):
        raise ConfigurationError("'printers' must be a list")

    printers: List[PrinterConfig] = []
    seen = set()
    for index, entry in enumerate(entries):
        printer = _printer_from_entry(index, entry)
        if printer.id in seen:
            raise ConfigurationError(f"duplicate printer id '{printer.id}'")
        seen.add(printer.id)
        printers.append(printer)
    return tuple(printers)


def spoolman_url(config: Dict[str, Any]) -> str:
    return str(config.get("spoolman_url") or "").strip().rstrip("/")


def request_timeout(config: Dict[str, Any]) -> float:
    value = config.get("request_timeout", DEFAULT_TIMEOUT)
    try:
        timeout = float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"request_timeout must be a number, got {value!r}")
    if timeout <= 0:
        raise ConfigurationError("request_timeout must be positive")
    return timeout
