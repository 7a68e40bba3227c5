"""
Logging setup for OctoDash
One-time root configuration plus a get_logger helper used by every module
"""

import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_logging_configured = False


def _resolve_level(config: Dict[str, Any]) -> int:
    level_name = config.get("log_level") or os.getenv("OCTODASH_LOG_LEVEL", "INFO")
    return getattr(logging, str(level_name).upper(), logging.INFO)


def configure_logging(config: Optional[Dict[str, Any]] = None) -> None:
    """Configure root logging once from the app config (or the environment)"""
    global _logging_configured

    if _logging_configured:
        return

    config = config or {}
    log_file = config.get("log_file") or os.getenv("OCTODASH_LOG_FILE")

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=_resolve_level(config),
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        handlers=handlers,
    )

    # Upstream polling happens every second per dashboard, keep the HTTP stack quiet
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("requests").setLevel(logging.WARNING)
    logging.getLogger("werkzeug").setLevel(logging.INFO)

    _logging_configured = True


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for an OctoDash module.

    Args:
        name: Logger name (usually __name__ from the calling module)

    Returns:
        Logger instance; records propagate to the handlers set up by configure_logging
    """
    return logging.getLogger(name)


def is_configured() -> bool:
    return _logging_configured
