"""Logging setup shared by the service and the CLI."""

from __future__ import annotations

import logging
import sys

_FORMAT = "%(asctime)s %(levelname)s [%(service)s] %(name)s: %(message)s"

_configured = False


class _ServiceFilter(logging.Filter):
    def __init__(self, service_name: str):
        super().__init__()
        self.service_name = service_name

    def filter(self, record: logging.LogRecord) -> bool:
        record.service = self.service_name
        return True


def setup_logging(level: str = "INFO", service_name: str = "buzzword") -> None:
    """Configure the root logger once. Later calls only adjust the level."""
    global _configured

    root = logging.getLogger()
    root.setLevel(level.upper())
    if _configured:
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(_FORMAT))
    handler.addFilter(_ServiceFilter(service_name))
    root.addHandler(handler)

    # Silence noisy client loggers (one line per request/frame at INFO/DEBUG)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("websockets").setLevel(logging.WARNING)
    _configured = True
