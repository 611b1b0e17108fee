"""
Stdout logging for the order service.

Every record leaving a configured handler carries ``service_name``, so one
format line works for our loggers and for library loggers (uvicorn, httpx,
aio-pika) alike.
"""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(service_name)s %(name)s %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"


class ServiceNameFilter(logging.Filter):
    """Stamps service_name on records that do not already carry one."""

    def __init__(self, service_name: str) -> None:
        super().__init__()
        self.service_name = service_name

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "service_name"):
            record.service_name = self.service_name
        return True


def _configure_handler(handler: logging.Handler, service_name: str) -> None:
    for f in [f for f in handler.filters if isinstance(f, ServiceNameFilter)]:
        handler.removeFilter(f)
    handler.addFilter(ServiceNameFilter(service_name))
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))


def setup_logging(service_name: str, level: str | int = logging.INFO) -> None:
    """
    Point the root logger at stdout with the service name on every line.

    Repeated calls reconfigure the existing handlers instead of adding more.

    >>> setup_logging("test-service", level="WARNING")
    >>> logging.getLogger().level == logging.WARNING
    True
    >>> len(logging.getLogger().handlers) >= 1
    True
    """
    root = logging.getLogger()
    root.setLevel(level.upper() if isinstance(level, str) else level)
    if not root.handlers:
        root.addHandler(logging.StreamHandler(sys.stdout))
    for handler in root.handlers:
        _configure_handler(handler, service_name)
