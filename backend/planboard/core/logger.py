"""
Logging setup for planboard.

Modules either import the shared ``logger`` or call ``setup_logger(__name__)``.
All loggers live under the ``planboard`` namespace, which gets a single stream
handler the first time it is requested.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Optional

from planboard.core.config import get_settings

ROOT_LOGGER_NAME = "planboard"

_RESERVED_ATTRS = frozenset(
    {
        "name",
        "msg",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "exc_info",
        "exc_text",
        "thread",
        "threadName",
        "message",
        "taskName",
    }
)


class JSONFormatter(logging.Formatter):
    """One JSON object per record, extra fields included."""

    def format(self, record: logging.LogRecord) -> str:
        log_obj: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z",
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)
        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_obj[key] = value
        return json.dumps(log_obj, default=str)


class HumanFormatter(logging.Formatter):
    """Human-readable formatter for local development."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        return f"{timestamp} [{record.levelname}] {record.name}: {record.getMessage()}"


def _configure_root(level: str, json_format: Optional[bool], attach_handler: bool = True) -> logging.Logger:
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if root.handlers or root.level != logging.NOTSET:
        return root

    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    # Under tests records only propagate, so pytest captures them
    if not attach_handler:
        return root

    if json_format is None:
        json_format = not sys.stderr.isatty()

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JSONFormatter() if json_format else HumanFormatter())
    root.addHandler(handler)
    return root


def setup_logger(name: str = ROOT_LOGGER_NAME) -> logging.Logger:
    """
    Get a logger under the planboard namespace.

    Args:
        name: Module name (usually ``__name__``)

    Returns:
        Configured logger
    """
    settings = get_settings()
    level = "DEBUG" if settings.DEBUG else settings.LOG_LEVEL
    root = _configure_root(level, settings.LOG_JSON, attach_handler=not settings.is_test)
    if name == ROOT_LOGGER_NAME:
        return root
    if not name.startswith(f"{ROOT_LOGGER_NAME}."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


logger = setup_logger()
