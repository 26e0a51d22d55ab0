"""
Diagnostics for chanlog itself.

Channel output never goes through here. These loggers report what the
library does with files, timers and handler modules, and they sit on top of
stdlib loggers under the ``chanlog`` namespace so the host's logging level
decides what is shown.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

import structlog
from structlog.typing import EventDict, WrappedLogger

ROOT_NAME = "chanlog"


def add_timestamp(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Add ISO 8601 timestamp to log event."""
    event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


_PROCESSORS = [
    structlog.stdlib.filter_by_level,
    structlog.stdlib.add_log_level,
    add_timestamp,
    structlog.processors.format_exc_info,
    structlog.processors.KeyValueRenderer(key_order=["timestamp", "level", "event"]),
]


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured diagnostics logger for ``chanlog.<name>``."""
    full_name = ROOT_NAME if not name else f"{ROOT_NAME}.{name}"
    return structlog.wrap_logger(
        logging.getLogger(full_name),
        processors=_PROCESSORS,
        wrapper_class=structlog.stdlib.BoundLogger,
    )
