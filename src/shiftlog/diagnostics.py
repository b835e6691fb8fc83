"""
Internal diagnostics for shiftlog itself.

Events are structured with structlog but handed to the standard library
``logging`` module, so they stay quiet unless the host application configures a
handler for the ``shiftlog`` namespace.
"""

from __future__ import annotations

import logging

import structlog
from structlog.typing import EventDict, WrappedLogger

logging.getLogger("shiftlog").addHandler(logging.NullHandler())


def add_logger_name(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Add logger name to log event."""
    event_dict["logger"] = getattr(logger, "name", "shiftlog")
    return event_dict


_PROCESSORS = [
    structlog.stdlib.filter_by_level,
    add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.processors.TimeStamper(fmt="iso", utc=True),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
    structlog.stdlib.render_to_log_kwargs,
]


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger bound to a stdlib logger under ``shiftlog``."""
    return structlog.wrap_logger(
        logging.getLogger(name or "shiftlog"),
        processors=_PROCESSORS,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
    )
