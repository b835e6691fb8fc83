"""
Bridge from the standard library ``logging`` module into a shiftlog Logger.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .severity import Severity

if TYPE_CHECKING:
    from .core import Logger

_LEVEL_MAP = (
    (logging.CRITICAL, Severity.FATAL),
    (logging.ERROR, Severity.ERROR),
    (logging.WARNING, Severity.WARN),
    (logging.INFO, Severity.INFO),
)


def severity_for_level(levelno: int) -> Severity:
    """Map a stdlib level number onto the closest severity at or below it."""
    for level, severity in _LEVEL_MAP:
        if levelno >= level:
            return severity
    return Severity.DEBUG


class ShiftlogHandler(logging.Handler):
    """
    Redirect standard library logging records to a shiftlog Logger.

    The record's logger name becomes the program name of the line. Records
    emitted by shiftlog itself are skipped, since forwarding them would write
    back into the device that produced them.
    """

    def __init__(self, target: "Logger", level: int = logging.NOTSET):
        super().__init__(level)
        self.target = target

    def emit(self, record: logging.LogRecord) -> None:
        if record.name == "shiftlog" or record.name.startswith("shiftlog."):
            return
        try:
            message = self.format(record)
            self.target.add(severity_for_level(record.levelno), message, record.name or "root")
        except Exception:
            self.handleError(record)
